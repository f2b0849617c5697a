"""Driving a computed route to a vision target.

A route is two legs, each a turn to a heading followed by a drive for a
distance: first the intercept leg onto the target's normal line, then the
final perpendicular approach. The legs run strictly one after the other so
only one of them owns the drive train at a time.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from . import config
from .config import DriveSettings
from .drive_tasks import DriveTask, TurnTask
from .errors import DomainError
from .interfaces import CameraMode, DriveContext, VisionSource
from .nav import yaw_to_vec
from .orientation import STANDARD_TARGETS, TargetOrientationMap
from .target import RouteToTarget, TargetCalculator, camera_vector
from .tasks import SequentialTask, Status, Task
from .vector import Vec2d


@dataclass(frozen=True)
class RouteLeg:
    """One turn-and-drive leg of a route.

    Attributes:
        heading_degrees: Field angle to turn to before driving
        distance: Distance to drive
        velocity: Cruise velocity for the drive
    """

    heading_degrees: float
    distance: float
    velocity: float

    @classmethod
    def from_vector(cls, vec: Vec2d, velocity: float) -> "RouteLeg":
        return cls(math.degrees(vec.theta), vec.r, velocity)


def route_legs(
    route: RouteToTarget, intercept_velocity: float, normal_velocity: float
) -> List[RouteLeg]:
    """Convert a route into its ordered intercept and normal legs."""
    return [
        RouteLeg.from_vector(route.intercept_vec, intercept_velocity),
        RouteLeg.from_vector(route.normal_vec, normal_velocity),
    ]


class RouteTask(SequentialTask):
    """Drive both legs of a route in order.

    Each leg is a nested sequence of a TurnTask and a DriveTask.
    """

    name = "route"

    def __init__(
        self,
        context: DriveContext,
        route: RouteToTarget,
        intercept_velocity: float,
        normal_velocity: float,
        timeout: Optional[float] = None,
    ):
        self.route = route
        self.legs = route_legs(route, intercept_velocity, normal_velocity)
        children = []
        for i, leg in enumerate(self.legs):
            child = SequentialTask(
                [
                    TurnTask(context, leg.heading_degrees),
                    DriveTask(context, leg.distance, leg.velocity),
                ],
                sec_per_step=context.profile.sec_per_step,
            )
            child.name = f"leg {i + 1}"
            children.append(child)
        super().__init__(children, timeout=timeout, sec_per_step=context.profile.sec_per_step)

    def on_start(self) -> None:
        for i, leg in enumerate(self.legs, 1):
            logging.info(
                f"Route leg {i}: heading {leg.heading_degrees:.2f} deg, "
                f"distance {leg.distance:.2f} at {leg.velocity:.1f}/s"
            )
        super().on_start()


class DriveRouteToTargetTask(Task):
    """Find the target in view, compute the route to it and drive it.

    On start the robot and camera vectors and the expected target normal are
    captured from the current yaw and the camera is switched to vision mode.
    Each tick then waits for the camera to lock on, up to the search timeout.
    Once a target is seen the route is computed, the camera goes back to
    driver mode and a RouteTask takes over.

    Attributes:
        context: Drive capabilities
        vision: Camera providing target bearings
        settings: Operator settings (standoff, velocities, timeouts)
        orientation: Map from yaw to target normal (standard or rocket)
        calculator: Route calculator for the mounted camera
        route_task: The route being driven, once computed
    """

    name = "drive route to target"

    def __init__(
        self,
        context: DriveContext,
        vision: VisionSource,
        settings: Optional[DriveSettings] = None,
        orientation: TargetOrientationMap = STANDARD_TARGETS,
        calculator: Optional[TargetCalculator] = None,
        target_height: float = config.TARGET_HEIGHT,
        camera_offset: float = config.CAMERA_OFFSET_FROM_CENTER,
    ):
        super().__init__()
        self.context = context
        self.vision = vision
        self.settings = settings if settings is not None else DriveSettings()
        self.orientation = orientation
        self.calculator = calculator or TargetCalculator(
            config.CAMERA_HEIGHT, config.CAMERA_AIM_ANGLE
        )
        self.target_height = target_height
        self.camera_offset = camera_offset

        self.robot_vec: Optional[Vec2d] = None
        self.cam_vec: Optional[Vec2d] = None
        self.target_norm: Optional[Vec2d] = None
        self.route: Optional[RouteToTarget] = None
        self.route_task: Optional[RouteTask] = None
        self.search_ticks = 0

    def on_start(self) -> None:
        yaw = self.context.heading.yaw()
        self.robot_vec = yaw_to_vec(yaw)
        self.cam_vec = camera_vector(self.robot_vec, self.camera_offset)
        self.target_norm = self.orientation.lookup(yaw)
        self.route = None
        self.route_task = None
        self.search_ticks = 0
        logging.info(f"{self.name}: searching for {self.orientation.name} target at yaw {yaw:.2f}")
        self.vision.set_mode(CameraMode.VISION)

    def on_tick(self) -> None:
        if self.route_task is not None:
            status = self.route_task.tick()
            if status.done:
                self.finish(status)
            return

        # It can take a while for the camera to lock onto the target
        if not self.vision.has_target():
            self.search_ticks += 1
            if self.search_ticks * self.context.profile.sec_per_step >= self.settings.route_timeout:
                logging.warning(f"{self.name}: timed out with no target seen")
                self.finish(Status.FAILED)
            return

        tx = self.vision.bearing_x()
        ty = self.vision.bearing_y()
        logging.info(f"Target at [{tx:.3f}, {ty:.3f}]")
        self.vision.set_mode(CameraMode.DRIVER)
        try:
            self.route = self.calculator.route_to_target(
                tx,
                ty,
                self.robot_vec,
                self.cam_vec,
                self.target_norm,
                self.target_height,
                self.settings.standoff_distance,
            )
        except DomainError as e:
            logging.error(f"{self.name}: cannot compute route: {e}")
            self.finish(Status.FAILED)
            return

        logging.info(f"Intercept: {self.route.intercept_vec.to_polar_string()}")
        logging.info(f"Normal: {self.route.normal_vec.to_polar_string()}")
        logging.info(f"Target: {self.route.target_direct_vec.to_polar_string()}")

        self.route_task = RouteTask(
            self.context,
            self.route,
            self.settings.drive_velocity,
            self.settings.normal_velocity,
            timeout=self.settings.max_time,
        )
        self.route_task.start()

    def on_stop(self) -> None:
        if self.route_task is not None:
            self.route_task.cancel()
        else:
            self.vision.set_mode(CameraMode.DRIVER)
