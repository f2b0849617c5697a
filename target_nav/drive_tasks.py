"""Turn and drive tasks that own the drive train while they run.

Each task builds its own heading controller and collision monitor when it
starts, polls the collision monitor before computing any motor command, and
stops the drive and disables its PID loop on every exit path.
"""

import logging
import math
from typing import Optional

from .collision import CollisionMonitor
from .config import DriveSettings
from .errors import check_power
from .heading_controller import HeadingController
from .interfaces import DriveContext
from .motion_profile import TrapezoidalMotionController, TrapezoidalRun
from .tasks import SequentialTask, Status, Task
from .vector import Vec2d


class _DriveTrainTask(Task):
    """Common plumbing for tasks that command the drive train."""

    def __init__(self, context: DriveContext):
        super().__init__()
        self.context = context
        self.controller: Optional[HeadingController] = None
        self.monitor: Optional[CollisionMonitor] = None

    def on_start(self) -> None:
        self.controller = HeadingController(self.context.heading)
        self.monitor = CollisionMonitor(self.context.heading, self.context.abort)

    def collision_detected(self) -> bool:
        """Poll the collision monitor; cancel this task on a collision."""
        if self.monitor.poll():
            self.cancel()
            return True
        return self.done

    def on_stop(self) -> None:
        self.context.drive.stop()
        if self.controller is not None:
            self.controller.disable()


class TurnTask(_DriveTrainTask):
    """Turn in place to a field-relative angle.

    Attributes:
        field_angle: Target angle (degrees, counterclockwise from +X)
    """

    name = "turn"

    def __init__(self, context: DriveContext, field_angle: float):
        super().__init__(context)
        self.field_angle = field_angle

    def on_start(self) -> None:
        super().on_start()
        self.monitor.reset()
        self.controller.start_turn(self.field_angle)

    def on_tick(self) -> None:
        if self.collision_detected():
            return
        if self.controller.is_turn_finished():
            self.finish(Status.SUCCEEDED)
            return
        self.controller.update()
        self.context.drive.set_differential(*self.controller.turn_powers())
        logging.debug(f"turn: {self.controller.get_diagnostics()}")


class DriveTask(_DriveTrainTask):
    """Drive straight for a distance using a trapezoidal motion profile.

    An invalid velocity fails the task at start without commanding any
    power.

    Attributes:
        distance: Distance to drive
        velocity: Cruise velocity (distance units per second)
        run: Profile state for this leg, created at start
    """

    name = "drive"

    def __init__(self, context: DriveContext, distance: float, velocity: float):
        super().__init__(context)
        self.distance = distance
        self.velocity = velocity
        self.profile = TrapezoidalMotionController(context.profile)
        self.run: Optional[TrapezoidalRun] = None

    def on_start(self) -> None:
        super().on_start()
        self.run = self.profile.plan(self.distance, self.velocity)
        if self.run.invalid:
            logging.error("Drive straight for distance failed - velocity not legitimate")
            self.finish(Status.FAILED)
            return
        self.monitor.reset()
        self.context.drive.reset_encoders()
        self.controller.start_drive_straight()

    def on_tick(self) -> None:
        if self.collision_detected():
            return
        traveled = self.context.drive.distance()
        if self.profile.is_finished(self.run, traveled):
            logging.info(f"Ending drive for distance at {traveled:.2f}")
            self.finish(Status.SUCCEEDED)
            return

        power = self.profile.advance(self.run)
        self.controller.update()
        self.context.drive.set_differential(*self.controller.straight_powers(power))
        logging.debug(
            f"drive: phase {self.run.phase.value} power {power:.4f} at distance {traveled:.2f}"
        )

    def on_stop(self) -> None:
        if self.run is not None:
            self.profile.finish(self.run)
        super().on_stop()


class DriveStraightTask(_DriveTrainTask):
    """Drive straight at a fixed power with heading hold until a timeout.

    Raises:
        DriveRangeError: If the power is outside [-1, 1]
    """

    name = "drive straight"

    def __init__(self, context: DriveContext, power: float, timeout: float):
        super().__init__(context)
        self.power = check_power(power, "drive straight power")
        self.timeout = timeout
        self.ticks = 0

    def on_start(self) -> None:
        super().on_start()
        self.ticks = 0
        self.monitor.reset()
        self.controller.start_drive_straight()

    def on_tick(self) -> None:
        if self.collision_detected():
            return
        if self.ticks * self.context.profile.sec_per_step >= self.timeout:
            self.finish(Status.SUCCEEDED)
            return
        self.ticks += 1
        self.controller.update()
        self.context.drive.set_differential(*self.controller.straight_powers(self.power))


def vector_drive(
    context: DriveContext, vec: Vec2d, velocity: float, timeout: Optional[float] = None
) -> SequentialTask:
    """Turn to a vector's angle, then drive its length at a velocity."""
    heading = math.degrees(vec.theta)
    task = SequentialTask(
        [TurnTask(context, heading), DriveTask(context, vec.r, velocity)],
        timeout=timeout,
        sec_per_step=context.profile.sec_per_step,
    )
    task.name = f"vector drive {heading:.1f}deg {vec.r:.1f}"
    return task


def vector_drive_from_settings(context: DriveContext, settings: DriveSettings) -> SequentialTask:
    """Vector drive built from the operator's drive angle, distance and velocity."""
    vec = Vec2d.make_polar(settings.drive_distance, math.radians(settings.drive_angle))
    return vector_drive(context, vec, settings.drive_velocity, timeout=settings.max_time)
