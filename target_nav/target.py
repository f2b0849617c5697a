"""Route calculation to a vision target.

A TargetCalculator is initialized with the camera's mounting parameters and
computes the route the robot should drive to arrive at a target seen by the
camera: first an "intercept" leg onto the target's normal line, then a final
"normal" leg that approaches the target perpendicularly and ends a fixed
standoff distance away.
"""

import logging
import math
from dataclasses import dataclass

from .config import TANGENT_GUARD
from .errors import DomainError
from .vector import Vec2d


@dataclass(frozen=True)
class RouteToTarget:
    """The vectors describing a route from the robot to a vision target.

    Attributes:
        target_direct_vec: Vector straight from the camera lens to the target
        intercept_vec: Vector from the robot, along its first leg, to the
            start of the normal vector
        normal_vec: Vector from the end of the intercept leg to the standoff
            point, perpendicular to the target

    With a zero camera offset, normal_vec + intercept_vec == target_direct_vec.
    A nonzero offset is subtracted from the intercept vector only.
    """

    target_direct_vec: Vec2d
    intercept_vec: Vec2d
    normal_vec: Vec2d


class TargetCalculator:
    """Compute target vectors and routes from camera bearings.

    Bearings (tx, ty) are the horizontal and vertical angles, in degrees, from
    the camera's boresight to the target center. tx is measured clockwise
    while field angles run counterclockwise.
    """

    def __init__(self, camera_height: float, aim_angle: float):
        """Initialize the calculator.

        Args:
            camera_height: Height of the camera lens above the floor
                (same units as target heights and standoff distances)
            aim_angle: Vertical aiming angle of the camera above the
                horizon (degrees)
        """
        self.camera_height = camera_height
        self.aim_angle = math.radians(aim_angle)

    def target_distance(self, ty: float, target_height: float) -> float:
        """Floor distance from the camera lens to the target.

            distance = (target height - camera height) / tan(aim angle + ty)

        Raises:
            DomainError: If the elevation angle is too close to vertical
                (tangent diverges) or to horizontal (division by zero)
        """
        elevation = self.aim_angle + math.radians(ty)
        if abs(math.cos(elevation)) < TANGENT_GUARD:
            raise DomainError(
                f"Elevation {math.degrees(elevation):.3f} deg is too close to vertical"
            )
        if abs(math.sin(elevation)) < TANGENT_GUARD:
            raise DomainError(
                f"Elevation {math.degrees(elevation):.3f} deg is level with the camera"
            )
        return (target_height - self.camera_height) / math.tan(elevation)

    def target_vector(
        self, tx: float, ty: float, robot_vec: Vec2d, target_height: float
    ) -> Vec2d:
        """Field-relative vector from the camera lens to the target.

        Args:
            tx: Horizontal bearing (degrees, e.g. -27..27 left to right)
            ty: Vertical bearing (degrees, e.g. -20.5..20.5 bottom to top)
            robot_vec: Field-relative unit vector in the robot's direction
            target_height: Height of the target center above the floor

        Raises:
            DomainError: If the bearing gives a singular or negative distance
        """
        distance = self.target_distance(ty, target_height)
        logging.debug(f"Target bearing tx={tx:.3f} ty={ty:.3f} distance={distance:.3f}")
        return Vec2d.make_polar(distance, robot_vec.theta - math.radians(tx))

    def route_to_target(
        self,
        tx: float,
        ty: float,
        robot_vec: Vec2d,
        cam_vec: Vec2d,
        target_norm: Vec2d,
        target_height: float,
        standoff: float,
    ) -> RouteToTarget:
        """Calculate the route to the target at the given bearing.

        Args:
            tx: Horizontal bearing (degrees)
            ty: Vertical bearing (degrees)
            robot_vec: Field-relative unit vector in the robot's direction
            cam_vec: Vector from the camera lens to the robot's center
            target_norm: Field-relative unit vector pointing perpendicularly
                away from the target face
            target_height: Height of the target center above the floor
            standoff: Length of the final perpendicular approach

        Returns:
            The route vectors
        """
        target_vec = self.target_vector(tx, ty, robot_vec, target_height)
        normal_vec = target_norm.scale(-standoff)
        intercept_vec = target_vec.sub(normal_vec).sub(cam_vec)
        return RouteToTarget(target_vec, intercept_vec, normal_vec)


def camera_vector(robot_vec: Vec2d, offset_from_center: float) -> Vec2d:
    """Vector from the camera lens to the robot's center.

    The result is perpendicular to robot_vec. A camera left of center
    (negative offset) gives a vector pointing clockwise of the robot.

    Args:
        robot_vec: Field-relative unit vector in the robot's direction
        offset_from_center: Lateral camera offset, positive to the right
    """
    return robot_vec.normal().scale(-offset_from_center)
