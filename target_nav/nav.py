"""Heading conversions between gyro yaw and field-relative angles.

The gyro reports yaw in degrees, positive clockwise, with 0 pointing along
the field's +Y axis. Field angles are measured counterclockwise from the +X
axis. Both are kept in [-180, 180].
"""

import math

from .vector import Vec2d


def wrap_degrees(angle: float) -> float:
    """Wrap an angle in degrees into [-180, 180]."""
    angle = math.fmod(angle, 360.0)
    if angle > 180.0:
        angle -= 360.0
    elif angle < -180.0:
        angle += 360.0
    return angle


def yaw_to_field_angle(yaw: float) -> float:
    """Convert gyro yaw (degrees) to a field-relative angle (degrees)."""
    return wrap_degrees(90.0 - yaw)


def field_angle_to_yaw(field_angle: float) -> float:
    """Convert a field-relative angle (degrees) to gyro yaw (degrees)."""
    return wrap_degrees(90.0 - field_angle)


def yaw_to_vec(yaw: float) -> Vec2d:
    """Field-relative unit vector for a robot at the given yaw."""
    return Vec2d.make_polar(1.0, math.radians(yaw_to_field_angle(yaw)))
