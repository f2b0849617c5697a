"""Interfaces of the collaborators the navigation core depends on.

The core never talks to hardware directly. The vision camera, the gyro and
the drive train are passed in as objects implementing these protocols, and
the scheduler's abort request is a plain callable.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from .model import DEFAULT_PROFILE, KinematicProfile


class CameraMode(Enum):
    VISION = "vision"  # Processing enabled, LEDs on
    DRIVER = "driver"  # Plain video for the driver, LEDs off


class VisionSource(Protocol):
    def has_target(self) -> bool: ...

    def bearing_x(self) -> float:
        """Horizontal angle from crosshair to target (degrees)."""
        ...

    def bearing_y(self) -> float:
        """Vertical angle from crosshair to target (degrees)."""
        ...

    def set_mode(self, mode: CameraMode) -> None: ...


class HeadingSource(Protocol):
    def yaw(self) -> float:
        """Heading in degrees, -180..180, positive clockwise."""
        ...

    def angle(self) -> float:
        """Continuous accumulated heading (degrees)."""
        ...

    def rate(self) -> float:
        """Rotation rate (degrees/second)."""
        ...

    def reset(self) -> None: ...

    def world_linear_accel_x(self) -> float:
        """World-frame linear acceleration along X (g)."""
        ...

    def world_linear_accel_y(self) -> float:
        """World-frame linear acceleration along Y (g)."""
        ...


class DriveActuator(Protocol):
    def set_differential(self, left: float, right: float) -> None:
        """Command left/right motor power in [-1, 1].

        Raises DriveRangeError outside that range.
        """
        ...

    def stop(self) -> None: ...

    def distance(self) -> float:
        """Distance traveled since the encoders were last reset."""
        ...

    def reset_encoders(self) -> None: ...


AbortHandler = Callable[[], None]
"""Request from the core to the scheduler to cancel all running tasks."""


@dataclass
class DriveContext:
    """Capabilities handed to every drive task.

    Attributes:
        drive: Drive train actuator
        heading: Heading (gyro) source, also providing linear acceleration
        abort: Scheduler abort-all request used on collisions
        profile: Kinematic model of the drive train
    """

    drive: DriveActuator
    heading: HeadingSource
    abort: AbortHandler
    profile: KinematicProfile = DEFAULT_PROFILE
