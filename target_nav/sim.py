"""Simulated robot, camera and scheduler for running the navigation core off-robot.

SimulatedRobot implements both the DriveActuator and HeadingSource
interfaces with a simple differential-drive kinematic model:
- Each side's speed is proportional to its motor power
- Rotation follows the speed difference instantly
- Forward speed follows the commanded speed under an acceleration limit,
  so normal driving never produces a jerk large enough to look like a
  collision; ``bump`` injects one

CooperativeScheduler is the minimal host loop: it polls every task once per
tick in insertion order and cancels everything on an abort request.
"""

import logging
import math
from typing import Callable, List, Optional

from . import config
from .errors import check_power
from .interfaces import CameraMode
from .model import DEFAULT_PROFILE, KinematicProfile
from .nav import wrap_degrees, yaw_to_field_angle
from .tasks import Task


class SimulatedRobot:
    """Differential-drive robot on an open field.

    Attributes:
        x, y: Position of the robot center (inches, field frame)
        heading_angle: Continuous yaw (degrees, positive clockwise)
        speed: Forward speed of the center (in/s)
        left, right: Last commanded motor powers
    """

    def __init__(
        self,
        yaw: float = 0.0,
        x: float = 0.0,
        y: float = 0.0,
        profile: KinematicProfile = DEFAULT_PROFILE,
        track_width: float = config.TRACK_WIDTH,
        max_accel_g: float = config.SIM_MAX_ACCEL_G,
    ):
        self.profile = profile
        self.track_width = track_width
        self.max_accel = max_accel_g * config.GRAVITY_IN_PER_S2

        self.x = x
        self.y = y
        self.heading_angle = yaw
        self.speed = 0.0
        self.yaw_rate = 0.0
        self.left = 0.0
        self.right = 0.0

        self.encoder_counts = 0.0
        self.accel_x = 0.0
        self.accel_y = 0.0
        self._bump: Optional[tuple] = None
        self.commands: List[tuple] = []

    # DriveActuator

    def set_differential(self, left: float, right: float) -> None:
        check_power(left, "left power")
        check_power(right, "right power")
        self.left = left
        self.right = right
        self.commands.append((left, right))

    def stop(self) -> None:
        self.left = 0.0
        self.right = 0.0

    def distance(self) -> float:
        return (
            self.profile.distance_per_revolution
            * self.encoder_counts
            / config.ENCODER_UNITS_PER_REVOLUTION
        )

    def reset_encoders(self) -> None:
        self.encoder_counts = 0.0

    # HeadingSource

    def yaw(self) -> float:
        return wrap_degrees(self.heading_angle)

    def angle(self) -> float:
        return self.heading_angle

    def rate(self) -> float:
        return self.yaw_rate

    def reset(self) -> None:
        self.heading_angle = 0.0

    def world_linear_accel_x(self) -> float:
        return self.accel_x

    def world_linear_accel_y(self) -> float:
        return self.accel_y

    # Simulation

    def bump(self, accel_x: float, accel_y: float = 0.0) -> None:
        """Add a one-step acceleration spike (g) on the next step, as from an impact."""
        self._bump = (accel_x, accel_y)

    def step(self, dt: float) -> None:
        """Advance the simulation by dt seconds."""
        v_left = self.left * self.profile.max_velocity
        v_right = self.right * self.profile.max_velocity

        # Positive yaw is clockwise: a faster left side turns clockwise
        self.yaw_rate = math.degrees((v_left - v_right) / self.track_width)
        self.heading_angle += self.yaw_rate * dt

        target_speed = (v_left + v_right) / 2.0
        max_change = self.max_accel * dt
        change = max(-max_change, min(max_change, target_speed - self.speed))
        self.speed += change

        theta = math.radians(yaw_to_field_angle(self.yaw()))
        accel = change / dt / config.GRAVITY_IN_PER_S2
        self.accel_x = accel * math.cos(theta)
        self.accel_y = accel * math.sin(theta)
        if self._bump is not None:
            self.accel_x += self._bump[0]
            self.accel_y += self._bump[1]
            self._bump = None

        self.x += self.speed * math.cos(theta) * dt
        self.y += self.speed * math.sin(theta) * dt
        self.encoder_counts += (
            self.speed * dt * config.ENCODER_UNITS_PER_REVOLUTION
            / self.profile.distance_per_revolution
        )


class SimulatedVision:
    """Camera reporting a fixed target bearing once it has locked on.

    Attributes:
        tx, ty: Bearing reported once locked (degrees)
        lock_after: Number of has_target() calls before the target appears;
            None means the target is never seen
        mode: Current camera mode
    """

    def __init__(self, tx: float, ty: float, lock_after: Optional[int] = 0):
        self.tx = tx
        self.ty = ty
        self.lock_after = lock_after
        self.mode = CameraMode.DRIVER
        self.modes: List[CameraMode] = []
        self._polls = 0

    def has_target(self) -> bool:
        if self.mode is not CameraMode.VISION or self.lock_after is None:
            return False
        self._polls += 1
        return self._polls > self.lock_after

    def bearing_x(self) -> float:
        return self.tx

    def bearing_y(self) -> float:
        return self.ty

    def set_mode(self, mode: CameraMode) -> None:
        self.mode = mode
        self.modes.append(mode)


class CooperativeScheduler:
    """Single-threaded host loop polling tasks once per tick."""

    def __init__(self) -> None:
        self.tasks: List[Task] = []
        self.ticks = 0

    def add(self, task: Task) -> None:
        self.tasks.append(task)

    def abort_all(self) -> None:
        """Cancel every scheduled task."""
        logging.warning(f"Aborting {len(self.tasks)} task(s)")
        for task in list(self.tasks):
            task.cancel()
        self.tasks.clear()

    def run_once(self) -> None:
        self.ticks += 1
        for task in list(self.tasks):
            if task.tick().done and task in self.tasks:
                self.tasks.remove(task)

    @property
    def idle(self) -> bool:
        return not self.tasks

    def run(
        self,
        max_ticks: int,
        on_tick: Optional[Callable[[int], None]] = None,
    ) -> int:
        """Run until no tasks remain or max_ticks is reached.

        Args:
            max_ticks: Tick budget
            on_tick: Called after every tick with the tick number (e.g. to
                step a simulation)

        Returns:
            Number of ticks run
        """
        start = self.ticks
        while not self.idle and self.ticks - start < max_ticks:
            self.run_once()
            if on_tick is not None:
                on_tick(self.ticks)
        return self.ticks - start
