"""Trapezoidal motion profile for driving a fixed distance.

The controller approximates a trapezoidal velocity profile (constant
acceleration, constant velocity, constant deceleration) by ramping motor
power one step per control tick, using the kinematic model to decide how fast
the robot can accelerate. When the distance is too short to reach the
commanded velocity the profile degenerates to a triangle: accelerate for half
the distance, then decelerate.

All per-leg state lives in a TrapezoidalRun owned by the caller and passed
to every controller call.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum

from .model import DEFAULT_PROFILE, KinematicProfile


class RunPhase(Enum):
    ACCEL = "accel"
    RUN = "run"
    DECEL = "decel"
    DONE = "done"


class ProfileShape(Enum):
    TRAPEZOIDAL = "trapezoidal"
    TRIANGULAR = "triangular"
    INVALID = "invalid"


@dataclass
class TrapezoidalRun:
    """State of one drive-for-distance leg.

    Attributes:
        distance: Target distance
        velocity: Commanded cruise velocity
        shape: Profile shape chosen at planning time
        accel_steps: Ticks spent accelerating
        run_steps: Ticks spent at constant power
        accel_distance: Distance covered while accelerating
        phase: Current profile phase
        steps_elapsed: Ticks advanced so far
        steps_accel: Accelerating ticks advanced so far
        steps_run: Constant-power ticks advanced so far
        power: Last base power produced
    """

    distance: float
    velocity: float
    shape: ProfileShape
    accel_steps: int = 0
    run_steps: int = 0
    accel_distance: float = 0.0
    phase: RunPhase = RunPhase.ACCEL
    steps_elapsed: int = 0
    steps_accel: int = 0
    steps_run: int = 0
    power: float = 0.0

    @property
    def invalid(self) -> bool:
        return self.shape is ProfileShape.INVALID


class TrapezoidalMotionController:
    """Plan and step trapezoidal or triangular drive profiles.

    Attributes:
        profile: Kinematic constants of the drive train
    """

    def __init__(self, profile: KinematicProfile = DEFAULT_PROFILE):
        self.profile = profile

    def plan(self, distance: float, velocity: float) -> TrapezoidalRun:
        """Compute the profile for driving a distance at a velocity.

        A non-positive or over-limit velocity (or a negative distance) gives
        an INVALID run that is already DONE and never commands power.

        Args:
            distance: Distance to drive
            velocity: Cruise velocity (distance units per second)

        Returns:
            A fresh run in the ACCEL phase (or DONE if invalid)
        """
        p = self.profile
        if velocity <= 0.0 or velocity > p.max_velocity or distance < 0.0:
            logging.error(
                f"Drive for distance rejected: velocity {velocity} distance {distance} "
                f"(max velocity {p.max_velocity:.3f})"
            )
            return TrapezoidalRun(distance, velocity, ProfileShape.INVALID, phase=RunPhase.DONE)

        # Assume a trapezoid first
        accel_steps = int(math.ceil(velocity / p.velocity_per_step))
        accel_distance = p.accel_distance(accel_steps)

        if 2.0 * accel_distance < distance:
            shape = ProfileShape.TRAPEZOIDAL
            run_velocity = accel_steps * p.velocity_per_step
            run_distance = distance - 2.0 * accel_distance
            run_time = run_distance / run_velocity
            run_steps = int(math.floor(run_time / p.sec_per_step))
        else:
            # Not enough room to reach full velocity: accelerate for half the
            # distance and decelerate for the rest
            shape = ProfileShape.TRIANGULAR
            accel_steps = p.accel_steps_for_distance(distance / 2.0)
            accel_distance = p.accel_distance(accel_steps)
            run_steps = 0

        logging.debug(
            f"Profile {shape.value}: accel_steps={accel_steps} "
            f"accel_distance={accel_distance:.3f} run_steps={run_steps}"
        )
        return TrapezoidalRun(
            distance,
            velocity,
            shape,
            accel_steps=accel_steps,
            run_steps=run_steps,
            accel_distance=accel_distance,
        )

    def advance(self, run: TrapezoidalRun) -> float:
        """Advance the run by one control tick.

        Args:
            run: The leg state, updated in place

        Returns:
            Base motor power to command for this tick
        """
        p = self.profile
        if run.phase is RunPhase.DONE:
            run.power = 0.0
            return run.power

        power = p.start_power if run.steps_elapsed == 0 else run.power
        run.steps_elapsed += 1

        if run.phase is RunPhase.ACCEL:
            run.steps_accel += 1
            power = min(1.0, power + p.power_per_step)
            if run.steps_accel >= run.accel_steps:
                run.phase = RunPhase.RUN if run.run_steps > 0 else RunPhase.DECEL
        elif run.phase is RunPhase.RUN:
            run.steps_run += 1
            if run.steps_run >= run.run_steps:
                run.phase = RunPhase.DECEL
        elif run.phase is RunPhase.DECEL:
            # Keep creeping toward the target at no less than the start power
            power = max(p.start_power, power - p.power_per_step)

        run.power = power
        return power

    def is_finished(self, run: TrapezoidalRun, traveled: float) -> bool:
        """True once the run is invalid or the traveled distance reaches the target."""
        return run.invalid or traveled >= run.distance

    def finish(self, run: TrapezoidalRun) -> None:
        """Mark the run DONE so any further advance commands zero power."""
        run.phase = RunPhase.DONE
        run.power = 0.0
