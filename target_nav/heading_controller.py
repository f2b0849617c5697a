"""Heading controller for turning to an angle and driving straight.

This module provides a continuous PID loop bound to the heading source. The
loop output is a differential correction rate that is either mixed into a
common drive power (heading hold while driving straight) or applied directly
as opposite powers on each side (turn in place).
"""

import logging
from typing import Optional, Tuple

from . import config
from .errors import check_power
from .interfaces import HeadingSource
from .nav import field_angle_to_yaw, wrap_degrees


class ContinuousPID:
    """PID controller over a wrap-around input range.

    The error is taken the short way around the input range, so a setpoint of
    179 degrees and a measurement of -179 degrees is an error of -2 degrees.

    Control law:
        output = K_p * e + K_i * integral(e) + K_d * (e - e_prev) + K_f * setpoint

    The derivative term uses the per-sample change in error (the loop runs
    once per control tick). Output is clamped to +/- output_limit.

    Attributes:
        kp: Proportional gain
        ki: Integral gain
        kd: Derivative gain
        kf: Setpoint feedforward gain
        input_min: Lower end of the continuous input range
        input_max: Upper end of the continuous input range
        output_limit: Output magnitude limit
        integral_limit: Anti-windup clamp for the integral term
    """

    def __init__(
        self,
        kp: float = config.HEADING_KP,
        ki: float = config.HEADING_KI,
        kd: float = config.HEADING_KD,
        kf: float = config.HEADING_KF,
        input_min: float = -180.0,
        input_max: float = 180.0,
        output_limit: float = config.HEADING_OUTPUT_LIMIT,
        integral_limit: float = config.HEADING_INTEGRAL_LIMIT,
    ):
        # Gains
        self.kp = kp
        self.ki = ki
        self.kd = kd
        self.kf = kf

        # Ranges
        self.input_min = input_min
        self.input_max = input_max
        self.output_limit = output_limit
        self.integral_limit = integral_limit

        self.setpoint: float = 0.0
        self.enabled: bool = False

        # Integral state (accumulated error)
        self.integral: float = 0.0

        # Previous error for derivative computation
        self.prev_error: float = 0.0

        self.output: float = 0.0

    def continuous_error(self, measurement: float) -> float:
        """Setpoint minus measurement, taken the short way around the range."""
        span = self.input_max - self.input_min
        error = self.setpoint - measurement
        if abs(error) > span / 2.0:
            error = error - span if error > 0 else error + span
        return error

    def calculate(self, measurement: float) -> float:
        """Run one loop iteration and return the clamped output.

        Returns 0.0 without touching internal state while disabled.
        """
        if not self.enabled:
            return 0.0

        error = self.continuous_error(measurement)
        derivative = error - self.prev_error
        self.prev_error = error

        # Accumulate integral of error with anti-windup
        if self.ki != 0.0:
            self.integral += error
            self.integral = max(
                -self.integral_limit / abs(self.ki),
                min(self.integral_limit / abs(self.ki), self.integral),
            )

        output = (
            self.kp * error
            + self.ki * self.integral
            + self.kd * derivative
            + self.kf * self.setpoint
        )
        self.output = max(-self.output_limit, min(self.output_limit, output))
        return self.output

    def enable(self, setpoint: float) -> None:
        self.reset()
        self.setpoint = setpoint
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False
        self.output = 0.0

    def reset(self) -> None:
        """Reset integral and derivative states to zero."""
        self.integral = 0.0
        self.prev_error = 0.0
        self.output = 0.0


class HeadingController:
    """Heading hold and turn-to-angle on top of a ContinuousPID.

    Yaw from the heading source is positive clockwise, so a positive
    correction rate turns the robot clockwise: the left side speeds up and the
    right side slows down.

    Attributes:
        heading: Heading source sampled each update
        pid: The continuous PID loop
        tolerance_degrees: Heading error below which a turn can finish
        tolerance_rate: Rotation rate (deg/s) below which a turn can finish
        rate: Correction rate from the most recent update
    """

    def __init__(
        self,
        heading: HeadingSource,
        pid: Optional[ContinuousPID] = None,
        tolerance_degrees: float = config.TURN_TOLERANCE_DEGREES,
        tolerance_rate: float = config.TURN_TOLERANCE_RATE,
    ):
        self.heading = heading
        self.pid = pid if pid is not None else ContinuousPID()
        self.tolerance_degrees = tolerance_degrees
        self.tolerance_rate = tolerance_rate
        self.rate: float = 0.0

    @property
    def enabled(self) -> bool:
        return self.pid.enabled

    @property
    def target_yaw(self) -> float:
        return self.pid.setpoint

    def start_hold(self, yaw: float) -> None:
        """Enable the loop holding the given yaw (degrees)."""
        self.rate = 0.0
        self.pid.enable(wrap_degrees(yaw))

    def start_turn(self, field_angle: float) -> None:
        """Enable the loop to turn to a field-relative angle (degrees)."""
        yaw = field_angle_to_yaw(field_angle)
        logging.info(
            f"Start turn to field angle {field_angle:.2f} (yaw {yaw:.2f}) "
            f"at yaw {self.heading.yaw():.2f}"
        )
        self.start_hold(yaw)

    def start_drive_straight(self) -> None:
        """Enable the loop holding the current yaw."""
        yaw = self.heading.yaw()
        logging.debug(f"Start drive straight at yaw {yaw:.2f}")
        self.start_hold(yaw)

    def update(self) -> float:
        """Sample the heading and return the new correction rate."""
        self.rate = self.pid.calculate(self.heading.yaw())
        return self.rate

    def straight_powers(self, power: float) -> Tuple[float, float]:
        """Left/right powers for driving straight at a base power.

        The correction is split evenly between the sides. If that pushes
        either side out of [-1, 1], that side is pinned to the base power and
        the other side takes the full correction, preserving the turning
        effect instead of clipping it away.

        Args:
            power: Base motor power (-1.0 .. 1.0)

        Raises:
            DriveRangeError: If the base power is out of range
        """
        check_power(power, "drive straight power")
        left = power + self.rate / 2.0
        right = power - self.rate / 2.0

        if not -1.0 <= left <= 1.0:
            left, right = power, power - self.rate
        elif not -1.0 <= right <= 1.0:
            left, right = power + self.rate, power
        return left, right

    def turn_powers(self) -> Tuple[float, float]:
        """Left/right powers for turning in place."""
        return self.rate / 2.0, -self.rate / 2.0

    def heading_error(self) -> float:
        return wrap_degrees(self.heading.yaw() - self.pid.setpoint)

    def is_turn_finished(self) -> bool:
        """True when the heading is within tolerance and the robot has stopped rotating.

        Disables the loop once finished.
        """
        error = abs(self.heading_error())
        speed = abs(self.heading.rate())
        finished = error < self.tolerance_degrees and speed < self.tolerance_rate
        if finished:
            logging.info(f"End turn at yaw {self.heading.yaw():.2f}")
            self.disable()
        return finished

    def disable(self) -> None:
        self.pid.disable()
        self.rate = 0.0

    def get_diagnostics(self) -> dict:
        """Get diagnostic information for logging and debugging."""
        return {
            "enabled": self.pid.enabled,
            "setpoint": self.pid.setpoint,
            "yaw": self.heading.yaw(),
            "error": self.pid.prev_error,
            "integral": self.pid.integral,
            "rate": self.rate,
        }
