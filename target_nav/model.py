"""
Differential drive kinematic model.

This module encapsulates everything specific to the drive train hardware
(motors, gearing, wheels) in one place, and derives the velocity and power
constants the motion profile needs from those physical limits.

The motor is modelled as linear above a fixed static-friction voltage:
    velocity = (voltage - start_voltage) / kV    for voltage >= start_voltage
    velocity = 0                                 otherwise
"""

import math
from dataclasses import dataclass

from . import config
from .errors import DomainError


@dataclass(frozen=True)
class KinematicProfile:
    """Physical drive train limits and the constants derived from them.

    Attributes:
        max_voltage: Voltage at motor power 1.0 (V)
        max_motor_speed: Motor free speed (rev/s)
        wheel_diameter: Wheel diameter (in)
        gear_reduction: Motor-to-wheel gear reduction
        sec_per_step: Control tick duration (s)
        start_voltage: Voltage needed to overcome static friction (V)
        accel_time: Time to accelerate from rest to max velocity (s)
    """

    max_voltage: float = config.MAX_VOLTAGE
    max_motor_speed: float = config.MAX_MOTOR_SPEED
    wheel_diameter: float = config.WHEEL_DIAMETER
    gear_reduction: float = config.GEAR_REDUCTION
    sec_per_step: float = config.SEC_PER_STEP
    start_voltage: float = config.START_VOLTAGE
    accel_time: float = config.ACCEL_TIME

    @property
    def distance_per_revolution(self) -> float:
        return math.pi * self.wheel_diameter

    @property
    def max_velocity(self) -> float:
        """Top speed of the robot (in/s)."""
        return (self.distance_per_revolution * self.max_motor_speed) / self.gear_reduction

    @property
    def kv(self) -> float:
        """Volts per unit of velocity."""
        return self.max_voltage / self.max_velocity

    @property
    def accel_steps(self) -> float:
        """Number of ticks needed to accelerate from rest to max velocity."""
        return self.accel_time / self.sec_per_step

    @property
    def velocity_per_step(self) -> float:
        """Velocity change for a single accelerating (or decelerating) tick."""
        return self.max_velocity / self.accel_steps

    @property
    def power_per_step(self) -> float:
        """Motor power change per tick, the power delta for velocity_per_step."""
        return self.voltage_to_power(self.kv * self.velocity_per_step)

    @property
    def start_power(self) -> float:
        """Minimum motor power that overcomes static friction."""
        return self.voltage_to_power(self.start_voltage)

    # Unit conversions

    def power_to_voltage(self, power: float) -> float:
        if not 0.0 <= power <= 1.0:
            raise DomainError(f"Power out of range {power}")
        return self.max_voltage * power

    def voltage_to_power(self, voltage: float) -> float:
        if not 0.0 <= voltage <= self.max_voltage:
            raise DomainError(f"Voltage out of range {voltage}")
        return voltage / self.max_voltage

    def voltage_to_velocity(self, voltage: float) -> float:
        """Convert an absolute voltage to the steady-state velocity it produces.

        For a voltage delta the velocity delta is just delta / kV.
        """
        if not 0.0 <= voltage <= self.max_voltage:
            raise DomainError(f"Voltage out of range {voltage}")
        if voltage < self.start_voltage:
            return 0.0
        return (voltage - self.start_voltage) / self.kv

    def velocity_to_voltage(self, velocity: float) -> float:
        """Convert an absolute velocity to the voltage needed to hold it."""
        return (self.kv * velocity) + self.start_voltage

    def power_to_velocity(self, power: float) -> float:
        return self.voltage_to_velocity(self.power_to_voltage(power))

    def velocity_to_power(self, velocity: float) -> float:
        return self.voltage_to_power(self.velocity_to_voltage(velocity))

    # Stepwise acceleration

    def accel_distance(self, n: int) -> float:
        """Distance covered while accelerating stepwise for n ticks.

        SUM[i=0..n-1](i * dv * dt) = dv * dt * n * (n - 1) / 2
        """
        return (self.velocity_per_step * self.sec_per_step * n * (n - 1)) / 2.0

    def accel_steps_for_distance(self, distance: float) -> int:
        """Number of accelerating ticks that cover (about) the given distance.

        Rough inverse of ``accel_distance``: the positive root of
        n^2 - n + c = 0 with c = -2 * distance / (dv * dt), floored.
        """
        c = -(2.0 * distance) / (self.velocity_per_step * self.sec_per_step)
        root = (1.0 + math.sqrt(1.0 - 4.0 * c)) / 2.0
        return int(math.floor(root))


DEFAULT_PROFILE = KinematicProfile()
"""Profile of the competition robot, computed once from ``config``."""
