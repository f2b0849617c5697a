"""Configuration parameters for the target navigation system.

This module centralizes all configuration parameters including:
- Physical drive train parameters (kinematic model inputs)
- Heading controller gains and tolerances
- Collision detection threshold
- Camera mounting and vision target geometry
- Operator-adjustable drive settings
- Simulation and telemetry settings

All parameters are documented with their purpose, units and origin.
Distances are in inches and times in seconds throughout.
"""

from dataclasses import dataclass

# ============================================================================
# Physical Robot Parameters
# ============================================================================

MAX_VOLTAGE = 12.0
"""Motor voltage corresponding to a motor power of 1.0 (volts)."""

MAX_MOTOR_SPEED = 5300.0 / 60.0
"""Free speed of the drive motors (revolutions per second).
CIM motor: 5300 rpm."""

WHEEL_DIAMETER = 6.0
"""Drive wheel diameter (inches). Kitbot chassis."""

GEAR_REDUCTION = 10.7
"""Gearbox reduction between motor and wheel. Kitbot chassis."""

TRACK_WIDTH = 24.0
"""Distance between left and right wheel contact lines (inches).
Only used by the simulated drive train."""

SEC_PER_STEP = 0.02
"""Duration of one control tick (seconds).
The host scheduler polls every active task once per tick (50 Hz)."""

START_VOLTAGE = 1.25
"""Voltage needed to overcome static friction and start the robot moving (volts).

Can be replaced with an empirically measured value."""

ACCEL_TIME = 2.0
"""Time to accelerate from rest to maximum velocity (seconds).

Tuning rationale:
- Too small and the wheels slip or the robot tips
- 2 s has proven practical on the kitbot chassis
"""

ENCODER_UNITS_PER_REVOLUTION = 1440
"""Quadrature encoder counts per wheel revolution."""


# ============================================================================
# Heading Controller Parameters (continuous PID)
# ============================================================================

HEADING_KP = 0.025
"""Proportional gain (output per degree of heading error).

Typically the only gain that needs tuning."""

HEADING_KI = 0.0
"""Integral gain. Disabled; proportional plus derivative holds heading well."""

HEADING_KD = 0.1
"""Derivative gain, applied to the per-tick change in heading error."""

HEADING_KF = 0.0
"""Feedforward gain on the setpoint. Disabled."""

HEADING_OUTPUT_LIMIT = 0.5
"""Magnitude limit of the correction rate produced by the PID loop."""

HEADING_INTEGRAL_LIMIT = 0.5
"""Anti-windup limit for the integral term (output units)."""

TURN_TOLERANCE_DEGREES = 2.0
"""A turn is complete once the heading error is below this (degrees)."""

TURN_TOLERANCE_RATE = 10.0
"""A turn is complete only while the robot rotates slower than this (degrees/second)."""


# ============================================================================
# Collision Detection
# ============================================================================

COLLISION_THRESHOLD_G = 0.5
"""Jerk threshold for collision detection (g per sample).

A change in world-frame linear acceleration larger than this on either axis
between two consecutive samples is treated as a collision."""

GRAVITY_IN_PER_S2 = 386.09
"""Standard gravity (inches per second squared)."""


# ============================================================================
# Camera and Vision Target Geometry
# ============================================================================

CAMERA_HEIGHT = 10.5
"""Height of the camera lens above the floor (inches)."""

CAMERA_AIM_ANGLE = 20.0
"""Vertical aiming angle of the camera above the horizon (degrees)."""

CAMERA_OFFSET_FROM_CENTER = -7.0
"""Lateral offset of the camera from the robot centerline (inches).
Positive to the right, so -7.0 is seven inches left of center."""

CAMERA_H_FOV = 54.0
"""Horizontal field of view (degrees). Bearing tx spans +/- half of this."""

CAMERA_V_FOV = 41.0
"""Vertical field of view (degrees). Bearing ty spans +/- half of this."""

TARGET_HEIGHT = 19.0 + 25.0 / 2.0 + 5.25 / 2.0
"""Height of the vision target center above the floor (inches)."""

TANGENT_GUARD = 1e-3
"""Smallest |cos| or |sin| of the total elevation angle accepted by the
distance calculation. Closer to the singularity raises a DomainError."""


# ============================================================================
# Operator Drive Settings
# ============================================================================


@dataclass
class DriveSettings:
    """Operator-adjustable values consumed by the drive tasks."""

    drive_power: float = 0.2  # Fixed power for straight-drive test runs
    max_time: float = 10.0  # Max task time (seconds)
    drive_angle: float = 90.0  # Field angle for a single vector drive (degrees)
    drive_distance: float = 24.0  # Distance for a single vector drive (inches)
    drive_velocity: float = 24.0  # Cruise velocity (inches/second)
    standoff_distance: float = 12.0  # Final perpendicular approach length (inches)
    route_timeout: float = 5.0  # Time allowed to acquire a target (seconds)
    normal_velocity: float = 12.0  # Cruise velocity on the final approach leg


# ============================================================================
# Simulation
# ============================================================================

SIM_MAX_ACCEL_G = 0.2
"""Acceleration limit of the simulated chassis (g).
Below half the collision threshold, so even a full reversal from braking to
accelerating between two ticks never trips the collision monitor."""

SIM_MAX_TICKS = 3000
"""Upper bound on simulated control ticks for one command-line run (60 s)."""


# ============================================================================
# Telemetry
# ============================================================================

TELEMETRY_FILENAME = "telemetry.csv"
"""Name of the per-run telemetry CSV file."""


# ============================================================================
# Terminal and Plot Colors
# ============================================================================

PLOT_ORANGE = "#f74823"
"""Primary plot color - left side power, measured data."""

PLOT_BLUE = "#2374f7"
"""Secondary plot color - right side power, references."""

PLOT_TAUPE = "#686a5f"
"""Neutral color for guides and grids."""

TERM_ORANGE = "\033[38;2;247;72;35m"
"""Terminal color code for orange (RGB: 247, 72, 35)."""

TERM_BLUE = "\033[38;2;35;116;247m"
"""Terminal color code for blue (RGB: 35, 116, 247)."""

TERM_RESET = "\033[0m"
"""Terminal color reset code."""
