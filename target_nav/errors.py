"""Exception types raised by the navigation core.

Each error also derives from the matching builtin category so callers can
catch either the project type or ``ValueError`` / ``LookupError``.
"""


class NavigationError(Exception):
    """Base class for all navigation core errors."""


class DomainError(NavigationError, ValueError):
    """A physical input is outside its defined domain.

    Raised for negative vector radii, out-of-range power or voltage values,
    and bearings that put the distance calculation on a tangent singularity.
    """


class OrientationLookupError(NavigationError, LookupError):
    """No heading bucket matched in a target orientation map."""


class DriveRangeError(NavigationError, ValueError):
    """A drive command was outside the [-1, 1] motor power range."""


def check_power(power: float, name: str = "power") -> float:
    """Validate a motor power command.

    Args:
        power: Motor power, must lie in [-1.0, 1.0].
        name: Label used in the error message.

    Returns:
        The unchanged power value.

    Raises:
        DriveRangeError: If the power is outside [-1.0, 1.0] or NaN.
    """
    if not -1.0 <= power <= 1.0:
        raise DriveRangeError(f"{name} out of range: {power}")
    return power
