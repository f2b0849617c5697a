"""Immutable two-dimensional vectors.

Vectors are built through the ``make_cart`` / ``make_polar`` factories and are
never mutated, so they can be shared freely between components.
"""

import math
from dataclasses import dataclass
from typing import ClassVar

from .errors import DomainError


@dataclass(frozen=True)
class Vec2d:
    """A 2-D vector of floats with the usual operations.

    Attributes:
        x: Cartesian x-coordinate
        y: Cartesian y-coordinate
    """

    x: float
    y: float

    EPSILON: ClassVar[float] = 1e-5
    """Default radius used by ``is_near``."""

    @classmethod
    def make_cart(cls, x: float, y: float) -> "Vec2d":
        """Build a vector from cartesian coordinates."""
        return cls(float(x), float(y))

    @classmethod
    def make_polar(cls, r: float, theta: float) -> "Vec2d":
        """Build a vector from polar coordinates.

        Args:
            r: Length of the vector, must be non-negative
            theta: Angle from the x axis (radians)

        Returns:
            The vector

        Raises:
            DomainError: If r is negative
        """
        if r < 0.0:
            raise DomainError(f"negative vector length {r}")
        return cls(r * math.cos(theta), r * math.sin(theta))

    @property
    def r(self) -> float:
        """Length of the vector."""
        return math.hypot(self.x, self.y)

    @property
    def theta(self) -> float:
        """Angle from the x axis in radians, in (-pi, pi]."""
        angle = math.atan2(self.y, self.x)
        if angle == -math.pi:
            return math.pi
        return angle

    def add(self, other: "Vec2d") -> "Vec2d":
        """Return the component-wise sum with another vector."""
        return Vec2d(self.x + other.x, self.y + other.y)

    def sub(self, other: "Vec2d") -> "Vec2d":
        """Return this vector minus another vector."""
        return Vec2d(self.x - other.x, self.y - other.y)

    def scale(self, k: float) -> "Vec2d":
        """Return the vector multiplied by a scalar.

        Args:
            k: Scale factor; negative values reverse the direction

        Returns:
            The scaled vector
        """
        return Vec2d(k * self.x, k * self.y)

    def dot(self, other: "Vec2d") -> float:
        """Return the dot product with another vector."""
        return self.x * other.x + self.y * other.y

    def negate(self) -> "Vec2d":
        """Return the vector pointing the opposite way."""
        return Vec2d(-self.x, -self.y)

    def normal(self) -> "Vec2d":
        """Return the vector rotated 90 degrees clockwise.

        The zero vector maps to itself.
        """
        return Vec2d(self.y, -self.x)

    def is_near(self, other: "Vec2d", epsilon: float = EPSILON) -> bool:
        """Return True if the lengths of the two vectors differ by at most epsilon.

        Note this compares magnitudes only: two vectors of equal length that
        point in different directions are "near" each other.
        """
        if self.x == other.x and self.y == other.y:
            return True
        return abs(other.r - self.r) <= epsilon

    def to_polar_string(self) -> str:
        """Format as ``[r: ..., theta: ...]`` with theta in radians."""
        return f"[r: {self.r}, theta: {self.theta}]"

    def __add__(self, other: "Vec2d") -> "Vec2d":
        return self.add(other)

    def __sub__(self, other: "Vec2d") -> "Vec2d":
        return self.sub(other)

    def __neg__(self) -> "Vec2d":
        return self.negate()

    def __mul__(self, k: float) -> "Vec2d":
        return self.scale(k)

    __rmul__ = __mul__

    def __str__(self) -> str:
        return f"({self.x},{self.y})"


ZERO = Vec2d(0.0, 0.0)
"""The zero vector."""
