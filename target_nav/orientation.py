"""Mapping from robot yaw to the normal of the target in view.

When the robot is pointed at a target, its yaw determines which target it
must be looking at, and therefore the direction the target faces. The
"standard" targets (cargo ship, loading station) are orthogonal to the field
axes; the "rocket" targets are angled at about 61 degrees.

Buckets are scanned in declared order and the first match wins, which fixes
the result at shared boundary values.
"""

import math
from dataclasses import dataclass
from typing import Sequence

from .errors import OrientationLookupError
from .vector import Vec2d


@dataclass(frozen=True)
class HeadingBucket:
    """Inclusive yaw range (degrees) mapped to a target normal."""

    low: float
    high: float
    normal: Vec2d

    def contains(self, yaw: float) -> bool:
        return self.low <= yaw <= self.high


class TargetOrientationMap:
    """Ordered yaw buckets mapping robot yaw to a target-facing unit normal."""

    def __init__(self, name: str, buckets: Sequence[HeadingBucket]):
        self.name = name
        self.buckets = tuple(buckets)

    def lookup(self, yaw: float) -> Vec2d:
        """Find the normal of the target in view from the given yaw.

        Args:
            yaw: Robot yaw in degrees, -180..180

        Returns:
            Unit vector pointing perpendicularly away from the target face

        Raises:
            OrientationLookupError: If no bucket covers the yaw
        """
        for bucket in self.buckets:
            if bucket.contains(yaw):
                return bucket.normal
        raise OrientationLookupError(f"Could not find {self.name} target for yaw {yaw}")


_EAST = Vec2d.make_cart(1.0, 0.0)
_NORTH = Vec2d.make_cart(0.0, 1.0)
_WEST = Vec2d.make_cart(-1.0, 0.0)
_SOUTH = Vec2d.make_cart(0.0, -1.0)

STANDARD_TARGETS = TargetOrientationMap(
    "standard",
    (
        HeadingBucket(-45.0, 45.0, _SOUTH),
        HeadingBucket(45.0, 135.0, _WEST),
        HeadingBucket(135.0, 180.0, _NORTH),
        HeadingBucket(-180.0, -135.0, _NORTH),
        HeadingBucket(-135.0, -45.0, _EAST),
    ),
)

ROCKET_ANGLE = 61.0
"""Field angle of the rocket target normals off the x axis (degrees)."""

ROCKET_TARGETS = TargetOrientationMap(
    "rocket",
    (
        HeadingBucket(-180.0, -90.0, Vec2d.make_polar(1.0, math.radians(ROCKET_ANGLE))),
        HeadingBucket(-90.0, 0.0, Vec2d.make_polar(1.0, math.radians(-ROCKET_ANGLE))),
        HeadingBucket(0.0, 90.0, Vec2d.make_polar(1.0, math.radians(ROCKET_ANGLE - 180.0))),
        HeadingBucket(90.0, 180.0, Vec2d.make_polar(1.0, math.radians(180.0 - ROCKET_ANGLE))),
    ),
)
