"""Collision detection from linear jerk.

A collision with a wall or another robot shows up as a sudden change in
linear acceleration. The monitor samples world-frame acceleration once per
tick and asks the scheduler to abort all motion when the change on either
axis exceeds a threshold. It never stops the motors itself.
"""

import logging

from .config import COLLISION_THRESHOLD_G
from .interfaces import AbortHandler, HeadingSource


class CollisionMonitor:
    """Jerk-threshold collision detector.

    Attributes:
        source: Provider of world-frame linear acceleration (g)
        on_collision: Callback requesting an abort of all running tasks
        threshold: Jerk threshold (g per sample)
        collided: Whether a collision was detected since the last reset
    """

    def __init__(
        self,
        source: HeadingSource,
        on_collision: AbortHandler,
        threshold: float = COLLISION_THRESHOLD_G,
    ):
        self.source = source
        self.on_collision = on_collision
        self.threshold = threshold
        self.collided = False
        self.last_accel_x = source.world_linear_accel_x()
        self.last_accel_y = source.world_linear_accel_y()

    def reset(self) -> None:
        """Take a fresh acceleration baseline and re-arm the detector."""
        self.last_accel_x = self.source.world_linear_accel_x()
        self.last_accel_y = self.source.world_linear_accel_y()
        self.collided = False

    def poll(self) -> bool:
        """Sample acceleration and check for a collision.

        The abort callback fires at most once per reset cycle.

        Returns:
            True if a collision has been detected since the last reset
        """
        accel_x = self.source.world_linear_accel_x()
        jerk_x = accel_x - self.last_accel_x
        self.last_accel_x = accel_x

        accel_y = self.source.world_linear_accel_y()
        jerk_y = accel_y - self.last_accel_y
        self.last_accel_y = accel_y

        if not self.collided and (abs(jerk_x) > self.threshold or abs(jerk_y) > self.threshold):
            self.collided = True
            logging.warning(
                f"Collision detected (jerk x={jerk_x:.3f}g y={jerk_y:.3f}g), aborting!"
            )
            self.on_collision()
        return self.collided
