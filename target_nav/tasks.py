"""Polled task model shared by all motion tasks.

The host scheduler drives every task through the same lifecycle:

    start()  - once, before the first tick
    tick()   - once per control tick, returns the current Status
    cancel() - at any time; idempotent

No task ever blocks. A task that is not finished simply returns RUNNING and
is polled again on the next tick.
"""

import logging
from enum import Enum
from typing import List, Optional, Sequence

from .config import SEC_PER_STEP


class Status(Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def done(self) -> bool:
        return self not in (Status.PENDING, Status.RUNNING)


class Task:
    """Base class for polled tasks.

    Subclasses implement ``on_start``, ``on_tick`` and ``on_stop``. The base
    class keeps terminal statuses sticky and guarantees ``on_stop`` runs
    exactly once on every exit path (success, failure or cancellation).
    """

    name = "task"

    def __init__(self) -> None:
        self.status = Status.PENDING

    @property
    def done(self) -> bool:
        return self.status.done

    def start(self) -> None:
        self.status = Status.RUNNING
        try:
            self.on_start()
        except Exception:
            self._fail_on_error("start")
            raise

    def tick(self) -> Status:
        """Advance the task by one control tick.

        An exception raised while starting or ticking fails the task, runs
        ``on_stop`` and then propagates to the caller.
        """
        if self.status is Status.PENDING:
            self.start()
        if self.status is Status.RUNNING:
            try:
                self.on_tick()
            except Exception:
                self._fail_on_error("tick")
                raise
        return self.status

    def cancel(self) -> None:
        if self.status.done:
            return
        logging.info(f"{self.name}: cancelled")
        self.finish(Status.CANCELLED)

    def finish(self, status: Status) -> None:
        """Enter a terminal status and release owned resources."""
        if self.status.done:
            return
        self.status = status
        self.on_stop()

    def _fail_on_error(self, stage: str) -> None:
        logging.error(f"{self.name}: error during {stage}, stopping")
        self.finish(Status.FAILED)

    def on_start(self) -> None:
        pass

    def on_tick(self) -> None:
        raise NotImplementedError

    def on_stop(self) -> None:
        pass


class SequentialTask(Task):
    """Run child tasks strictly one after another.

    The next child starts on the tick after the previous one succeeds. A
    failed or cancelled child ends the sequence with the same status.
    Cancelling the sequence (directly or through the timeout) cancels the
    active child.

    Attributes:
        children: Tasks in execution order
        timeout: Optional limit on total run time (seconds)
        sec_per_step: Duration of one tick, used for the timeout
    """

    name = "sequence"

    def __init__(
        self,
        children: Sequence[Task],
        timeout: Optional[float] = None,
        sec_per_step: float = SEC_PER_STEP,
    ):
        super().__init__()
        self.children: List[Task] = list(children)
        self.timeout = timeout
        self.sec_per_step = sec_per_step
        self.index = 0
        self.ticks = 0

    @property
    def active(self) -> Optional[Task]:
        if self.index < len(self.children):
            return self.children[self.index]
        return None

    @property
    def elapsed(self) -> float:
        return self.ticks * self.sec_per_step

    def on_start(self) -> None:
        self.index = 0
        self.ticks = 0
        if not self.children:
            self.finish(Status.SUCCEEDED)

    def on_tick(self) -> None:
        self.ticks += 1
        if self.timeout is not None and self.elapsed > self.timeout:
            logging.warning(f"{self.name}: timed out after {self.elapsed:.2f}s")
            self.finish(Status.CANCELLED)
            return

        child = self.active
        status = child.tick()
        if status is Status.SUCCEEDED:
            self.index += 1
            if self.active is None:
                self.finish(Status.SUCCEEDED)
        elif status.done:
            self.finish(status)

    def on_stop(self) -> None:
        child = self.active
        if child is not None:
            child.cancel()
