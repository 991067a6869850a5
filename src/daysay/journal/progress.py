"""Cosmetic transcription progress, as an explicit state machine.

``IDLE -> RUNNING -> COMPLETING -> DONE``. While the transcription call is
outstanding the tracker creeps towards a cap below 100; once the result
arrives it eases the rest of the way. Ticks come from outside (a ``Clock``
or a test calling ``tick()``), so the animation is deterministic.

Guarantees: progress never decreases, never reaches 100 before
``complete()``, and a stopped tracker just stalls. An owner that keeps its
own in-progress flag passes it as ``is_active``; clearing that flag stalls
the tracker the same way ``stop()`` does.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from enum import StrEnum
from typing import Protocol

from loguru import logger

RUNNING_CAP = 95.0
RUNNING_STEP = 1.0
EASE_FACTOR = 0.2
SNAP_THRESHOLD = 99.5


class ProgressState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETING = "completing"
    DONE = "done"


class Clock(Protocol):
    """Anything that can wait between ticks."""

    async def sleep(self, seconds: float) -> None: ...


class AsyncioClock:
    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


ProgressListener = Callable[[float], None]


class ProgressTracker:
    """Monotonic progress driven by explicit ticks."""

    def __init__(
        self,
        cap: float = RUNNING_CAP,
        step: float = RUNNING_STEP,
        is_active: Callable[[], bool] | None = None,
    ) -> None:
        self.cap = cap
        self.step = step
        self._is_active = is_active
        self.state = ProgressState.IDLE
        self.progress = 0.0
        self.in_progress = False
        self._listeners: list[ProgressListener] = []

    def on_progress(self, listener: ProgressListener) -> None:
        self._listeners.append(listener)

    def start(self) -> None:
        self.state = ProgressState.RUNNING
        self.progress = 0.0
        self.in_progress = True
        self._publish()

    def stop(self) -> None:
        """Clear the in-progress flag; further ticks leave progress where it is."""
        self.in_progress = False

    def complete(self) -> None:
        """The real result is in: switch to easing towards 100."""
        if self.state in (ProgressState.RUNNING, ProgressState.IDLE):
            self.state = ProgressState.COMPLETING
            self.in_progress = False
            self._publish()

    def tick(self) -> float:
        """Advance one step according to the current state and return progress."""
        if self.state is ProgressState.RUNNING:
            if self.active and self.progress < self.cap:
                self.progress = min(self.cap, self.progress + self.step)
                self._publish()
        elif self.state is ProgressState.COMPLETING:
            eased = min(100.0, self.progress + (100.0 - self.progress) * EASE_FACTOR)
            if eased >= SNAP_THRESHOLD:
                self.progress = 100.0
                self.state = ProgressState.DONE
            else:
                self.progress = eased
            self._publish()
        return self.progress

    @property
    def active(self) -> bool:
        if not self.in_progress:
            return False
        return self._is_active is None or bool(self._is_active())

    @property
    def is_stalled(self) -> bool:
        return self.state is ProgressState.RUNNING and (not self.active or self.progress >= self.cap)

    async def run(self, clock: Clock, interval: float = 0.05) -> None:
        """Tick on *clock* until done, or until the running phase stalls."""
        while self.state in (ProgressState.RUNNING, ProgressState.COMPLETING):
            if self.is_stalled:
                return
            await clock.sleep(interval)
            self.tick()

    async def finish(self, clock: Clock, interval: float = 0.016) -> None:
        """``complete()`` then ease to 100."""
        self.complete()
        while self.state is ProgressState.COMPLETING:
            await clock.sleep(interval)
            self.tick()

    def _publish(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self.progress)
            except Exception as exc:
                logger.warning(f"Progress listener failed: {exc}")
