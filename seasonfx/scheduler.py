"""Animation frame scheduling.

``FrameScheduler`` mirrors the browser ``requestAnimationFrame`` contract
on top of a host loop: callbacks are one-shot, a callback requested while
a batch is running fires on the *next* dispatch, and every request
returns a handle that can be cancelled. The host (``app.py`` or a test)
calls ``dispatch(now)`` once per display refresh with its own time
source, so the engine never reads a clock on its own.
"""

from __future__ import annotations

from typing import Callable, Dict

FrameCallback = Callable[[float], None]


class FrameScheduler:
    def __init__(self) -> None:
        self._queued: Dict[int, FrameCallback] = {}
        self._running: Dict[int, FrameCallback] = {}
        self._next_handle = 1
        self.dispatched = 0

    @property
    def pending(self) -> int:
        return len(self._queued)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._queued[handle] = callback
        return handle

    def cancel_frame(self, handle: int | None) -> bool:
        if handle is None:
            return False
        if self._queued.pop(handle, None) is not None:
            return True
        return self._running.pop(handle, None) is not None

    def dispatch(self, now: float) -> int:
        """Run every callback queued before this call; returns how many ran."""
        self._running, self._queued = self._queued, {}
        ran = 0
        while self._running:
            handle = min(self._running)
            callback = self._running.pop(handle)
            callback(now)
            ran += 1
        self.dispatched += ran
        return ran


__all__ = ["FrameScheduler", "FrameCallback"]
