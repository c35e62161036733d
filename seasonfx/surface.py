"""Drawing surface ownership and resize debouncing.

The engine works in logical units. ``SurfaceManager`` keeps a backing
``pygame.Surface`` of ``floor(logical * dpr)`` pixels and converts
logical values to pixels for the renderer. Window resize events are
funnelled through ``request_resize``; the buffer is only rebuilt once
no further request arrived for ``debounce_ms``, after which listeners
(the engine controller) are told to reflow.
"""

from __future__ import annotations

import math
from typing import Callable, List, Tuple

import pygame

from seasonfx.constants import RESIZE_DEBOUNCE_MS
from seasonfx.logger import get_logger

log = get_logger("surface")

ResizeListener = Callable[[int, int], None]


class SurfaceManager:
    def __init__(self, width: float, height: float, dpr: float = 1.0, debounce_ms: float = RESIZE_DEBOUNCE_MS) -> None:
        self.debounce_ms = debounce_ms
        self.width = 1
        self.height = 1
        self.dpr = 1.0
        self.buffer: pygame.Surface = pygame.Surface((1, 1), pygame.SRCALPHA)
        self._pending: Tuple[float, float, float | None] | None = None
        self._deadline = 0.0
        self._listeners: List[ResizeListener] = []
        self.resize(width, height, dpr)

    # Geometry -----------------------------------------------------------
    @property
    def pixel_size(self) -> Tuple[int, int]:
        return self.buffer.get_size()

    def to_pixels(self, x: float, y: float) -> Tuple[float, float]:
        return x * self.dpr, y * self.dpr

    def scale(self, value: float) -> float:
        return value * self.dpr

    def clear(self) -> None:
        self.buffer.fill((0, 0, 0, 0))

    # Resizing -----------------------------------------------------------
    def add_resize_listener(self, listener: ResizeListener) -> None:
        self._listeners.append(listener)

    def resize(self, width: float, height: float, dpr: float | None = None) -> None:
        """Rebuild the backing buffer immediately."""
        if dpr is not None:
            self.dpr = max(1.0, float(dpr or 1.0))
        self.width = max(1, int(math.floor(width)))
        self.height = max(1, int(math.floor(height)))
        pw = max(1, int(math.floor(self.width * self.dpr)))
        ph = max(1, int(math.floor(self.height * self.dpr)))
        self.buffer = pygame.Surface((pw, ph), pygame.SRCALPHA)
        log.debug("buffer", f"{pw}x{ph}", "logical", f"{self.width}x{self.height}", "dpr", self.dpr)

    def request_resize(self, width: float, height: float, now: float, dpr: float | None = None) -> None:
        """Queue a resize; each new request restarts the debounce window."""
        self._pending = (width, height, dpr)
        self._deadline = now + self.debounce_ms

    @property
    def resize_pending(self) -> bool:
        return self._pending is not None

    def poll(self, now: float) -> bool:
        """Apply a settled resize request; True when the buffer changed."""
        if self._pending is None or now < self._deadline:
            return False
        width, height, dpr = self._pending
        self._pending = None
        self.resize(width, height, dpr)
        for listener in list(self._listeners):
            listener(self.width, self.height)
        return True


__all__ = ["SurfaceManager", "ResizeListener"]
