"""Pointer tracking for particle interaction.

Turns pygame mouse events into a single mutable ``PointerState`` that
the engine reads each tick. Velocity is the delta between the last two
motion events and stays at its last value while the pointer rests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import pygame


@dataclass
class PointerState:
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    down: bool = False


class PointerTracker:
    def __init__(self) -> None:
        self.state = PointerState()

    def move(self, x: float, y: float) -> None:
        s = self.state
        px, py = s.x, s.y
        s.x, s.y = float(x), float(y)
        s.vx = s.x - px
        s.vy = s.y - py

    def press(self) -> None:
        self.state.down = True

    def release(self) -> None:
        self.state.down = False

    def handle(self, events: Iterable[pygame.event.Event]) -> None:
        for e in events:
            if e.type == pygame.MOUSEMOTION:
                self.move(*e.pos)
            elif e.type == pygame.MOUSEBUTTONDOWN:
                self.press()
            elif e.type == pygame.MOUSEBUTTONUP:
                self.release()


__all__ = ["PointerState", "PointerTracker"]
