"""Simulation records: seasons, particle kinds, particles, ripples, flares.

A particle is one flat record discriminated by ``kind``; every kind uses
the same physical fields and the renderer picks the treatment from the
discriminant. Ripples and flares are side effects kept outside the pool.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from seasonfx.constants import DEFAULT_SEASON, POOL_CAPACITY, DEFAULT_POOL_CAPACITY, SEASONS

RGBA = Tuple[int, int, int, int]


class Season(str, Enum):
    SPRING = "spring"
    SUMMER = "summer"
    MONSOON = "monsoon"
    AUTUMN = "autumn"
    WINTER = "winter"
    PREWINTER = "prewinter"

    @classmethod
    def parse(cls, value: "str | Season | None") -> "Season":
        """Case-sensitive lookup; anything unknown maps to the default season."""
        if isinstance(value, Season):
            return value
        if value in SEASONS:
            return cls(value)
        return cls(DEFAULT_SEASON)

    @classmethod
    def is_known(cls, value) -> bool:
        return isinstance(value, Season) or value in SEASONS

    @property
    def capacity(self) -> int:
        return POOL_CAPACITY.get(self.value, DEFAULT_POOL_CAPACITY)

    def next(self) -> "Season":
        order = list(Season)
        return order[(order.index(self) + 1) % len(order)]


class ParticleKind(str, Enum):
    DOT = "dot"
    PETAL = "petal"
    DUST = "dust"
    LEAF = "leaf"
    RAIN = "rain"
    MIST = "mist"
    DEWDROP = "dewdrop"
    SNOW = "snow"
    EMBER = "ember"


@dataclass
class Particle:
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    r: float = 1.0
    angle: float = 0.0
    spin: float = 0.0
    kind: ParticleKind = ParticleKind.DOT
    alpha: float = 1.0
    color: RGBA = (255, 255, 255, 255)
    z: float = 1.0  # depth scale applied to integration
    variant: int = 0  # which leaf image a leaf uses

    def out_of_bounds(self, width: float, height: float, *, bottom: float, top: float, side: float) -> bool:
        return self.y > height + bottom or self.y < -top or self.x < -side or self.x > width + side


@dataclass
class Ripple:
    x: float
    y: float
    r: float
    alpha: float


@dataclass
class Flare:
    x: float
    y: float
    r: float
    phase: float
    speed: float


__all__ = ["Season", "ParticleKind", "Particle", "Ripple", "Flare", "RGBA"]
