"""Entity factory: one freshly parameterized particle per call.

Each season owns a builder that sets ``kind`` and samples the kind's
radius, velocity, spin, alpha and color ranges on top of the common
defaults. Construction is pure; the only input besides the season is
the logical surface size used for the initial position.
"""

from __future__ import annotations

import math
from typing import Callable, Dict

from seasonfx.constants import RESPAWN_Y_MAX, RESPAWN_Y_MIN, SPAWN_OVERSCAN
from seasonfx.entities import Particle, ParticleKind, Season
from seasonfx.logger import get_logger
from seasonfx.rng_service import RNGService

log = get_logger("factory")

PETAL_PINK = (255, 140, 170, 245)
DUST_AMBER = (255, 205, 110, 230)
SUMMER_LEAF_AMBER = (255, 180, 90, 242)
RAIN_BLUE = (170, 210, 240, 250)
AUTUMN_ORANGE = (255, 170, 80, 250)
MIST_WHITE = (255, 255, 255, 255)
DEW_WHITE = (220, 240, 255, 245)
SNOW_WHITE = (240, 248, 255, 245)
EMBER_ORANGE = (255, 120, 60, 230)

SUMMER_LEAF_CHANCE = 0.12
PREWINTER_MIST_CHANCE = 0.25
WINTER_EMBER_CHANCE = 0.12


def _spring(p: Particle, rng: RNGService) -> None:
    p.kind = ParticleKind.PETAL
    p.r = rng.uniform(3.5, 7.5)
    p.vx = rng.uniform(-0.28, 0.35)
    p.vy = rng.uniform(0.18, 0.55)
    p.color = PETAL_PINK
    p.spin = rng.uniform(-0.06, 0.06)


def _summer(p: Particle, rng: RNGService) -> None:
    if rng.chance(SUMMER_LEAF_CHANCE):
        p.kind = ParticleKind.LEAF
        p.r = rng.uniform(6, 12)
        p.vx = rng.uniform(0.1, 0.6)
        p.vy = rng.uniform(0.05, 0.25)
        p.color = SUMMER_LEAF_AMBER
        p.spin = rng.uniform(-0.2, 0.2)
    else:
        p.kind = ParticleKind.DUST
        p.r = rng.uniform(0.8, 2.8)
        p.vx = rng.uniform(0.05, 0.45)
        p.vy = rng.uniform(-0.02, 0.18)
        p.color = DUST_AMBER
        p.alpha = rng.uniform(0.35, 0.9)


def _monsoon(p: Particle, rng: RNGService) -> None:
    p.kind = ParticleKind.RAIN
    p.r = rng.uniform(1.0, 1.6)
    p.vx = rng.uniform(-0.25, 0.2)
    p.vy = rng.uniform(0.65, 1.4)
    p.color = RAIN_BLUE


def _autumn(p: Particle, rng: RNGService) -> None:
    p.kind = ParticleKind.LEAF
    p.r = rng.uniform(6, 13)
    p.vx = rng.uniform(-0.6, 0.45)
    p.vy = rng.uniform(0.25, 0.7)
    p.color = AUTUMN_ORANGE
    p.spin = rng.uniform(-0.3, 0.3)


def _prewinter(p: Particle, rng: RNGService) -> None:
    if rng.chance(PREWINTER_MIST_CHANCE):
        p.kind = ParticleKind.MIST
        p.r = rng.uniform(60, 140)
        p.vx = rng.uniform(0.02, 0.12)
        p.vy = rng.uniform(-0.02, 0.04)
        p.alpha = rng.uniform(0.05, 0.12)
        p.color = MIST_WHITE
    else:
        p.kind = ParticleKind.DEWDROP
        p.r = rng.uniform(1.4, 3.6)
        p.vx = rng.uniform(-0.2, 0.2)
        p.vy = rng.uniform(0.08, 0.35)
        p.color = DEW_WHITE


def _winter(p: Particle, rng: RNGService) -> None:
    if rng.chance(WINTER_EMBER_CHANCE):
        p.kind = ParticleKind.EMBER
        p.r = rng.uniform(1.2, 2.4)
        p.vx = rng.uniform(-0.05, 0.05)
        p.vy = rng.uniform(-0.06, -0.02)
        p.color = EMBER_ORANGE
    else:
        p.kind = ParticleKind.SNOW
        p.r = rng.uniform(1.4, 3.8)
        p.vx = rng.uniform(-0.2, 0.2)
        p.vy = rng.uniform(0.08, 0.32)
        p.color = SNOW_WHITE


_BUILDERS: Dict[Season, Callable[[Particle, RNGService], None]] = {
    Season.SPRING: _spring,
    Season.SUMMER: _summer,
    Season.MONSOON: _monsoon,
    Season.AUTUMN: _autumn,
    Season.PREWINTER: _prewinter,
    Season.WINTER: _winter,
}


class ParticleFactory:
    def __init__(self, rng: RNGService | None = None) -> None:
        self.rng = rng or RNGService.get()

    def create(self, season, width: float, height: float) -> Particle:
        """Build a particle somewhere on (or just off) the surface."""
        rng = self.rng
        if not Season.is_known(season):
            log.debug("unknown season", repr(season), "-> prewinter parameters")
        p = Particle(
            x=rng.uniform(0, width),
            y=rng.uniform(-SPAWN_OVERSCAN, height + SPAWN_OVERSCAN),
            angle=rng.uniform(0, math.pi * 2),
            spin=rng.uniform(-0.05, 0.05),
            z=rng.uniform(0.4, 1.2),
            variant=rng.randint(0, 1),
        )
        _BUILDERS[Season.parse(season)](p, rng)
        return p

    def respawn(self, season, width: float, height: float) -> Particle:
        """Build a replacement entering from just above the top edge."""
        p = self.create(season, width, height)
        p.x = self.rng.uniform(0, width)
        p.y = self.rng.uniform(RESPAWN_Y_MIN, RESPAWN_Y_MAX)
        return p


__all__ = ["ParticleFactory"]
