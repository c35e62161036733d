"""Particle simulation engine.

Owns the active pool, the ripple list and the summer flares for one
season at a time. ``advance(dt, now)`` is one animation tick: it clears
the surface, draws flares, integrates and draws every particle, queues
replacements for particles that left the recycle bounds, then draws and
ages ripples. Timing (elapsed-time capping, scheduling, pausing) lives
in ``EngineController``; the engine only ever sees a finished ``dt``.

Per-particle order inside a tick:

    pointer force -> season force -> damping -> integrate -> draw
    -> rain impact ripple -> recycle check

Replacements are written back by index after the pass, so the pool
keeps its length and slots are reused.
"""

from __future__ import annotations

import math
from typing import Callable, Dict, List

from seasonfx.constants import (
    AUTUMN_PULL,
    AUTUMN_SPIN_RATE,
    AUTUMN_SWAY,
    FLARE_COUNT_MAX,
    FLARE_COUNT_MIN,
    FLARE_HEIGHT_FRACTION,
    FLARE_RADIUS_MAX,
    FLARE_RADIUS_MIN,
    FLARE_SPEED_MAX,
    FLARE_SPEED_MIN,
    MONSOON_PULL,
    MONSOON_SWAY,
    POINTER_INFLUENCE_RADIUS,
    POINTER_PUSH_X,
    POINTER_PUSH_Y,
    POINTER_VELOCITY_COUPLING,
    PREWINTER_DEW_PULL,
    PREWINTER_MIST_DRIFT,
    RECYCLE_MARGIN_BOTTOM,
    RECYCLE_MARGIN_SIDE,
    RECYCLE_MARGIN_TOP,
    REFERENCE_FRAME_MS,
    REFLOW_Y_MARGIN,
    RIPPLE_FADE,
    RIPPLE_GROWTH,
    RIPPLE_IMPACT_OFFSET,
    RIPPLE_SPAWN_OFFSET,
    RIPPLE_START_ALPHA,
    RIPPLE_START_RADIUS,
    SPRING_PULL,
    SPRING_SPIN_RATE,
    SPRING_SWAY,
    SUMMER_PULL,
    SUMMER_SWAY,
    VELOCITY_DAMPING_X,
    VELOCITY_DAMPING_Y,
    WINTER_EMBER_LIFT,
    WINTER_SNOW_PULL,
    WINTER_SWAY,
)
from seasonfx.entities import Flare, Particle, ParticleKind, Ripple, Season
from seasonfx.factory import ParticleFactory
from seasonfx.logger import get_logger
from seasonfx.pointer import PointerTracker
from seasonfx.renderer import Renderer
from seasonfx.rng_service import RNGService
from seasonfx.surface import SurfaceManager

log = get_logger("engine")


def _clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


# ---- Season forces ----
# Signature: (particle, k, now, width, height, spin_enabled) where k = dt / 16.


def _spring(p: Particle, k: float, now: float, w: float, h: float, spin: bool) -> None:
    p.vx += math.sin(p.angle * 0.7 + now * 0.0005) * SPRING_SWAY
    p.vy += SPRING_PULL * k
    if spin:
        p.angle += p.spin * SPRING_SPIN_RATE


def _summer(p: Particle, k: float, now: float, w: float, h: float, spin: bool) -> None:
    p.vx += math.sin(p.y / h * 6 + now * 0.0008) * SUMMER_SWAY
    p.vy += SUMMER_PULL * k


def _monsoon(p: Particle, k: float, now: float, w: float, h: float, spin: bool) -> None:
    p.vx += math.sin(now * 0.001 + p.x / w * 12) * MONSOON_SWAY
    p.vy += MONSOON_PULL * k


def _autumn(p: Particle, k: float, now: float, w: float, h: float, spin: bool) -> None:
    p.vx += math.sin(p.y / h * 8 + p.angle) * AUTUMN_SWAY
    p.vy += AUTUMN_PULL * k
    if spin:
        p.angle += p.spin * AUTUMN_SPIN_RATE


def _prewinter(p: Particle, k: float, now: float, w: float, h: float, spin: bool) -> None:
    if p.kind is ParticleKind.MIST:
        p.vx += PREWINTER_MIST_DRIFT
    else:
        p.vy += PREWINTER_DEW_PULL * k


def _winter(p: Particle, k: float, now: float, w: float, h: float, spin: bool) -> None:
    if p.kind is ParticleKind.EMBER:
        p.vy -= WINTER_EMBER_LIFT * k
    else:
        p.vy += WINTER_SNOW_PULL * k
    p.vx += math.sin(now * 0.0006 + p.y * 0.02) * WINTER_SWAY


SEASON_FORCES: Dict[Season, Callable[[Particle, float, float, float, float, bool], None]] = {
    Season.SPRING: _spring,
    Season.SUMMER: _summer,
    Season.MONSOON: _monsoon,
    Season.AUTUMN: _autumn,
    Season.PREWINTER: _prewinter,
    Season.WINTER: _winter,
}


class SimulationEngine:
    def __init__(
        self,
        surfaces: SurfaceManager,
        renderer: Renderer,
        pointer: PointerTracker | None = None,
        *,
        reduced_motion: bool = False,
        interaction_enabled: Callable[[], bool] = lambda: True,
        rng: RNGService | None = None,
    ) -> None:
        self.surfaces = surfaces
        self.renderer = renderer
        self.pointer = pointer or PointerTracker()
        self.reduced_motion = reduced_motion
        self.interaction_enabled = interaction_enabled
        self.rng = rng or RNGService.get()
        self.factory = ParticleFactory(self.rng)
        self.season = Season.PREWINTER
        self.particles: List[Particle] = []
        self.ripples: List[Ripple] = []
        self.flares: List[Flare] = []
        self.ticks = 0

    # ---- Mode switching ----
    def set_mode(self, season) -> None:
        """Discard every season-owned entity and rebuild the pool."""
        if not Season.is_known(season):
            log.debug("unknown season", repr(season), "falling back to prewinter")
        self.season = Season.parse(season)
        w, h = self.surfaces.width, self.surfaces.height
        self.ripples = []
        self.flares = []
        self.particles = [self.factory.create(self.season, w, h) for _ in range(self.season.capacity)]
        if self.season is Season.SUMMER:
            rng = self.rng
            for _ in range(rng.randint(FLARE_COUNT_MIN, FLARE_COUNT_MAX)):
                self.flares.append(
                    Flare(
                        x=rng.uniform(0, w),
                        y=rng.uniform(0, h * FLARE_HEIGHT_FRACTION),
                        r=rng.uniform(FLARE_RADIUS_MIN, FLARE_RADIUS_MAX),
                        phase=rng.uniform(0, math.pi * 2),
                        speed=rng.uniform(FLARE_SPEED_MIN, FLARE_SPEED_MAX),
                    )
                )
        log.info("mode", self.season.value, "pool", len(self.particles), "flares", len(self.flares))

    def reflow(self) -> None:
        """Pull particles back inside resized bounds; velocity and kind are untouched."""
        w, h = self.surfaces.width, self.surfaces.height
        for p in self.particles:
            p.x = _clamp(p.x, 0, w)
            p.y = _clamp(p.y, -REFLOW_Y_MARGIN, h + REFLOW_Y_MARGIN)

    # ---- Per-tick physics ----
    def _pointer_active(self) -> bool:
        return not self.reduced_motion and bool(self.interaction_enabled())

    def apply_pointer(self, p: Particle) -> None:
        ptr = self.pointer.state
        dx = p.x - ptr.x
        dy = p.y - ptr.y
        dist = math.hypot(dx, dy) or 1.0
        influence = max(0.0, 1 - dist / POINTER_INFLUENCE_RADIUS)
        if influence <= 0:
            return
        p.vx += (dx / dist) * POINTER_PUSH_X * influence + ptr.vx * POINTER_VELOCITY_COUPLING * influence
        p.vy += (dy / dist) * POINTER_PUSH_Y * influence + ptr.vy * POINTER_VELOCITY_COUPLING * influence

    def integrate(self, p: Particle, dt: float, now: float) -> None:
        w, h = self.surfaces.width, self.surfaces.height
        k = dt / REFERENCE_FRAME_MS
        SEASON_FORCES[self.season](p, k, now, w, h, not self.reduced_motion)
        p.vx *= VELOCITY_DAMPING_X
        p.vy *= VELOCITY_DAMPING_Y
        p.x += p.vx * k * p.z
        p.y += p.vy * k * p.z

    def spawn_ripple(self, x: float, y: float) -> Ripple:
        rp = Ripple(x=x, y=y, r=RIPPLE_START_RADIUS, alpha=RIPPLE_START_ALPHA)
        self.ripples.append(rp)
        return rp

    def is_out_of_bounds(self, p: Particle) -> bool:
        return p.out_of_bounds(
            self.surfaces.width,
            self.surfaces.height,
            bottom=RECYCLE_MARGIN_BOTTOM,
            top=RECYCLE_MARGIN_TOP,
            side=RECYCLE_MARGIN_SIDE,
        )

    def advance(self, dt: float, now: float) -> None:
        """Run one tick: physics, drawing, recycling and ripple ageing."""
        r = self.renderer
        w, h = self.surfaces.width, self.surfaces.height
        r.begin_frame()

        if self.season is Season.SUMMER:
            for f in self.flares:
                r.draw_flare(f)
                if not self.reduced_motion:
                    f.phase += f.speed

        pointer_on = self._pointer_active()
        impact_y = h - RIPPLE_IMPACT_OFFSET
        recycle: List[int] = []
        for i, p in enumerate(self.particles):
            if pointer_on:
                self.apply_pointer(p)
            self.integrate(p, dt, now)
            r.draw_particle(p)
            if p.kind is ParticleKind.RAIN and p.y > impact_y:
                self.spawn_ripple(p.x, h - RIPPLE_SPAWN_OFFSET)
            if self.is_out_of_bounds(p):
                recycle.append(i)
        for i in recycle:
            self.particles[i] = self.factory.respawn(self.season, w, h)

        alive: List[Ripple] = []
        for rp in self.ripples:
            r.draw_ripple(rp)
            rp.r += RIPPLE_GROWTH
            rp.alpha -= RIPPLE_FADE
            if rp.alpha > 0:
                alive.append(rp)
        self.ripples = alive
        self.ticks += 1

    def draw_static(self) -> None:
        """Draw the current state without advancing it (reduced-motion frame)."""
        r = self.renderer
        r.begin_frame()
        if self.season is Season.SUMMER:
            for f in self.flares:
                r.draw_flare(f)
        for p in self.particles:
            r.draw_particle(p)

    def counts(self) -> Dict[str, int]:
        return {"particles": len(self.particles), "ripples": len(self.ripples), "flares": len(self.flares)}


__all__ = ["SimulationEngine", "SEASON_FORCES"]
