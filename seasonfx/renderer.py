"""Per-kind particle drawing on top of pygame.

Every particle kind has one visual treatment. Shapes that do not depend
on per-frame state (gradients, petals, procedural leaves, dots) are
rendered once into small sprites and kept in an LRU cache keyed by kind,
quantized pixel radius and color; per-frame work is then a rotate and/or
a blit. Rain and ripples depend on live values and are drawn directly.

The renderer only *reads* particles. Phase/angle advancement and ripple
spawning belong to the engine.

Layer order within a frame (driven by ``SimulationEngine.advance``):
1. ``begin_frame`` clears the buffer
2. summer flares (additive)
3. particles in pool order
4. ripples
"""

from __future__ import annotations

import math
from collections import OrderedDict
from typing import Callable, Dict, List, Sequence, Tuple

import pygame

from seasonfx.asset_manager import AssetSlot
from seasonfx.constants import FLARE_ORBIT_X, FLARE_ORBIT_Y
from seasonfx.entities import Flare, Particle, ParticleKind, Ripple
from seasonfx.logger import get_logger
from seasonfx.surface import SurfaceManager

_log = get_logger("renderer")

Stop = Tuple[float, Tuple[int, int, int, float]]

SUPERSAMPLE = 4
CURVE_STEPS = 10
LEAF_TILT = 0.6  # radians of sway at sin(angle) = 1

FLARE_STOPS: List[Stop] = [
    (0.0, (255, 255, 255, 0.35)),
    (0.35, (255, 220, 180, 0.22)),
    (1.0, (255, 200, 120, 0.0)),
]
MIST_STOPS: List[Stop] = [(0.1, (255, 255, 255, 0.08)), (1.0, (255, 255, 255, 0.0))]
EMBER_STOPS: List[Stop] = [(0.0, (255, 160, 90, 0.9)), (1.0, (255, 120, 60, 0.0))]
RAIN_HEAD = (255, 255, 255, 217)
RIPPLE_RGB = (180, 210, 240)
DUST_HALO_ALPHA = 0.08
DUST_HALO_SCALE = 2.8
EMBER_GLOW_SCALE = 3.0
DEW_HIGHLIGHT_ALPHA = 0.2


def _alpha_byte(a: float) -> int:
    return int(round(max(0.0, min(1.0, a)) * 255))


def _quantize(px: float) -> float:
    return max(0.5, round(px * 2) / 2)


def _gradient_color(stops: Sequence[Stop], t: float) -> Tuple[int, int, int, int]:
    if t <= stops[0][0]:
        r, g, b, a = stops[0][1]
        return r, g, b, _alpha_byte(a)
    for (o0, c0), (o1, c1) in zip(stops, stops[1:]):
        if t <= o1:
            k = (t - o0) / (o1 - o0) if o1 > o0 else 1.0
            r, g, b = (int(round(c0[i] + (c1[i] - c0[i]) * k)) for i in range(3))
            return r, g, b, _alpha_byte(c0[3] + (c1[3] - c0[3]) * k)
    r, g, b, a = stops[-1][1]
    return r, g, b, _alpha_byte(a)


def _quad(p0, p1, p2, steps: int = CURVE_STEPS):
    pts = []
    for i in range(1, steps + 1):
        t = i / steps
        u = 1 - t
        pts.append((u * u * p0[0] + 2 * u * t * p1[0] + t * t * p2[0], u * u * p0[1] + 2 * u * t * p1[1] + t * t * p2[1]))
    return pts


def _cubic(p0, p1, p2, p3, steps: int = CURVE_STEPS):
    pts = []
    for i in range(1, steps + 1):
        t = i / steps
        u = 1 - t
        pts.append(
            (
                u**3 * p0[0] + 3 * u * u * t * p1[0] + 3 * u * t * t * p2[0] + t**3 * p3[0],
                u**3 * p0[1] + 3 * u * u * t * p1[1] + 3 * u * t * t * p2[1] + t**3 * p3[1],
            )
        )
    return pts


def petal_outline(r: float):
    """Teardrop built from three quadratic curves, tip up."""
    start = (0.0, -r / 2)
    pts = [start]
    pts += _quad(start, (r * 1.2, -r * 1.4), (r, r * 1.4))
    pts += _quad((r, r * 1.4), (0.0, r), (-r, r * 1.4))
    pts += _quad((-r, r * 1.4), (-r * 1.2, -r * 1.4), start)
    return pts


def leaf_outline(r: float):
    start = (0.0, -r / 2)
    pts = [start]
    pts += _cubic(start, (r * 1.2, -r), (r * 1.1, r), (0.0, r * 1.2))
    pts += _cubic((0.0, r * 1.2), (-r * 1.1, r), (-r * 1.2, -r), start)
    return pts


def radial_sprite(radius: float, stops: Sequence[Stop]) -> pygame.Surface:
    """Concentric fill from the rim inwards; SRCALPHA draws overwrite, giving a gradient."""
    size = max(2, int(math.ceil(radius * 2)))
    surf = pygame.Surface((size, size), pygame.SRCALPHA)
    c = size / 2
    rings = max(1, int(math.ceil(radius)))
    for i in range(rings, 0, -1):
        pygame.draw.circle(surf, _gradient_color(stops, i / rings), (c, c), radius * i / rings)
    return surf


def shape_sprite(outline: Callable[[float], list], radius: float, color) -> pygame.Surface:
    size = max(2, int(math.ceil(radius * 3)))
    hi = pygame.Surface((size * SUPERSAMPLE, size * SUPERSAMPLE), pygame.SRCALPHA)
    c = size * SUPERSAMPLE / 2
    pts = [(c + x * SUPERSAMPLE, c + y * SUPERSAMPLE) for x, y in outline(radius)]
    pygame.draw.polygon(hi, color, pts)
    return pygame.transform.smoothscale(hi, (size, size))


def disc_sprite(radius: float, color, halo: float = 0.0, halo_alpha: float = 0.0) -> pygame.Surface:
    outer = radius * halo if halo else radius
    size = max(2, int(math.ceil(outer * 2)) + 2)
    surf = pygame.Surface((size, size), pygame.SRCALPHA)
    c = size / 2
    if halo:
        pygame.draw.circle(surf, (*color[:3], _alpha_byte(color[3] / 255 * halo_alpha)), (c, c), outer)
    pygame.draw.circle(surf, color, (c, c), radius)
    return surf


def dewdrop_sprite(radius: float, color) -> pygame.Surface:
    surf = disc_sprite(radius, color)
    c = surf.get_width() / 2
    k = DEW_HIGHLIGHT_ALPHA
    bright = tuple(int(round(ch + (255 - ch) * k)) for ch in color[:3]) + (color[3],)
    pygame.draw.circle(surf, bright, (c - radius * 0.3, c - radius * 0.4), radius * 0.5)
    return surf


class Renderer:
    """Draws flares, particles and ripples into the managed buffer.

    Usage:
        r = Renderer(surfaces, leaf_slots=[slot_a, slot_b])
        r.begin_frame()
        for p in particles:
            r.draw_particle(p)
    """

    def __init__(self, surfaces: SurfaceManager, leaf_slots: Sequence[AssetSlot] = (), cache_capacity: int = 256) -> None:
        self.surfaces = surfaces
        self.leaf_slots = tuple(leaf_slots)
        self.draw_calls = 0
        self._sprites: "OrderedDict[tuple, pygame.Surface]" = OrderedDict()
        self._cache_capacity = cache_capacity
        self._cache_stats = {"hits": 0, "misses": 0, "evictions": 0}
        self._draw: Dict[ParticleKind, Callable[[Particle, float, float, float], None]] = {
            ParticleKind.PETAL: self._draw_petal,
            ParticleKind.DUST: self._draw_dust,
            ParticleKind.LEAF: self._draw_leaf,
            ParticleKind.RAIN: self._draw_rain,
            ParticleKind.MIST: self._draw_mist,
            ParticleKind.DEWDROP: self._draw_dewdrop,
            ParticleKind.SNOW: self._draw_disc,
            ParticleKind.EMBER: self._draw_ember,
            ParticleKind.DOT: self._draw_disc,
        }

    # Sprite cache -------------------------------------------------------
    def _sprite(self, key: tuple, build: Callable[[], pygame.Surface]) -> pygame.Surface:
        surf = self._sprites.get(key)
        if surf is not None:
            self._sprites.move_to_end(key)
            self._cache_stats["hits"] += 1
            return surf
        self._cache_stats["misses"] += 1
        surf = build()
        self._sprites[key] = surf
        while len(self._sprites) > self._cache_capacity:
            self._sprites.popitem(last=False)
            self._cache_stats["evictions"] += 1
        return surf

    def cache_stats(self) -> dict:
        return dict(self._cache_stats, size=len(self._sprites), capacity=self._cache_capacity)

    def clear_cache(self) -> None:
        _log.debug("sprite cache cleared", self.cache_stats())
        self._sprites.clear()
        self._cache_stats = {"hits": 0, "misses": 0, "evictions": 0}

    # Blitting -----------------------------------------------------------
    def _blit(self, sprite: pygame.Surface, cx: float, cy: float, alpha: float = 1.0, angle: float = 0.0, flags: int = 0) -> None:
        if angle:
            sprite = pygame.transform.rotate(sprite, -math.degrees(angle))
        if alpha < 1.0:
            sprite.set_alpha(_alpha_byte(alpha))
        self.surfaces.buffer.blit(sprite, sprite.get_rect(center=(cx, cy)), special_flags=flags)
        if alpha < 1.0 and not angle:
            sprite.set_alpha(255)  # cached sprite; rotated copies are throwaway

    # Frame entry points -------------------------------------------------
    def begin_frame(self) -> None:
        self.surfaces.clear()
        self.draw_calls += 1

    def draw_flare(self, f: Flare) -> None:
        s = self.surfaces.dpr
        cx = (f.x + math.cos(f.phase) * FLARE_ORBIT_X) * s
        cy = (f.y + math.sin(f.phase) * FLARE_ORBIT_Y) * s
        radius = float(max(1, round(f.r * s)))
        sprite = self._sprite(("flare", radius), lambda: radial_sprite(radius, FLARE_STOPS))
        self._blit(sprite, cx, cy, flags=pygame.BLEND_RGBA_ADD)
        self.draw_calls += 1

    def draw_particle(self, p: Particle) -> None:
        s = self.surfaces.dpr
        draw = self._draw.get(p.kind, self._draw_disc)
        draw(p, p.x * s, p.y * s, s)
        self.draw_calls += 1

    def draw_ripple(self, rp: Ripple) -> None:
        s = self.surfaces.dpr
        width = max(1, int(s))
        radius = max(rp.r * s, width)
        pygame.draw.circle(self.surfaces.buffer, (*RIPPLE_RGB, _alpha_byte(rp.alpha)), (rp.x * s, rp.y * s), radius, width)
        self.draw_calls += 1

    # Kinds --------------------------------------------------------------
    def _draw_petal(self, p: Particle, px: float, py: float, s: float) -> None:
        r = _quantize(p.r * s)
        sprite = self._sprite(("petal", r, p.color), lambda: shape_sprite(petal_outline, r, p.color))
        self._blit(sprite, px, py, p.alpha, p.angle)

    def _draw_dust(self, p: Particle, px: float, py: float, s: float) -> None:
        r = _quantize(p.r * s)
        sprite = self._sprite(
            ("dust", r, p.color), lambda: disc_sprite(r, p.color, halo=DUST_HALO_SCALE, halo_alpha=DUST_HALO_ALPHA)
        )
        self._blit(sprite, px, py, p.alpha)

    def _draw_leaf(self, p: Particle, px: float, py: float, s: float) -> None:
        tilt = math.sin(p.angle) * LEAF_TILT
        img = None
        if self.leaf_slots:
            img = self.leaf_slots[p.variant % len(self.leaf_slots)].surface
        if img is not None:
            size = max(1, int(round(p.r * 2 * s)))
            sprite = self._sprite(("leaf-img", p.variant, size, id(img)), lambda: pygame.transform.scale(img, (size, size)))
        else:
            r = _quantize(p.r * s)
            sprite = self._sprite(("leaf", r, p.color), lambda: shape_sprite(leaf_outline, r, p.color))
        self._blit(sprite, px, py, p.alpha, tilt)

    def _draw_rain(self, p: Particle, px: float, py: float, s: float) -> None:
        head = (px, py - p.r * 6 * s)
        tail = (px - p.vx * 6 * s, py + p.r * 6 * s)
        width = max(1, int(round(max(1.0, p.r * 0.8) * s)))
        c0 = RAIN_HEAD
        c1 = p.color
        buf = self.surfaces.buffer
        segments = 3
        for i in range(segments):
            t0, t1 = i / segments, (i + 1) / segments
            k = (t0 + t1) / 2
            color = tuple(int(round(c0[j] + (c1[j] - c0[j]) * k)) for j in range(3)) + (
                _alpha_byte((c0[3] + (c1[3] - c0[3]) * k) / 255 * p.alpha),
            )
            a = (head[0] + (tail[0] - head[0]) * t0, head[1] + (tail[1] - head[1]) * t0)
            b = (head[0] + (tail[0] - head[0]) * t1, head[1] + (tail[1] - head[1]) * t1)
            pygame.draw.line(buf, color, a, b, width)

    def _draw_mist(self, p: Particle, px: float, py: float, s: float) -> None:
        r = float(max(1, round(p.r * s)))
        sprite = self._sprite(("mist", r), lambda: radial_sprite(r, MIST_STOPS))
        self._blit(sprite, px, py, p.alpha)

    def _draw_dewdrop(self, p: Particle, px: float, py: float, s: float) -> None:
        r = _quantize(p.r * s)
        sprite = self._sprite(("dewdrop", r, p.color), lambda: dewdrop_sprite(r, p.color))
        self._blit(sprite, px, py, p.alpha)

    def _draw_disc(self, p: Particle, px: float, py: float, s: float) -> None:
        r = _quantize(p.r * s)
        sprite = self._sprite(("disc", r, p.color), lambda: disc_sprite(r, p.color))
        self._blit(sprite, px, py, p.alpha)

    def _draw_ember(self, p: Particle, px: float, py: float, s: float) -> None:
        r = _quantize(p.r * EMBER_GLOW_SCALE * s)
        sprite = self._sprite(("ember", r), lambda: radial_sprite(r, EMBER_STOPS))
        self._blit(sprite, px, py, p.alpha)


__all__ = ["Renderer", "radial_sprite", "shape_sprite", "petal_outline", "leaf_outline"]
