"""Seasonal greeting dashboard.

Runs the particle engine behind a clock and greeting overlay. The loop
polls events once, feeds the pointer tracker and the debounced surface
manager, dispatches pending animation frames with the pygame tick
count, then composes background, particle layer and text. The text
overlay is re-rendered only when what it shows changes, at most once
per displayed second.

Keys: S cycles the season, P toggles particles, T toggles the clock
tick, F2 edits the greeting name (Enter or Esc to finish), F1 toggles
the performance overlay, ESC quits.
"""

from __future__ import annotations

import math
import os
from datetime import datetime

import pygame

from seasonfx.constants import CLOCK_HOUR_MARKER_EVERY, CLOCK_MARKERS, SEASON_BACKGROUNDS, SEASON_LABELS
from seasonfx.controller import EngineController
from seasonfx.entities import Season
from seasonfx.greeting import format_clock, format_date, greeting_for, hand_angles
from seasonfx.logger import get_logger
from seasonfx.perf_hud import PerformanceHUD
from seasonfx.pointer import PointerTracker
from seasonfx.settings import Settings, display_scale, prefers_reduced_motion
from seasonfx.surface import SurfaceManager
from seasonfx.tick_sound import TickSound

log = get_logger("app")

WINDOW_SIZE = (1280, 720)
TEXT_COLOR = (245, 245, 245)
SUBTLE_COLOR = (200, 205, 215)


def toggle_particles(settings: Settings, controller: EngineController) -> None:
    settings.particles_enabled = not settings.particles_enabled
    if settings.particles_enabled:
        controller.resume()
    else:
        controller.pause()


def toggle_sound(settings: Settings) -> None:
    settings.sound_enabled = not settings.sound_enabled
    log.info("tick sound", "on" if settings.sound_enabled else "off")


def cycle_season(settings: Settings, controller: EngineController) -> None:
    nxt = Season.parse(settings.season).next()
    settings.season = nxt.value
    controller.set_mode(nxt)


class NameEditor:
    """Inline editing of the greeting name.

    While active every key and text event is consumed, and each edit is
    written straight to ``settings.name`` so the greeting follows the
    typing. An empty buffer shows up as the default name.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.active = False
        self.buffer = ""

    def start(self) -> None:
        self.active = True
        self.buffer = self.settings.name

    def finish(self) -> None:
        self.active = False
        self.settings.name = self.buffer

    def handle(self, event: pygame.event.Event) -> bool:
        """Process one event; True when it was consumed."""
        if not self.active:
            if event.type == pygame.KEYDOWN and event.key == pygame.K_F2:
                self.start()
                return True
            return False
        if event.type == pygame.TEXTINPUT:
            self.buffer += event.text
            self.settings.name = self.buffer
            return True
        if event.type == pygame.KEYDOWN:
            if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_ESCAPE, pygame.K_F2):
                self.finish()
            elif event.key == pygame.K_BACKSPACE:
                self.buffer = self.buffer[:-1]
                self.settings.name = self.buffer
            return True
        return False


def draw_overlay(
    screen: pygame.Surface, fonts, settings: Settings, season: Season, now: datetime, editing: str | None = None
) -> None:
    big, mid, small = fonts
    w, h = screen.get_size()
    greeting, subtitle = greeting_for(now.hour, settings.name)
    rows = [
        (big, format_clock(now), TEXT_COLOR),
        (small, format_date(now), SUBTLE_COLOR),
        (mid, greeting, TEXT_COLOR),
        (small, subtitle, SUBTLE_COLOR),
    ]
    if editing is not None:
        rows.append((small, f"Name: {editing}_", TEXT_COLOR))
    y = h // 2 - 120
    for font, text, color in rows:
        surf = font.render(text, True, color)
        screen.blit(surf, surf.get_rect(midtop=(w // 2, y)))
        y += surf.get_height() + 10
    label = small.render(SEASON_LABELS.get(season.value, "Season"), True, SUBTLE_COLOR)
    screen.blit(label, label.get_rect(bottomright=(w - 16, h - 12)))
    draw_analog_clock(screen, (w - 70, 70), 46, now)


def draw_analog_clock(screen: pygame.Surface, center, radius: int, now: datetime) -> None:
    cx, cy = center
    pygame.draw.circle(screen, SUBTLE_COLOR, center, radius, 2)
    for i in range(CLOCK_MARKERS):
        hour = i % CLOCK_HOUR_MARKER_EVERY == 0
        a = math.radians(i * 360 / CLOCK_MARKERS)
        inner = radius - (8 if hour else 4)
        start = (cx + math.sin(a) * inner, cy - math.cos(a) * inner)
        end = (cx + math.sin(a) * (radius - 2), cy - math.cos(a) * (radius - 2))
        pygame.draw.line(screen, TEXT_COLOR if hour else SUBTLE_COLOR, start, end, 2 if hour else 1)
    for deg, length, width in zip(hand_angles(now), (0.5, 0.75, 0.9), (4, 3, 1)):
        a = math.radians(deg)
        end = (cx + math.sin(a) * radius * length, cy - math.cos(a) * radius * length)
        pygame.draw.line(screen, TEXT_COLOR, center, end, width)


class OverlayCache:
    """Keeps the rendered overlay until the second, name, season or size changes."""

    def __init__(self, fonts) -> None:
        self.fonts = fonts
        self.renders = 0
        self._key = None
        self._surface: pygame.Surface | None = None

    def get(self, size, settings: Settings, season: Season, now: datetime, editing: str | None = None) -> pygame.Surface:
        key = (tuple(size), now.replace(microsecond=0), settings.name, season, editing)
        if key != self._key or self._surface is None:
            surf = pygame.Surface(size, pygame.SRCALPHA)
            draw_overlay(surf, self.fonts, settings, season, now, editing)
            self._key, self._surface = key, surf
            self.renders += 1
        return self._surface


def main():
    pygame.init()
    settings = Settings()
    reduced = prefers_reduced_motion()
    screen = pygame.display.set_mode(WINDOW_SIZE, pygame.RESIZABLE)
    pygame.display.set_caption("Seasonal Greeter")
    clock = pygame.time.Clock()
    fonts = (pygame.font.Font(None, 96), pygame.font.Font(None, 48), pygame.font.Font(None, 28))

    surfaces = SurfaceManager(*screen.get_size(), dpr=display_scale())
    pointer = PointerTracker()
    controller = EngineController(
        surfaces,
        pointer,
        season=settings.season,
        reduced_motion=reduced,
        interaction_enabled=lambda: settings.particles_enabled,
    )
    if not settings.particles_enabled:
        controller.pause()
    hud = PerformanceHUD(enabled=False, log_path=os.environ.get("SEASONFX_PERF_LOG"))
    ticker = TickSound.get()
    editor = NameEditor(settings)
    overlay = OverlayCache(fonts)
    log.info("started", controller.season.value, "reduced_motion" if reduced else "animated", f"{surfaces.width}x{surfaces.height}@{surfaces.dpr}")

    running = True
    while running:
        now_ms = pygame.time.get_ticks()
        events = pygame.event.get()
        for e in events:
            if e.type == pygame.QUIT:
                running = False
            elif e.type == pygame.VIDEORESIZE:
                surfaces.request_resize(e.w, e.h, now_ms)
            elif editor.handle(e):
                continue
            elif e.type == pygame.KEYDOWN:
                if e.key == pygame.K_ESCAPE:
                    running = False
                elif e.key == pygame.K_s:
                    cycle_season(settings, controller)
                elif e.key == pygame.K_p:
                    toggle_particles(settings, controller)
                elif e.key == pygame.K_t:
                    toggle_sound(settings)
                elif e.key == pygame.K_F1:
                    hud.enabled = not hud.enabled
        pointer.handle(events)
        surfaces.poll(now_ms)

        hud.begin_frame()
        controller.scheduler.dispatch(now_ms)
        hud.end_frame(counts=controller.engine.counts(), clock=clock)

        now = datetime.now()
        ticker.update(now, enabled=settings.sound_enabled and not reduced)

        screen = pygame.display.get_surface()
        screen.fill(SEASON_BACKGROUNDS.get(controller.season.value, (0, 0, 0)))
        layer = surfaces.buffer
        if layer.get_size() != screen.get_size():
            layer = pygame.transform.smoothscale(layer, screen.get_size())
        screen.blit(layer, (0, 0))
        editing = editor.buffer if editor.active else None
        screen.blit(overlay.get(screen.get_size(), settings, controller.season, now, editing), (0, 0))
        hud.render(screen, fonts[2])
        pygame.display.flip()
        clock.tick(60)

    log.info("shutting down")
    hud.close()
    settings.flush()
    pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    main()
