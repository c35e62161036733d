"""EngineController: lifecycle surface of the particle engine.

External collaborators (season selector, particle toggle, resize
handling) talk to the engine only through ``set_mode``, ``pause``,
``resume`` and ``reflow``. The controller owns the run state and the
frame loop:

    constructed -> running           (first frame requested)
    running     -> paused            (pending frame cancelled, surface cleared)
    paused      -> running           (time reference reset, one frame requested)

Each frame callback computes the capped elapsed time, advances the
engine and requests exactly one follow-up frame, so there is never more
than one frame outstanding. With reduced motion no frame is ever
requested; the current pool is drawn statically at construction, after
each mode switch and after each resize, unless paused.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import pygame

from seasonfx.asset_manager import AssetManager, AssetSlot
from seasonfx.constants import DEFAULT_SEASON, LEAF_IMAGES, MAX_FRAME_DT_MS
from seasonfx.engine import SimulationEngine
from seasonfx.entities import Season
from seasonfx.logger import get_logger
from seasonfx.pointer import PointerTracker
from seasonfx.renderer import Renderer
from seasonfx.rng_service import RNGService
from seasonfx.scheduler import FrameScheduler
from seasonfx.surface import SurfaceManager

log = get_logger("controller")


@dataclass
class EngineRunState:
    running: bool
    season: Season
    frame_handle: int | None = None
    paused: bool = False


class EngineController:
    def __init__(
        self,
        surfaces: SurfaceManager,
        pointer: PointerTracker | None = None,
        *,
        season: str = DEFAULT_SEASON,
        reduced_motion: bool = False,
        interaction_enabled: Callable[[], bool] = lambda: True,
        scheduler: FrameScheduler | None = None,
        clock: Callable[[], float] | None = None,
        renderer: Renderer | None = None,
        leaf_slots: Sequence[AssetSlot] | None = None,
        rng: RNGService | None = None,
    ) -> None:
        self.surfaces = surfaces
        self.reduced_motion = bool(reduced_motion)
        self.scheduler = scheduler or FrameScheduler()
        self._clock = clock or pygame.time.get_ticks
        if renderer is None:
            if leaf_slots is None:
                assets = AssetManager.get()
                leaf_slots = [assets.image_slot(name) for name in LEAF_IMAGES]
            renderer = Renderer(surfaces, leaf_slots=leaf_slots)
        self.engine = SimulationEngine(
            surfaces,
            renderer,
            pointer,
            reduced_motion=self.reduced_motion,
            interaction_enabled=interaction_enabled,
            rng=rng,
        )
        self.engine.set_mode(season)
        self.state = EngineRunState(running=not self.reduced_motion, season=self.engine.season)
        self._last = self._clock()
        surfaces.add_resize_listener(lambda _w, _h: self.reflow())
        if self.state.running:
            self.state.frame_handle = self.scheduler.request_frame(self._on_frame)
        else:
            self.engine.draw_static()
            log.info("reduced motion: animation disabled")

    # ---- Frame loop ----
    def _on_frame(self, now: float) -> None:
        dt = max(0.0, min(MAX_FRAME_DT_MS, now - self._last))
        self._last = now
        self.state.frame_handle = None
        if not self.state.running:
            return
        self.engine.advance(dt, now)
        self.state.frame_handle = self.scheduler.request_frame(self._on_frame)

    # ---- Public surface ----
    @property
    def running(self) -> bool:
        return self.state.running

    @property
    def season(self) -> Season:
        return self.state.season

    def set_mode(self, season) -> None:
        target = Season.parse(season)
        if target is self.state.season and self.engine.particles:
            return
        self.engine.set_mode(target)
        self.engine.renderer.clear_cache()
        self.state.season = self.engine.season
        self._redraw_static()

    def pause(self) -> None:
        if self.state.frame_handle is not None:
            self.scheduler.cancel_frame(self.state.frame_handle)
            self.state.frame_handle = None
        if self.state.running:
            log.debug("pause")
        self.state.running = False
        self.state.paused = True
        self.surfaces.clear()

    def resume(self) -> None:
        if self.reduced_motion or self.state.running:
            return
        self.state.running = True
        self.state.paused = False
        self._last = self._clock()
        self.state.frame_handle = self.scheduler.request_frame(self._on_frame)
        log.debug("resume")

    def reflow(self) -> None:
        self.engine.reflow()
        # A resize replaces the buffer; nothing else repaints it without frames.
        self._redraw_static()

    def _redraw_static(self) -> None:
        if self.reduced_motion and not self.state.paused:
            self.engine.draw_static()


__all__ = ["EngineController", "EngineRunState"]
