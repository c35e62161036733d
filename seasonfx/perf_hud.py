"""Frame timing overlay for the animation loop.

Measures how long each dispatched frame spends in engine work, keeps an
exponential moving average of it, and records entity counts next to the
timing so a frame-rate drop can be matched with pool or ripple growth.
Timing is independent from drawing: the EMA logic runs without a display
(see ``tests/test_perf_hud.py``), and ``render`` only formats the last
completed sample.

Typical usage inside the host loop:

    hud = PerformanceHUD(enabled=True)
    hud.begin_frame()
    scheduler.dispatch(now)
    hud.end_frame(counts=controller.engine.counts(), clock=clock)
    hud.render(screen, font)
"""

from __future__ import annotations

import csv
import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from seasonfx.logger import get_logger

log = get_logger("perf")


@dataclass
class PerformanceSample:
    """Metrics for one frame.

    Attributes:
        work_ms (float): Milliseconds spent between ``begin_frame`` and ``end_frame``.
        avg_work_ms (float): EMA of ``work_ms``.
        fps (float | None): Frames per second reported by the pygame clock, if given.
        counts (dict): Entity counts at the end of the frame.
    """

    work_ms: float
    avg_work_ms: float
    fps: float | None = None
    counts: Dict[str, int] = field(default_factory=dict)


@dataclass
class PerformanceHUD:
    enabled: bool = True
    alpha: float = 0.1  # EMA smoothing factor
    log_path: Optional[str] = None
    _t_start: float = field(default=0.0, init=False, repr=False)
    _avg_work_ms: Optional[float] = field(default=None, init=False)
    _sample: Optional[PerformanceSample] = field(default=None, init=False)
    _csv_file: Optional[Any] = field(default=None, init=False, repr=False)
    _csv_writer: Optional[Any] = field(default=None, init=False, repr=False)

    def begin_frame(self) -> None:
        if not self.enabled:
            return
        self._t_start = time.perf_counter()

    def end_frame(self, counts: Dict[str, int] | None = None, clock=None) -> None:
        if not self.enabled:
            return
        work_ms = (time.perf_counter() - self._t_start) * 1000.0
        if self._avg_work_ms is None:
            self._avg_work_ms = work_ms
        else:
            self._avg_work_ms = self.alpha * work_ms + (1 - self.alpha) * self._avg_work_ms
        fps = clock.get_fps() if clock is not None else None
        self._sample = PerformanceSample(work_ms=work_ms, avg_work_ms=self._avg_work_ms, fps=fps, counts=dict(counts or {}))
        if self.log_path:
            self._log_sample()

    @property
    def last_sample(self) -> Optional[PerformanceSample]:
        return self._sample

    def lines(self) -> list[str]:
        s = self._sample
        if s is None:
            return []
        out = [f"work {s.work_ms:.2f} ms (avg {s.avg_work_ms:.2f})"]
        if s.fps is not None:
            out.append(f"fps {s.fps:.1f}")
        out.extend(f"{k} {v}" for k, v in s.counts.items())
        return out

    def render(self, surface, font, *, x: int = 8, y: int = 8) -> None:
        if not (self.enabled and self._sample):
            return
        for i, line in enumerate(self.lines()):
            surface.blit(font.render(line, True, (235, 235, 235)), (x, y + i * (font.get_linesize() + 1)))

    def close(self) -> None:
        if self._csv_file is not None:
            self._csv_file.close()
            self._csv_file = None
            self._csv_writer = None

    def _log_sample(self) -> None:
        if self._csv_writer is None:
            try:
                self._csv_file = open(self.log_path, "a", newline="")
                self._csv_writer = csv.writer(self._csv_file)
                if self._csv_file.tell() == 0:
                    self._csv_writer.writerow(["timestamp", "work_ms", "avg_work_ms", "fps", "counts"])
            except OSError as e:
                log.warn("Perf log disabled:", e)
                self.log_path = None
                return
        s = self._sample
        self._csv_writer.writerow(
            [
                time.time(),
                f"{s.work_ms:.3f}",
                f"{s.avg_work_ms:.3f}",
                f"{s.fps:.2f}" if s.fps else "",
                json.dumps(s.counts),
            ]
        )


__all__ = ["PerformanceHUD", "PerformanceSample"]
