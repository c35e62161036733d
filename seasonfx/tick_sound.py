"""TickSound: the clock's once-per-second click.

A short square-wave burst synthesised straight into a
``pygame.mixer.Sound`` buffer, so no audio asset is needed. ``update``
is called every loop iteration with the wall-clock time and plays the
click only when the displayed second changes.

The mixer is initialised on first use. Headless machines fall back to
the dummy SDL audio driver; if even that fails the service stays
silent and ``available`` is False.
"""

from __future__ import annotations

import os
from array import array
from datetime import datetime

import pygame

from seasonfx.constants import TICK_AMPLITUDE, TICK_DURATION_MS, TICK_FREQUENCY_HZ, TICK_VOLUME
from seasonfx.logger import get_logger

log = get_logger("tick")

_SIGNED_16 = -16


def _init_mixer() -> bool:
    if pygame.mixer.get_init():
        return True
    try:
        pygame.mixer.init()
    except pygame.error:
        # No audio device (CI, remote sessions); retry on the dummy driver.
        os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
        try:
            pygame.mixer.init()
        except pygame.error as e:
            log.warn("Audio unavailable, tick sound disabled:", e)
            return False
    return True


def square_wave(sample_rate: int, channels: int, frequency: float, duration_ms: float, amplitude: int) -> bytes:
    """Signed 16-bit interleaved PCM for a square wave."""
    count = max(1, int(sample_rate * duration_ms / 1000))
    period = sample_rate / frequency
    samples = array("h")
    for i in range(count):
        value = amplitude if (i % period) < period / 2 else -amplitude
        samples.extend([value] * channels)
    return samples.tobytes()


class TickSound:
    _instance: "TickSound | None" = None

    def __init__(
        self,
        frequency: float = TICK_FREQUENCY_HZ,
        duration_ms: float = TICK_DURATION_MS,
        volume: float = TICK_VOLUME,
    ) -> None:
        self._sound: pygame.mixer.Sound | None = None
        self._last_second: datetime | None = None
        self.played = 0
        if not _init_mixer():
            return
        sample_rate, fmt, channels = pygame.mixer.get_init()
        if fmt != _SIGNED_16:
            log.warn("Unsupported mixer format", fmt, "tick sound disabled")
            return
        pcm = square_wave(sample_rate, channels, frequency, duration_ms, TICK_AMPLITUDE)
        self._sound = pygame.mixer.Sound(buffer=pcm)
        self._sound.set_volume(volume)
        log.debug("tick sound ready", f"{frequency}Hz", f"{duration_ms}ms", f"@{sample_rate}Hz x{channels}")

    @classmethod
    def get(cls) -> "TickSound":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @property
    def available(self) -> bool:
        return self._sound is not None

    @property
    def length_ms(self) -> float:
        return self._sound.get_length() * 1000.0 if self._sound is not None else 0.0

    def play(self) -> bool:
        if self._sound is None:
            return False
        self._sound.play()
        self.played += 1
        return True

    def update(self, now: datetime, enabled: bool) -> bool:
        """Click once per new wall-clock second; True when a click was played."""
        second = now.replace(microsecond=0)
        if second == self._last_second:
            return False
        self._last_second = second
        if not enabled:
            return False
        return self.play()


__all__ = ["TickSound", "square_wave"]
