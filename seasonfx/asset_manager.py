"""AssetManager: optional decorative images.

The engine only has two assets, the leaf images, and neither is
required. Each image is requested once and lands in an ``AssetSlot``:
a set-once cell that starts *pending* and ends *loaded* or *failed*.
Loading runs on a daemon thread so construction never waits on disk;
the renderer reads ``slot.surface`` every frame and draws its
procedural fallback while it is ``None``. Failed loads are logged and
never retried.
"""

from __future__ import annotations

import os
import threading
from typing import Dict

import pygame

from seasonfx.logger import get_logger

log = get_logger("assets")

IMG_ROOT = "data/images/"

PENDING = "pending"
LOADED = "loaded"
FAILED = "failed"


class AssetSlot:
    def __init__(self, rel_path: str) -> None:
        self.rel_path = rel_path
        self.status = PENDING
        self._surface: pygame.Surface | None = None

    @property
    def surface(self) -> pygame.Surface | None:
        return self._surface

    @property
    def ready(self) -> bool:
        return self.status == LOADED

    def fill(self, surface: pygame.Surface) -> None:
        if self.status != PENDING:
            return
        self._surface = surface
        self.status = LOADED

    def fail(self) -> None:
        if self.status == PENDING:
            self.status = FAILED


class AssetManager:
    _instance: "AssetManager | None" = None

    def __init__(self, root: str = IMG_ROOT) -> None:
        self.root = root
        self._slots: Dict[str, AssetSlot] = {}

    @classmethod
    def get(cls) -> "AssetManager":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def image_slot(self, rel_path: str, background: bool = True) -> AssetSlot:
        """Return the slot for ``rel_path``, starting its load on first request."""
        slot = self._slots.get(rel_path)
        if slot is not None:
            return slot
        slot = AssetSlot(rel_path)
        self._slots[rel_path] = slot
        if background:
            threading.Thread(target=self._load_into, args=(slot,), name=f"asset:{rel_path}", daemon=True).start()
        else:
            self._load_into(slot)
        return slot

    def _load_into(self, slot: AssetSlot) -> None:
        full = os.path.join(self.root, slot.rel_path)
        if not os.path.exists(full):
            log.warn("Optional image missing, using procedural shape:", full)
            slot.fail()
            return
        try:
            # No convert_alpha(): it needs a display mode and may run off the main thread.
            slot.fill(pygame.image.load(full))
            log.debug("Loaded", full)
        except (pygame.error, OSError) as e:
            log.warn("Failed to load image", full, e)
            slot.fail()

    @property
    def loaded_count(self) -> int:
        return sum(1 for s in self._slots.values() if s.ready)


__all__ = ["AssetManager", "AssetSlot", "PENDING", "LOADED", "FAILED"]
