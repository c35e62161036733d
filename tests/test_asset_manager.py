import time

import pygame
import pytest

from seasonfx.asset_manager import FAILED, LOADED, PENDING, AssetManager, AssetSlot

pygame.init()


@pytest.fixture
def image_dir(tmp_path):
    surf = pygame.Surface((6, 6))
    surf.fill((0, 200, 0))
    pygame.image.save(surf, str(tmp_path / "leaf1.png"))
    return tmp_path


def test_missing_image_marks_slot_failed(tmp_path):
    am = AssetManager(root=str(tmp_path))
    slot = am.image_slot("leaf2.png", background=False)
    assert slot.status == FAILED
    assert slot.surface is None


def test_existing_image_loads_and_is_cached(image_dir):
    am = AssetManager(root=str(image_dir))
    slot = am.image_slot("leaf1.png", background=False)
    assert slot.status == LOADED
    assert slot.surface.get_size() == (6, 6)
    assert am.image_slot("leaf1.png") is slot
    assert am.loaded_count == 1


def test_background_load_fills_slot_eventually(image_dir):
    am = AssetManager(root=str(image_dir))
    slot = am.image_slot("leaf1.png")
    deadline = time.time() + 5
    while slot.status == PENDING and time.time() < deadline:
        time.sleep(0.01)
    assert slot.ready


def test_corrupt_image_fails_without_raising(tmp_path):
    (tmp_path / "leaf1.png").write_bytes(b"not a png")
    am = AssetManager(root=str(tmp_path))
    slot = am.image_slot("leaf1.png", background=False)
    assert slot.status == FAILED


def test_slot_is_set_once():
    slot = AssetSlot("x.png")
    first = pygame.Surface((1, 1))
    slot.fill(first)
    slot.fill(pygame.Surface((2, 2)))
    slot.fail()
    assert slot.surface is first
    assert slot.status == LOADED


def test_singleton_accessor():
    assert AssetManager.get() is AssetManager.get()
