from datetime import datetime
from unittest.mock import Mock

import pygame

from app import NameEditor, OverlayCache, cycle_season, draw_analog_clock, toggle_particles, toggle_sound
from seasonfx.entities import Season
from seasonfx.settings import Settings

pygame.init()


class StubSettings:
    def __init__(self, season="spring", particles_enabled=True, name="Friend"):
        self.season = season
        self.particles_enabled = particles_enabled
        self.sound_enabled = False
        self.name = name


def key(k):
    return pygame.event.Event(pygame.KEYDOWN, key=k, mod=0, unicode="")


def text(s):
    return pygame.event.Event(pygame.TEXTINPUT, text=s)


def test_cycle_season_advances_and_persists():
    settings = StubSettings("spring")
    controller = Mock()
    cycle_season(settings, controller)
    assert settings.season == "summer"
    controller.set_mode.assert_called_once_with(Season.SUMMER)


def test_cycle_season_wraps_around():
    settings = StubSettings("prewinter")
    controller = Mock()
    cycle_season(settings, controller)
    assert settings.season == "spring"


def test_cycle_season_uses_only_the_controller_surface():
    controller = Mock(spec=["set_mode", "pause", "resume", "reflow"])
    cycle_season(StubSettings("autumn"), controller)
    controller.set_mode.assert_called_once_with(Season.WINTER)


def test_toggle_particles_pauses_then_resumes():
    settings = StubSettings(particles_enabled=True)
    controller = Mock()
    toggle_particles(settings, controller)
    assert settings.particles_enabled is False
    controller.pause.assert_called_once()
    toggle_particles(settings, controller)
    assert settings.particles_enabled is True
    controller.resume.assert_called_once()


def test_toggle_sound_flips_setting():
    settings = StubSettings()
    toggle_sound(settings)
    assert settings.sound_enabled is True
    toggle_sound(settings)
    assert settings.sound_enabled is False


def test_name_editor_writes_settings_live(tmp_path):
    settings = Settings(str(tmp_path / "settings.json"))
    editor = NameEditor(settings)
    assert editor.handle(text("x")) is False  # inactive: text is ignored
    assert editor.handle(key(pygame.K_F2))
    assert editor.active and editor.buffer == "Friend"
    for _ in range(len("Friend")):
        editor.handle(key(pygame.K_BACKSPACE))
    assert editor.buffer == ""
    assert settings.name == "Friend"
    for ch in "Div":
        assert editor.handle(text(ch))
    assert settings.name == "Div"
    editor.handle(key(pygame.K_BACKSPACE))
    assert settings.name == "Di"
    assert editor.handle(key(pygame.K_RETURN))
    assert not editor.active
    assert Settings(str(tmp_path / "settings.json")).name == "Di"


def test_name_editor_swallows_command_keys_while_active():
    settings = StubSettings(name="Ada")
    editor = NameEditor(settings)
    editor.start()
    assert editor.handle(key(pygame.K_s))
    assert editor.handle(key(pygame.K_ESCAPE))
    assert not editor.active
    assert editor.handle(key(pygame.K_s)) is False
    assert editor.handle(pygame.event.Event(pygame.MOUSEMOTION, pos=(1, 1), rel=(0, 0), buttons=(0, 0, 0))) is False


def test_overlay_rerenders_once_per_second():
    fonts = tuple(pygame.font.Font(None, size) for size in (40, 24, 16))
    cache = OverlayCache(fonts)
    settings = StubSettings(name="Ada")
    t0 = datetime(2026, 10, 16, 9, 30, 5, 100)
    first = cache.get((320, 240), settings, Season.SPRING, t0)
    again = cache.get((320, 240), settings, Season.SPRING, t0.replace(microsecond=900_000))
    assert again is first
    assert cache.renders == 1
    cache.get((320, 240), settings, Season.SPRING, t0.replace(second=6))
    assert cache.renders == 2
    settings.name = "Bo"
    cache.get((320, 240), settings, Season.SPRING, t0.replace(second=6))
    assert cache.renders == 3


def test_analog_clock_draws_hour_markers():
    surf = pygame.Surface((120, 120), pygame.SRCALPHA)
    draw_analog_clock(surf, (60, 60), 46, datetime(2026, 1, 1, 0, 0, 0))
    # 3 o'clock hour marker spans radius 38..44 on the right; hands all point up
    assert surf.get_at((100, 60)).a > 0
    assert surf.get_at((90, 60)).a == 0
