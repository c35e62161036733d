import json
import os

from seasonfx.constants import DEFAULT_SEASON, SEASONS
from seasonfx.logger import get_logger

log = get_logger("settings")

_TRUTHY = ("1", "true", "yes", "on")


def prefers_reduced_motion() -> bool:
    """Reduced-motion flag, read once at startup from ``SEASONFX_REDUCED_MOTION``."""
    return os.environ.get("SEASONFX_REDUCED_MOTION", "").strip().lower() in _TRUTHY


def display_scale() -> float:
    """Device pixel ratio override from ``SEASONFX_DPR`` (default 1)."""
    raw = os.environ.get("SEASONFX_DPR", "1")
    try:
        return max(1.0, float(raw))
    except ValueError:
        log.warn("Ignoring invalid SEASONFX_DPR", repr(raw))
        return 1.0


class Settings:
    """Persisted dashboard preferences.

    Setters mark the settings dirty and flush immediately; assigning an
    unchanged value never touches the file.
    """

    SETTINGS_FILE = "data/settings.json"

    def __init__(self, path: str | None = None):
        if path is not None:
            self.SETTINGS_FILE = path
        self._season = DEFAULT_SEASON
        self._particles_enabled = True
        self._name = "Friend"
        self._sound_enabled = False
        self._dirty = False
        self.load_settings()

    @property
    def season(self) -> str:
        return self._season

    @season.setter
    def season(self, value: str) -> None:
        if value not in SEASONS:
            log.warn("Ignoring unknown season", repr(value))
            return
        if value != self._season:
            self._season = value
            self._dirty = True
            self.flush()

    @property
    def particles_enabled(self) -> bool:
        return self._particles_enabled

    @particles_enabled.setter
    def particles_enabled(self, value: bool) -> None:
        new_val = bool(value)
        if new_val != self._particles_enabled:
            self._particles_enabled = new_val
            self._dirty = True
            self.flush()

    @property
    def sound_enabled(self) -> bool:
        return self._sound_enabled

    @sound_enabled.setter
    def sound_enabled(self, value: bool) -> None:
        new_val = bool(value)
        if new_val != self._sound_enabled:
            self._sound_enabled = new_val
            self._dirty = True
            self.flush()

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        new_val = (value or "").strip() or "Friend"
        if new_val != self._name:
            self._name = new_val
            self._dirty = True
            self.flush()

    def load_settings(self):
        """Load settings from the JSON file."""
        if os.path.exists(self.SETTINGS_FILE):
            try:
                with open(self.SETTINGS_FILE, "r") as f:
                    data = json.load(f)
                season = data.get("season", self._season)
                self._season = season if season in SEASONS else DEFAULT_SEASON
                self._particles_enabled = bool(data.get("particles_enabled", self._particles_enabled))
                self._name = str(data.get("name", self._name)) or "Friend"
                self._sound_enabled = bool(data.get("sound_enabled", self._sound_enabled))
            except (json.JSONDecodeError, IOError, AttributeError) as e:
                log.warn("Error loading settings; regenerating", e)
                self._dirty = True
                self.flush()
        else:
            self._dirty = True
            self.flush()

    def flush(self):
        """Write settings to disk if dirty and clear dirty flag."""
        if not self._dirty:
            return
        data = {
            "season": self._season,
            "particles_enabled": self._particles_enabled,
            "name": self._name,
            "sound_enabled": self._sound_enabled,
        }
        try:
            directory = os.path.dirname(self.SETTINGS_FILE)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.SETTINGS_FILE, "w") as f:
                json.dump(data, f, indent=4)
            self._dirty = False
            log.debug("Settings flushed")
        except IOError as e:
            log.error("Error saving settings", e)
