"""Writing-session settings: durations, cycle count and the two behavior toggles.

Values are trusted as-is. A zero or negative duration is not rejected here; the
engine simply transitions on the next tick.
"""

import dataclasses
import json
from dataclasses import dataclass
from jt.common.logger import log
from jt.common.setup import PATHS


SETTINGS_PATH = PATHS.current / "settings.json"

# Defaults match a first install: one minute of writing, thirty seconds of break, four cycles.
_SETTINGS_DEFAULTS = {
    "write_duration": 60,
    "break_duration": 30,
    "total_cycles": 4,
    "preserve_progress": True,
    "haptics_enabled": True,
}


@dataclass(frozen=True)
class WritingSettings:
    write_duration: int = _SETTINGS_DEFAULTS["write_duration"]
    break_duration: int = _SETTINGS_DEFAULTS["break_duration"]
    total_cycles: int = _SETTINGS_DEFAULTS["total_cycles"]
    preserve_progress: bool = _SETTINGS_DEFAULTS["preserve_progress"]
    haptics_enabled: bool = _SETTINGS_DEFAULTS["haptics_enabled"]

    @classmethod
    def from_dict(cls, data):
        """Build settings from a loaded dict, defaulting anything missing or of the wrong type."""
        if not isinstance(data, dict):
            log.warning("Settings data was not a dict, falling back to default settings.")
            return cls()
        values = {}
        defaulted = set()
        for key, default in _SETTINGS_DEFAULTS.items():
            if key not in data:
                defaulted.add(key)
                continue
            value = data[key]
            # bool is an int subclass, so durations must not come in as True/False
            if isinstance(default, bool):
                valid = isinstance(value, bool)
            else:
                valid = isinstance(value, int) and not isinstance(value, bool)
            if not valid:
                defaulted.add(key)
                continue
            values[key] = value
        if defaulted:
            log.warning(f"Settings were missing or invalid values that were defaulted: {', '.join(sorted(defaulted))}")
        return cls(**values)

    def to_dict(self):
        return dataclasses.asdict(self)

    def replace(self, **changes):
        return dataclasses.replace(self, **changes)


# Loads settings from SETTINGS_PATH. A missing file gives defaults, an unreadable one gives defaults plus a warning.
def load_settings():
    if not SETTINGS_PATH.exists():
        log.info(f"No settings file at '{SETTINGS_PATH}', using default writing settings.")
        return WritingSettings()
    try:
        with open(SETTINGS_PATH, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError, UnicodeDecodeError):
        log.warning(f"Ran into an error while trying to load '{SETTINGS_PATH}', falling back to default settings.", exc_info=True)
        return WritingSettings()
    settings = WritingSettings.from_dict(data)
    log.info(f"Successfully loaded writing settings from '{SETTINGS_PATH}'.")
    return settings

# Writes the given settings to SETTINGS_PATH.
def save_settings(settings):
    with open(SETTINGS_PATH, "w", encoding="utf-8") as f:
        json.dump(settings.to_dict(), f, indent=2)
    log.info(f"Successfully saved writing settings to '{SETTINGS_PATH}'")
