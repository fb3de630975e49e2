"""Observable writing settings."""

from PySide6.QtCore import QObject, Signal

from jt.common.logger import log
from jt.core.settings import WritingSettings, load_settings, save_settings


class SettingsSource(QObject):
    """Holds the current WritingSettings and emits `changed` whenever they actually change."""

    changed = Signal(object)

    def __init__(self, settings=None, persist=False, parent=None):
        super().__init__(parent)
        self._settings = settings if settings is not None else WritingSettings()
        self._persist = persist

    # Settings source backed by the settings file on disk.
    @classmethod
    def from_disk(cls, parent=None):
        return cls(load_settings(), persist=True, parent=parent)

    @property
    def settings(self):
        return self._settings

    def update(self, **changes):
        new = self._settings.replace(**changes)
        if new == self._settings:
            return False
        self._settings = new
        if self._persist:
            try:
                save_settings(new)
            except OSError:
                log.warning("Failed to save writing settings, keeping them for this run only.", exc_info=True)
        log.info(f"Writing settings changed: {', '.join(f'{k}={v}' for k, v in sorted(changes.items()))}")
        self.changed.emit(new)
        return True
