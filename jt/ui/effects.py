"""Desktop side-effect sink: the chime and (no-op) haptics."""

from PySide6.QtCore import QUrl
from PySide6.QtMultimedia import QSoundEffect
from PySide6.QtWidgets import QApplication

from jt.common.logger import log
from jt.common.setup import PATHS

CHIME_PATH = PATHS.assets / "chime.wav"


class DesktopEffects:
    """Plays the chime through QSoundEffect, or the system beep when there's no chime asset.

    Desktops have no haptic motor, so haptic pulses are only logged.
    """

    def __init__(self, chime_path=CHIME_PATH, parent=None):
        self._sound = None
        if chime_path.exists():
            self._sound = QSoundEffect(parent)
            self._sound.setSource(QUrl.fromLocalFile(str(chime_path)))
        else:
            log.info(f"No chime asset at '{chime_path}', chime will use the system beep.")

    def play_chime(self):
        if self._sound is not None:
            # QSoundEffect doesn't rewind on its own
            self._sound.stop()
            self._sound.play()
        else:
            QApplication.beep()

    def trigger_haptic(self, level):
        log.debug(f"Haptic pulse requested ({getattr(level, 'value', level)}), no haptic device on desktop")
