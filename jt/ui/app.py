import sys
from PySide6.QtCore import QEvent
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QApplication,
    QDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)
from jt.common.logger import log
from jt.core.progress import JsonProgressStore, session_key
from jt.ui.dialogs.settings import SettingsDialog
from jt.ui.effects import DesktopEffects
from jt.ui.session import TimerSession
from jt.ui.settings_source import SettingsSource
from jt.ui.widgets import TimerPanel


# ---------------------------------------------------------------------------
# Writing screen
# ---------------------------------------------------------------------------

# The focused-writing screen for one date. Mounts a TimerSession when shown and tears it down when closed.
class FocusWriteWindow(QMainWindow):

    def __init__(self, key=None, settings_source=None, store=None, effects=None):
        super().__init__()
        self.session_key = key or session_key()
        self.setWindowTitle(f"Focus Write: {self.session_key}")

        self._settings_source = settings_source or SettingsSource.from_disk(self)
        self._store = store if store is not None else JsonProgressStore()

        # -- Build UI --
        central = QWidget()
        self.setCentralWidget(central)
        lay = QVBoxLayout(central)

        header = QHBoxLayout()
        title = QLabel(self.session_key)
        title.setFont(QFont("Calibri", 12))
        header.addWidget(title)
        header.addStretch()
        cfg_btn = QPushButton("Settings")
        cfg_btn.setFont(QFont("Calibri", 11))
        cfg_btn.clicked.connect(self._on_config)
        header.addWidget(cfg_btn)
        lay.addLayout(header)

        self._panel = TimerPanel()
        lay.addWidget(self._panel)

        # -- Session --
        self._session = TimerSession(
            self.session_key,
            self._settings_source.settings,
            self._store,
            effects=effects if effects is not None else DesktopEffects(parent=self),
            parent=self,
        )
        self._session.state_changed.connect(self._panel.show_state)
        self._session.fade_requested.connect(self._panel.fade_to)
        self._session.completed.connect(self._on_completed)
        self._settings_source.changed.connect(self._session.on_settings_changed)

        self._panel.toggle_clicked.connect(self._session.toggle_running)
        self._panel.skip_clicked.connect(self._session.skip_break)
        self._panel.reset_clicked.connect(self._session.reset)

        self._panel.show_state(self._session.state)
        self._session.mount()

    @property
    def session(self):
        return self._session

    def changeEvent(self, event):
        # Ticks only count while this window is in front
        if event.type() == QEvent.ActivationChange:
            self._session.set_screen_active(self.isActiveWindow())
        super().changeEvent(event)

    def _on_config(self):
        dlg = SettingsDialog(self, self._settings_source.settings)
        if dlg.exec() == QDialog.Accepted:
            s = dlg.chosen_settings
            self._settings_source.update(
                write_duration=s.write_duration,
                break_duration=s.break_duration,
                total_cycles=s.total_cycles,
                preserve_progress=s.preserve_progress,
                haptics_enabled=s.haptics_enabled,
            )

    def _on_completed(self):
        log.info(f"Writing session for '{self.session_key}' completed")

    def closeEvent(self, event):
        self._settings_source.changed.disconnect(self._session.on_settings_changed)
        self._session.unmount()
        event.accept()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    app = QApplication(sys.argv)
    window = FocusWriteWindow()
    window.show()
    sys.exit(app.exec())
