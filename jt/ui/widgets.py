"""Timer panel shown on the writing screen.

The panel only renders TimerState snapshots and forwards button clicks; it never touches the
engine directly.
"""

from PySide6.QtCore import Qt, QPropertyAnimation, Signal
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QGraphicsOpacityEffect,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from jt.core.engine import Phase


def format_time(seconds):
    """Format remaining seconds as MM:SS. Negative values clamp to zero."""
    seconds = max(0, int(seconds))
    m, s = divmod(seconds, 60)
    return f"{m:02d}:{s:02d}"


_PHASE_LABELS = {
    Phase.WRITING: "Writing",
    Phase.BREAK: "Break",
}


class TimerPanel(QWidget):

    toggle_clicked = Signal()
    skip_clicked = Signal()
    reset_clicked = Signal()

    def __init__(self, font_family="Calibri", parent=None):
        super().__init__(parent)

        lay = QVBoxLayout(self)
        lay.setSpacing(8)

        self._phase_lbl = QLabel(_PHASE_LABELS[Phase.WRITING])
        self._phase_lbl.setFont(QFont(font_family, 12, QFont.Bold))
        self._phase_lbl.setAlignment(Qt.AlignCenter)
        lay.addWidget(self._phase_lbl)

        self._time_lbl = QLabel(format_time(0))
        self._time_lbl.setFont(QFont(font_family, 32, QFont.Bold))
        self._time_lbl.setAlignment(Qt.AlignCenter)
        lay.addWidget(self._time_lbl)

        self._cycle_lbl = QLabel("")
        self._cycle_lbl.setFont(QFont(font_family, 11))
        self._cycle_lbl.setAlignment(Qt.AlignCenter)
        lay.addWidget(self._cycle_lbl)

        btn_row = QHBoxLayout()
        self._toggle_btn = QPushButton("Pause")
        self._toggle_btn.clicked.connect(self.toggle_clicked)
        self._skip_btn = QPushButton("Skip Break")
        self._skip_btn.clicked.connect(self.skip_clicked)
        self._reset_btn = QPushButton("Reset")
        self._reset_btn.clicked.connect(self.reset_clicked)
        for btn in (self._toggle_btn, self._skip_btn, self._reset_btn):
            btn.setFont(QFont(font_family, 11))
            btn_row.addWidget(btn)
        lay.addLayout(btn_row)

        # Completion fades the panel out, a reset fades it back in
        self._opacity = QGraphicsOpacityEffect(self)
        self._opacity.setOpacity(1.0)
        self.setGraphicsEffect(self._opacity)
        self._fade = QPropertyAnimation(self._opacity, b"opacity", self)

    def show_state(self, state):
        self._time_lbl.setText(format_time(state.remaining_seconds))
        if state.completed:
            self._phase_lbl.setText("Done")
            self._cycle_lbl.setText(f"All {state.total_cycles} cycles complete")
        else:
            self._phase_lbl.setText(_PHASE_LABELS.get(state.phase, str(state.phase)))
            self._cycle_lbl.setText(f"Cycle {state.current_cycle} of {state.total_cycles}")
        self._toggle_btn.setText("Pause" if state.running else "Resume")
        self._toggle_btn.setEnabled(not state.completed and not state.is_initial_load)
        self._skip_btn.setVisible(state.skip_break_available and not state.completed)
        self._reset_btn.setEnabled(not state.is_initial_load)

    def fade_to(self, opacity, duration_ms):
        self._fade.stop()
        self._fade.setDuration(duration_ms)
        self._fade.setStartValue(self._opacity.opacity())
        self._fade.setEndValue(opacity)
        self._fade.start()
