"""Settings dialog for the writing timer: tabbed sidebar layout."""

from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QComboBox,
    QDialog,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QPushButton,
    QSpinBox,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

# Simple tabbed settings dialog with a left sidebar. Opens from the gear button on the writing screen; the
# caller reads `chosen_settings` after it's accepted.
class SettingsDialog(QDialog):

    def __init__(self, parent, settings):
        super().__init__(parent)
        self.setWindowTitle("Writing Settings")
        self.setModal(True)

        # Output attribute, read by the window after the dialog closes
        self.chosen_settings = settings

        outer = QVBoxLayout(self)
        body = QHBoxLayout()

        self._tab_list = QListWidget()
        self._tab_list.setFixedWidth(140)
        self._tab_list.setFont(QFont("Calibri", 12))
        self._tab_list.addItem("Timer")
        self._tab_list.addItem("Behavior")
        self._tab_list.setCurrentRow(0)
        self._tab_list.currentRowChanged.connect(self._on_tab_changed)
        body.addWidget(self._tab_list)

        self._stack = QStackedWidget()
        self._stack.addWidget(self._build_timer_page(settings))
        self._stack.addWidget(self._build_behavior_page(settings))
        body.addWidget(self._stack, 1)

        outer.addLayout(body, 1)

        # Bottom row: reset warning + Apply
        btn_row = QHBoxLayout()
        self._reset_lbl = QLabel("* Changing the writing time restarts the session")
        self._reset_lbl.setFont(QFont("Calibri", 10))
        self._reset_lbl.setStyleSheet("color: #888888;")
        self._reset_lbl.setVisible(False)
        btn_row.addWidget(self._reset_lbl)
        btn_row.addStretch()
        apply_btn = QPushButton("Apply")
        apply_btn.setFont(QFont("Calibri", 12))
        apply_btn.clicked.connect(self._apply)
        btn_row.addWidget(apply_btn)
        outer.addLayout(btn_row)

        self._initial_write_duration = settings.write_duration

    def _on_tab_changed(self, index):
        self._stack.setCurrentIndex(index)

    def _check_reset_needed(self):
        self._reset_lbl.setVisible(
            self._write_duration.value() != self._initial_write_duration)

    # Label + control row, the way every setting on these pages is laid out.
    @staticmethod
    def _add_row(lay, text, widget, tooltip):
        row = QHBoxLayout()
        lbl = QLabel(text)
        lbl.setFont(QFont("Calibri", 12, QFont.Bold))
        lbl.setToolTip(tooltip)
        widget.setMinimumWidth(200)
        widget.setToolTip(tooltip)
        row.addWidget(lbl)
        row.addWidget(widget)
        lay.addLayout(row)

    # ------------------------------------------------------------------ #
    #  Timer page                                                          #
    # ------------------------------------------------------------------ #

    def _build_timer_page(self, settings):
        page = QWidget()
        lay = QVBoxLayout(page)
        lay.setSpacing(12)

        self._write_duration = QSpinBox()
        self._write_duration.setRange(1, 4 * 3600)
        self._write_duration.setValue(settings.write_duration)
        self._write_duration.setSuffix(" sec")
        self._write_duration.valueChanged.connect(self._check_reset_needed)
        self._add_row(lay, "Writing Time:", self._write_duration,
                      "How long each writing phase lasts.")

        self._break_duration = QSpinBox()
        self._break_duration.setRange(1, 3600)
        self._break_duration.setValue(settings.break_duration)
        self._break_duration.setSuffix(" sec")
        self._add_row(lay, "Break Time:", self._break_duration,
                      "How long each break lasts. Takes effect from the next break.")

        self._total_cycles = QSpinBox()
        self._total_cycles.setRange(1, 20)
        self._total_cycles.setValue(settings.total_cycles)
        self._add_row(lay, "Cycles:", self._total_cycles,
                      "Number of writing + break cycles in one session.")

        lay.addStretch()
        return page

    # ------------------------------------------------------------------ #
    #  Behavior page                                                       #
    # ------------------------------------------------------------------ #

    def _build_behavior_page(self, settings):
        page = QWidget()
        lay = QVBoxLayout(page)
        lay.setSpacing(12)

        self._preserve = QComboBox()
        self._preserve.addItems(["Yes", "No"])
        self._preserve.setCurrentText("Yes" if settings.preserve_progress else "No")
        self._add_row(lay, "Resume Progress:", self._preserve,
                      "Yes: reopening today's entry continues the timer where it left off.\n\nNo: the timer always starts fresh.")

        self._haptics = QComboBox()
        self._haptics.addItems(["On", "Off"])
        self._haptics.setCurrentText("On" if settings.haptics_enabled else "Off")
        self._add_row(lay, "Haptics:", self._haptics,
                      "Haptic pulses at phase changes, on devices that support them.")

        lay.addStretch()
        return page

    # ------------------------------------------------------------------ #
    #  Apply                                                               #
    # ------------------------------------------------------------------ #

    def _apply(self):
        self.chosen_settings = self.chosen_settings.replace(
            write_duration=self._write_duration.value(),
            break_duration=self._break_duration.value(),
            total_cycles=self._total_cycles.value(),
            preserve_progress=self._preserve.currentText() == "Yes",
            haptics_enabled=self._haptics.currentText() == "On",
        )
        self.accept()
