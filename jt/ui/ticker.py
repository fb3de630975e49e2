"""One-second countdown source for the timer engine."""

import math
import time

from PySide6.QtCore import QObject, Qt, QTimer, Signal


class Ticker(QObject):
    """Counts down from an armed value and emits the seconds left once per second.

    The value is computed from a monotonic end time rather than by counting timeouts, so a late
    or early QTimer callback never makes the countdown drift. A value is only emitted when it is
    lower than the last one, and the ticker stops itself after emitting 0.
    """

    tick = Signal(int)

    def __init__(self, parent=None, interval_ms=1000, clock=time.monotonic):
        super().__init__(parent)
        self._clock = clock
        self._end = None
        self._last = None
        self._timer = QTimer(self)
        self._timer.setTimerType(Qt.PreciseTimer)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._on_timeout)

    @property
    def active(self):
        return self._timer.isActive()

    @property
    def armed_seconds(self):
        """The last value emitted (or armed with), None when stopped."""
        return self._last

    def arm(self, seconds):
        seconds = max(0, int(seconds))
        self._end = self._clock() + seconds
        self._last = seconds
        # start() on an active QTimer restarts it, which keeps the first tick a full interval away
        self._timer.start()

    def stop(self):
        self._timer.stop()
        self._end = None
        self._last = None

    def _on_timeout(self):
        if self._end is None:
            self._timer.stop()
            return
        left = max(0, math.ceil(self._end - self._clock()))
        if self._last is not None and left >= self._last and left > 0:
            return
        self._last = left
        if left <= 0:
            self._timer.stop()
        self.tick.emit(left)
