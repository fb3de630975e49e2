"""Hosts one TimerEngine for one mounted writing screen.

Everything here runs on the Qt event loop, which is what serializes ticks, commands and
settings changes onto a single sequence for the engine.
"""

from PySide6.QtCore import QObject, QTimer, Signal

from jt.common.logger import log
from jt.core.engine import NullEffects, TimerEngine, TimerEvent
from jt.ui.ticker import Ticker

INIT_DELAY_MS = 100
REARM_DELAY_MS = 100
SETTINGS_DELAY_MS = 50


# Passes chime/haptic requests through to the real sink and turns fade requests into a signal for whatever
# widget is showing the timer.
class _EffectsRelay:

    def __init__(self, session, sink):
        self._session = session
        self._sink = sink

    def play_chime(self):
        self._sink.play_chime()

    def trigger_haptic(self, level):
        self._sink.trigger_haptic(level)

    def fade(self, to_opacity, duration_ms):
        self._session.fade_requested.emit(float(to_opacity), int(duration_ms))


class TimerSession(QObject):
    """Lifecycle around the engine: delayed init, ticker, re-arm delays and teardown.

    One single-shot timer handles every delayed restart (after a reset or a settings change).
    Starting it again replaces the pending restart, so a burst of settings changes only resumes
    the timer once, after the last one.
    """

    state_changed = Signal(object)
    completed = Signal()
    fade_requested = Signal(float, int)

    def __init__(
        self,
        session_key,
        settings,
        store,
        effects=None,
        parent=None,
        ticker=None,
        init_delay_ms=INIT_DELAY_MS,
        rearm_delay_ms=REARM_DELAY_MS,
        settings_delay_ms=SETTINGS_DELAY_MS,
    ):
        super().__init__(parent)
        self._engine = TimerEngine(
            session_key,
            settings,
            store,
            effects=_EffectsRelay(self, effects if effects is not None else NullEffects()),
        )
        self._rearm_delay_ms = rearm_delay_ms
        self._settings_delay_ms = settings_delay_ms
        self._mounted = False
        self._alive = True

        self._ticker = ticker if ticker is not None else Ticker(self)
        self._ticker.tick.connect(self._on_tick)

        self._init_timer = QTimer(self)
        self._init_timer.setSingleShot(True)
        self._init_timer.setInterval(init_delay_ms)
        self._init_timer.timeout.connect(self._on_init)

        self._rearm = QTimer(self)
        self._rearm.setSingleShot(True)
        self._rearm.timeout.connect(self._on_rearm)

    @property
    def engine(self):
        return self._engine

    @property
    def state(self):
        return self._engine.state

    @property
    def alive(self):
        return self._alive

    @property
    def rearm_pending(self):
        return self._rearm.isActive()

    # ---- Lifecycle ----

    def mount(self):
        if self._mounted or not self._alive:
            return
        self._mounted = True
        log.debug(f"Mounted timer session '{self._engine.session_key}', initializing in {self._init_timer.interval()}ms")
        self._init_timer.start()

    def unmount(self):
        """Stop every timer this session owns and flush the last snapshot. The session is dead afterwards."""
        if not self._alive:
            return
        self._alive = False
        self._init_timer.stop()
        self._rearm.stop()
        self._ticker.stop()
        self._engine.flush()
        log.info(f"Unmounted timer session '{self._engine.session_key}'")

    def set_screen_active(self, active):
        self._engine.screen_active = bool(active)
        log.debug(f"Screen for '{self._engine.session_key}' is now {'active' if active else 'inactive'}")

    # ---- Commands ----

    def toggle_running(self):
        if not self._alive:
            return
        self._engine.toggle()
        self._after_step([])

    def skip_break(self):
        if not self._alive:
            return
        self._after_step(self._engine.skip_break())

    def reset(self):
        if not self._alive:
            return
        events = self._engine.reset()
        if events:
            self._rearm.start(self._rearm_delay_ms)
        self._after_step(events)

    def on_settings_changed(self, settings):
        if not self._alive:
            return
        events = self._engine.apply_settings(settings)
        if events:
            self._rearm.start(self._settings_delay_ms)
        self._after_step(events)

    # ---- Internal ----

    def _on_init(self):
        if not self._alive:
            return
        self._after_step(self._engine.initialize())

    def _on_rearm(self):
        if not self._alive:
            return
        self._engine.start()
        self._after_step([])

    def _on_tick(self, seconds_left):
        if not self._alive:
            return
        self._after_step(self._engine.handle_tick(seconds_left))

    def _after_step(self, events):
        if TimerEvent.COMPLETED in events:
            self.completed.emit()
        self._sync_ticker()
        self.state_changed.emit(self._engine.state)

    # The engine's remaining_seconds is the authority. Whenever the ticker's countdown no longer matches it
    # (a transition, a reset, a dropped tick) the ticker starts over from the engine's value.
    def _sync_ticker(self):
        engine = self._engine
        if engine.running and not engine.completed:
            if not self._ticker.active or self._ticker.armed_seconds != engine.remaining_seconds:
                self._ticker.arm(engine.remaining_seconds)
        else:
            self._ticker.stop()
