"""Writing/break interval timer: pure logic, no UI.

One engine drives one writing session: alternating writing and break phases for a fixed
number of cycles. Ticks, commands and settings changes are expected to arrive on a single
sequence (the Qt event loop in the app), and every one of them reads and writes the same
TimerState in one step, so a transition is always decided from the phase as it was at that
tick.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from jt.common.logger import log
from jt.core.progress import PersistedProgress, ProgressStore
from jt.core.settings import WritingSettings


COMPLETION_FADE_MS = 600
RESET_FADE_MS = 250


class Phase(str, Enum):
    WRITING = "writing"
    BREAK = "break"


class Haptic(str, Enum):
    LIGHT = "light"
    MEDIUM = "medium"
    SUCCESS = "success"


class TimerEvent(Enum):
    INITIALIZED = "initialized"
    RESUMED_FROM_STORE = "resumed_from_store"
    BREAK_STARTED = "break_started"
    WRITING_STARTED = "writing_started"
    COMPLETED = "completed"
    RESET = "reset"
    SETTINGS_RESET = "settings_reset"


@dataclass
class TimerState:
    phase: Phase = Phase.WRITING
    remaining_seconds: int = 0
    current_cycle: int = 1
    total_cycles: int = 1
    running: bool = False
    skip_break_available: bool = False
    completed: bool = False
    is_initial_load: bool = True


class SideEffects(Protocol):
    def play_chime(self) -> None: ...
    def trigger_haptic(self, level: Haptic) -> None: ...
    def fade(self, to_opacity: float, duration_ms: int) -> None: ...


class NullEffects:
    def play_chime(self) -> None:
        pass

    def trigger_haptic(self, level: Haptic) -> None:
        pass

    def fade(self, to_opacity: float, duration_ms: int) -> None:
        pass


def _parse_phase(value) -> Phase:
    try:
        return Phase(value)
    except ValueError:
        return Phase.WRITING


class TimerEngine:
    """Phase/cycle state machine for one writing session.

    Nothing happens until initialize() has made the one-time resume-or-reset decision;
    ticks and commands that arrive before that are dropped. Side effects and store writes
    are fire-and-forget: a collaborator that raises is logged and the countdown carries on.
    """

    def __init__(
        self,
        session_key: str,
        settings: WritingSettings,
        store: ProgressStore,
        effects: SideEffects | None = None,
    ):
        self._session_key = session_key
        self._settings = settings
        self._store = store
        self._effects = effects if effects is not None else NullEffects()
        self._state = TimerState(
            remaining_seconds=settings.write_duration,
            total_cycles=settings.total_cycles,
        )
        # Cleared by the host while its screen is backgrounded; ticks are dropped, not queued.
        self.screen_active = True

    # ---- Read-only properties ----

    @property
    def session_key(self) -> str:
        return self._session_key

    @property
    def settings(self) -> WritingSettings:
        return self._settings

    @property
    def state(self) -> TimerState:
        """A copy of the current state, safe to hand to observers."""
        return dataclasses.replace(self._state)

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def remaining_seconds(self) -> int:
        return self._state.remaining_seconds

    @property
    def current_cycle(self) -> int:
        return self._state.current_cycle

    @property
    def total_cycles(self) -> int:
        return self._state.total_cycles

    @property
    def running(self) -> bool:
        return self._state.running

    @property
    def skip_break_available(self) -> bool:
        return self._state.skip_break_available

    @property
    def completed(self) -> bool:
        return self._state.completed

    @property
    def is_initial_load(self) -> bool:
        return self._state.is_initial_load

    # ---- Initialization ----

    def initialize(self) -> list[TimerEvent]:
        """Resume from the store or start clean. Only the first call does anything."""
        st = self._state
        if not st.is_initial_load:
            return []

        s = self._settings
        stored = self._read_stored() if s.preserve_progress else None
        events = [TimerEvent.INITIALIZED]

        if stored is not None and stored.remaining_seconds > 0:
            st.remaining_seconds = stored.remaining_seconds
            st.phase = _parse_phase(stored.phase) if stored.phase is not None else Phase.WRITING
            cycle = stored.cycles_completed or 1
            if not 1 <= cycle <= s.total_cycles:
                log.warning(f"Stored cycle {cycle} for '{self._session_key}' is outside 1..{s.total_cycles}, clamping.")
                cycle = min(max(cycle, 1), s.total_cycles)
            st.current_cycle = cycle
            st.skip_break_available = st.phase is Phase.BREAK
            events.append(TimerEvent.RESUMED_FROM_STORE)
            log.info(f"Resumed timer for '{self._session_key}': {st.phase.value}, cycle {cycle}, {st.remaining_seconds}s left")
        else:
            st.phase = Phase.WRITING
            st.remaining_seconds = s.write_duration
            st.current_cycle = 1
            st.skip_break_available = False
            # Overwrite whatever an abandoned session left behind so it can't be resumed later
            self._write(PersistedProgress(remaining_seconds=s.write_duration))
            log.info(f"Started clean timer for '{self._session_key}': {s.write_duration}s writing, {s.total_cycles} cycle(s)")

        st.total_cycles = s.total_cycles
        st.completed = False
        st.is_initial_load = False
        st.running = True
        return events

    def _read_stored(self) -> PersistedProgress | None:
        try:
            return self._store.get(self._session_key)
        except Exception:
            log.warning(f"Failed to read stored progress for '{self._session_key}', starting clean.", exc_info=True)
            return None

    # ---- Ticks ----

    def handle_tick(self, seconds_left: int) -> list[TimerEvent]:
        """Accept the countdown value for this second, transitioning if it has run out."""
        st = self._state
        if not self.screen_active:
            log.debug(f"Dropped tick ({seconds_left}s) for '{self._session_key}', screen is not active")
            return []
        if st.is_initial_load or not st.running or st.completed:
            return []

        seconds_left = int(seconds_left)
        st.remaining_seconds = max(0, seconds_left)
        self._persist()
        if seconds_left > 0:
            return []

        events = self._finish_phase()
        self._persist()
        return events

    def tick(self) -> list[TimerEvent]:
        """Deliver the next one-second step of the engine's own countdown."""
        return self.handle_tick(self._state.remaining_seconds - 1)

    def _finish_phase(self) -> list[TimerEvent]:
        st = self._state
        if st.phase is Phase.WRITING:
            st.phase = Phase.BREAK
            st.remaining_seconds = self._settings.break_duration
            st.skip_break_available = True
            log.info(f"Cycle {st.current_cycle}/{st.total_cycles} writing done, break for {st.remaining_seconds}s")
            self._haptic(Haptic.MEDIUM)
            return [TimerEvent.BREAK_STARTED]
        return self._end_break(milestone=True)

    # Shared by the natural end of a break and the skip command. Only the natural end is a milestone with
    # sound and haptics.
    def _end_break(self, milestone: bool) -> list[TimerEvent]:
        st = self._state
        next_cycle = st.current_cycle + 1
        if next_cycle > st.total_cycles:
            st.running = False
            st.completed = True
            st.remaining_seconds = 0
            log.info(f"All {st.total_cycles} cycle(s) complete for '{self._session_key}'")
            if milestone:
                self._haptic(Haptic.SUCCESS)
                self._effect("play_chime")
                self._effect("fade", 0.0, COMPLETION_FADE_MS)
            return [TimerEvent.COMPLETED]

        st.current_cycle = next_cycle
        st.phase = Phase.WRITING
        st.remaining_seconds = self._settings.write_duration
        st.skip_break_available = False
        log.info(f"Starting cycle {next_cycle}/{st.total_cycles}, writing for {st.remaining_seconds}s")
        if milestone:
            self._haptic(Haptic.LIGHT)
            self._effect("play_chime")
        return [TimerEvent.WRITING_STARTED]

    # ---- Commands ----

    def start(self) -> bool:
        st = self._state
        if st.is_initial_load or st.completed:
            return False
        st.running = True
        return True

    def pause(self) -> bool:
        if self._state.is_initial_load:
            return False
        self._state.running = False
        return True

    def toggle(self) -> bool:
        """Flip between running and paused. Returns the new running value."""
        if self._state.running:
            self.pause()
        else:
            self.start()
        return self._state.running

    def skip_break(self) -> list[TimerEvent]:
        st = self._state
        if st.is_initial_load or st.completed or st.phase is not Phase.BREAK or not st.skip_break_available:
            log.debug(f"Ignored skip_break for '{self._session_key}' in {st.phase.value} (completed={st.completed})")
            return []
        log.info(f"Break skipped in cycle {st.current_cycle}/{st.total_cycles}")
        events = self._end_break(milestone=False)
        self._persist()
        return events

    def reset(self) -> list[TimerEvent]:
        """Back to cycle 1 writing, paused. The host starts it again after a short re-arm delay."""
        if self._state.is_initial_load:
            return []
        self._restart_from_first_cycle()
        self._write(PersistedProgress(remaining_seconds=self._settings.write_duration))
        self._effect("fade", 1.0, RESET_FADE_MS)
        log.info(f"Timer reset for '{self._session_key}'")
        return [TimerEvent.RESET]

    def apply_settings(self, settings: WritingSettings) -> list[TimerEvent]:
        """Take a new settings snapshot.

        Before initialization the snapshot is just stored, since initialize() reads it. After that a new
        write duration pauses and resets the whole session; anything else is picked up live (a new break
        duration applies from the next break).
        """
        old = self._settings
        self._settings = settings
        if self._state.is_initial_load:
            log.debug("Settings changed before the timer initialized, using them for initialization")
            return []
        if settings.write_duration == old.write_duration:
            return []

        self._restart_from_first_cycle()
        self._state.total_cycles = settings.total_cycles
        self._write(PersistedProgress(remaining_seconds=settings.write_duration))
        log.info(f"Write duration changed {old.write_duration}s -> {settings.write_duration}s, timer reset")
        return [TimerEvent.SETTINGS_RESET]

    def _restart_from_first_cycle(self):
        st = self._state
        st.running = False
        st.phase = Phase.WRITING
        st.current_cycle = 1
        st.remaining_seconds = self._settings.write_duration
        st.skip_break_available = False
        st.completed = False

    def flush(self) -> None:
        """Write the current snapshot, e.g. right before the hosting screen goes away."""
        if not self._state.is_initial_load:
            self._persist()

    # ---- Collaborators ----

    def _persist(self):
        st = self._state
        if self._settings.preserve_progress:
            record = PersistedProgress(
                remaining_seconds=st.remaining_seconds,
                phase=st.phase.value,
                cycles_completed=st.current_cycle,
                active=st.running,
            )
        else:
            record = PersistedProgress(remaining_seconds=st.remaining_seconds)
        self._write(record)

    def _write(self, record: PersistedProgress):
        try:
            self._store.set(self._session_key, record)
        except Exception:
            log.warning(f"Failed to store progress for '{self._session_key}', dropping the write.", exc_info=True)

    def _haptic(self, level: Haptic):
        if self._settings.haptics_enabled:
            self._effect("trigger_haptic", level)

    def _effect(self, name, *args):
        handler = getattr(self._effects, name, None)
        if handler is None:
            return
        try:
            handler(*args)
        except Exception:
            log.warning(f"Side effect '{name}' failed, continuing without it.", exc_info=True)
