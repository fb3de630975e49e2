"""Per-date timer progress: what gets written on every tick and read back on the next mount.

Records are keyed by the session key (the calendar date of the journaling session), so two
dates never share a record. Writes are last-write-wins; nothing is merged.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Protocol

from jt.common.logger import log
from jt.common.setup import PATHS


_SCHEMA_VERSION = 1

PROGRESS_PATH = PATHS.current / "progress.json"


# The date string a session's progress is filed under, e.g. "2026-10-18".
def session_key(day: date | None = None) -> str:
    return (day or date.today()).isoformat()


@dataclass
class PersistedProgress:
    """Snapshot of one session's timer.

    Only ``remaining_seconds`` is guaranteed. The reduced record written while progress
    preservation is off leaves the other fields as None.
    """
    remaining_seconds: int
    phase: str | None = None
    cycles_completed: int | None = None
    active: bool | None = None

    def to_dict(self) -> dict:
        data = {"remaining_seconds": self.remaining_seconds}
        if self.phase is not None:
            data["phase"] = self.phase
        if self.cycles_completed is not None:
            data["cycles_completed"] = self.cycles_completed
        if self.active is not None:
            data["active"] = self.active
        return data

    @classmethod
    def from_dict(cls, data) -> PersistedProgress | None:
        """Parse a stored record. Returns None when there's no usable remaining_seconds."""
        if not isinstance(data, dict):
            return None
        remaining = data.get("remaining_seconds")
        if not isinstance(remaining, int) or isinstance(remaining, bool):
            return None
        phase = data.get("phase")
        cycles = data.get("cycles_completed")
        active = data.get("active")
        return cls(
            remaining_seconds=remaining,
            phase=phase if isinstance(phase, str) else None,
            cycles_completed=cycles if isinstance(cycles, int) and not isinstance(cycles, bool) else None,
            active=active if isinstance(active, bool) else None,
        )


class ProgressStore(Protocol):
    def get(self, key: str) -> PersistedProgress | None: ...
    def set(self, key: str, progress: PersistedProgress) -> None: ...


class MemoryProgressStore:
    """Dict-backed store. Nothing survives the process."""

    def __init__(self, records: dict[str, PersistedProgress] | None = None):
        self._records = dict(records or {})

    def get(self, key: str) -> PersistedProgress | None:
        return self._records.get(key)

    def set(self, key: str, progress: PersistedProgress) -> None:
        self._records[key] = progress

    def __contains__(self, key):
        return key in self._records


class JsonProgressStore:
    """Store backed by a single JSON file, loaded once and written through on every set().

    A missing or corrupt file starts the store empty. A failed write is logged and dropped;
    the in-memory copy still holds the latest record.
    """

    def __init__(self, path: Path | None = None):
        self.path = Path(path) if path is not None else PROGRESS_PATH
        self._records: dict[str, dict] = self._load()

    def _load(self) -> dict[str, dict]:
        if not self.path.exists():
            log.info(f"No existing progress file at '{self.path}', starting with no stored progress.")
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError):
            log.warning(f"Ran into an error while trying to load '{self.path}', treating it as no stored progress.", exc_info=True)
            return {}
        if not isinstance(data, dict) or not isinstance(data.get("progress"), dict):
            log.warning(f"Progress file '{self.path}' has an unexpected layout, treating it as no stored progress.")
            return {}
        log.info(f"Loaded stored progress for {len(data['progress'])} session(s) from '{self.path}'.")
        return data["progress"]

    def get(self, key: str) -> PersistedProgress | None:
        raw = self._records.get(key)
        if raw is None:
            return None
        progress = PersistedProgress.from_dict(raw)
        if progress is None:
            log.warning(f"Stored progress for '{key}' is unreadable, ignoring it: {raw!r}")
        return progress

    def set(self, key: str, progress: PersistedProgress) -> None:
        self._records[key] = progress.to_dict()
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump({"schema_version": _SCHEMA_VERSION, "progress": self._records}, f, indent=2)
        except OSError:
            log.warning(f"Failed to write progress for '{key}' to '{self.path}', dropping the write.", exc_info=True)
