"""Tests for the on-disk pieces: progress records and writing settings.

Covers: jt.core.progress, jt.core.settings
"""

import json
import os
import shutil
import tempfile
import unittest
from datetime import date
from pathlib import Path

os.environ.setdefault("JT_DATA_DIR", tempfile.mkdtemp(prefix="jt-tests-"))


# ──────────────────────────────────────────────────────────────────────────
# progress.py tests
# ──────────────────────────────────────────────────────────────────────────

class TestPersistedProgress(unittest.TestCase):

    def test_reduced_record_only_carries_remaining(self):
        from jt.core.progress import PersistedProgress
        self.assertEqual(PersistedProgress(remaining_seconds=30).to_dict(), {"remaining_seconds": 30})

    def test_from_dict_rejects_missing_remaining(self):
        from jt.core.progress import PersistedProgress
        self.assertIsNone(PersistedProgress.from_dict({"phase": "break"}))
        self.assertIsNone(PersistedProgress.from_dict({"remaining_seconds": "12"}))
        self.assertIsNone(PersistedProgress.from_dict({"remaining_seconds": True}))
        self.assertIsNone(PersistedProgress.from_dict(["remaining_seconds", 12]))

    def test_from_dict_drops_bad_optional_fields(self):
        from jt.core.progress import PersistedProgress
        progress = PersistedProgress.from_dict({
            "remaining_seconds": 12,
            "phase": 3,
            "cycles_completed": "2",
            "active": "yes",
        })
        self.assertEqual(progress, PersistedProgress(remaining_seconds=12))

    def test_session_key_is_iso_date(self):
        from jt.core.progress import session_key
        self.assertEqual(session_key(date(2026, 10, 18)), "2026-10-18")
        self.assertEqual(session_key(), date.today().isoformat())


class TestJsonProgressStore(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.path = Path(self.tmpdir) / "progress.json"

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_missing_file_starts_empty(self):
        from jt.core.progress import JsonProgressStore
        store = JsonProgressStore(self.path)
        self.assertIsNone(store.get("2026-10-18"))

    def test_records_survive_a_new_store_instance(self):
        from jt.core.progress import JsonProgressStore, PersistedProgress
        store = JsonProgressStore(self.path)
        store.set("2026-10-18", PersistedProgress(45, "break", 2, True))
        store.set("2026-10-19", PersistedProgress(60))

        reloaded = JsonProgressStore(self.path)
        self.assertEqual(reloaded.get("2026-10-18"), PersistedProgress(45, "break", 2, True))
        self.assertEqual(reloaded.get("2026-10-19"), PersistedProgress(60))

    def test_last_write_wins(self):
        from jt.core.progress import JsonProgressStore, PersistedProgress
        store = JsonProgressStore(self.path)
        store.set("2026-10-18", PersistedProgress(45, "break", 2, True))
        store.set("2026-10-18", PersistedProgress(60))

        with open(self.path, encoding="utf-8") as f:
            data = json.load(f)
        self.assertEqual(data["schema_version"], 1)
        self.assertEqual(data["progress"]["2026-10-18"], {"remaining_seconds": 60})

    def test_corrupted_file_is_treated_as_no_progress(self):
        from jt.core.progress import JsonProgressStore
        self.path.write_text("{invalid json!!", encoding="utf-8")
        with self.assertLogs("journaltimer", level="WARNING"):
            store = JsonProgressStore(self.path)
        self.assertIsNone(store.get("2026-10-18"))

    def test_unexpected_layout_is_treated_as_no_progress(self):
        from jt.core.progress import JsonProgressStore
        self.path.write_text(json.dumps({"progress": [1, 2, 3]}), encoding="utf-8")
        with self.assertLogs("journaltimer", level="WARNING"):
            store = JsonProgressStore(self.path)
        self.assertIsNone(store.get("2026-10-18"))

    def test_unreadable_record_is_ignored(self):
        from jt.core.progress import JsonProgressStore
        self.path.write_text(json.dumps({
            "schema_version": 1,
            "progress": {"2026-10-18": {"phase": "break"}},
        }), encoding="utf-8")
        store = JsonProgressStore(self.path)
        with self.assertLogs("journaltimer", level="WARNING"):
            self.assertIsNone(store.get("2026-10-18"))

    def test_failed_write_is_dropped_but_kept_in_memory(self):
        from jt.core.progress import JsonProgressStore, PersistedProgress
        store = JsonProgressStore(Path(self.tmpdir) / "missing_dir" / "progress.json")
        with self.assertLogs("journaltimer", level="WARNING"):
            store.set("2026-10-18", PersistedProgress(10))
        self.assertEqual(store.get("2026-10-18"), PersistedProgress(10))


# ──────────────────────────────────────────────────────────────────────────
# settings.py tests
# ──────────────────────────────────────────────────────────────────────────

class TestSettingsFile(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        from jt.core import settings
        self._orig_settings_path = settings.SETTINGS_PATH
        settings.SETTINGS_PATH = Path(self.tmpdir) / "settings.json"

    def tearDown(self):
        from jt.core import settings
        settings.SETTINGS_PATH = self._orig_settings_path
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_fresh_start_returns_defaults(self):
        from jt.core.settings import WritingSettings, load_settings
        settings = load_settings()
        self.assertEqual(settings, WritingSettings())
        self.assertEqual(settings.write_duration, 60)
        self.assertEqual(settings.break_duration, 30)
        self.assertEqual(settings.total_cycles, 4)
        self.assertTrue(settings.preserve_progress)
        self.assertTrue(settings.haptics_enabled)

    def test_save_and_load_roundtrip(self):
        from jt.core import settings as settings_mod
        saved = settings_mod.WritingSettings(
            write_duration=900, break_duration=120, total_cycles=3,
            preserve_progress=False, haptics_enabled=False,
        )
        settings_mod.save_settings(saved)
        self.assertTrue(settings_mod.SETTINGS_PATH.exists())
        self.assertEqual(settings_mod.load_settings(), saved)

    def test_missing_keys_are_filled_from_defaults(self):
        from jt.core import settings as settings_mod
        with open(settings_mod.SETTINGS_PATH, "w") as f:
            json.dump({"write_duration": 300}, f)
        with self.assertLogs("journaltimer", level="WARNING"):
            loaded = settings_mod.load_settings()
        self.assertEqual(loaded.write_duration, 300)
        self.assertEqual(loaded.break_duration, 30)
        self.assertEqual(loaded.total_cycles, 4)

    def test_wrong_types_are_defaulted(self):
        from jt.core.settings import WritingSettings
        with self.assertLogs("journaltimer", level="WARNING"):
            loaded = WritingSettings.from_dict({
                "write_duration": True,
                "break_duration": "30",
                "total_cycles": 2,
                "preserve_progress": 1,
                "haptics_enabled": False,
            })
        self.assertEqual(loaded, WritingSettings(total_cycles=2, haptics_enabled=False))

    def test_non_positive_durations_are_not_rejected(self):
        from jt.core.settings import WritingSettings
        loaded = WritingSettings.from_dict({
            "write_duration": 0,
            "break_duration": -5,
            "total_cycles": 1,
            "preserve_progress": True,
            "haptics_enabled": True,
        })
        self.assertEqual(loaded.write_duration, 0)
        self.assertEqual(loaded.break_duration, -5)

    def test_corrupted_settings_fall_back_to_defaults(self):
        from jt.core import settings as settings_mod
        with open(settings_mod.SETTINGS_PATH, "w") as f:
            f.write("{invalid json!!")
        with self.assertLogs("journaltimer", level="WARNING"):
            loaded = settings_mod.load_settings()
        self.assertEqual(loaded, settings_mod.WritingSettings())


if __name__ == "__main__":
    unittest.main()
