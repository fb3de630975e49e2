"""Tests for display helpers.

Covers: jt.ui.widgets
"""

import os
import tempfile
import unittest

os.environ.setdefault("JT_DATA_DIR", tempfile.mkdtemp(prefix="jt-tests-"))

from jt.ui.widgets import format_time


class TestFormatTime(unittest.TestCase):

    def test_zero(self):
        self.assertEqual(format_time(0), "00:00")

    def test_minutes_and_seconds(self):
        self.assertEqual(format_time(90), "01:30")

    def test_negative_clamps_to_zero(self):
        self.assertEqual(format_time(-5), "00:00")

    def test_long_sessions_keep_counting_minutes(self):
        self.assertEqual(format_time(3 * 3600 + 5), "180:05")


if __name__ == "__main__":
    unittest.main()
