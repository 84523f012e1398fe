"""Tests for helpers: hex checks, atomic writes, timezone offsets."""

import re
import tempfile
import unittest
from datetime import timedelta, timezone
from pathlib import Path

from gitcore.util import (
    format_tz_offset,
    is_hex,
    parse_tz_offset,
    timestamp_with_tz,
    write_bytes_atomic,
)


class TestHelpers(unittest.TestCase):
    def test_is_hex(self) -> None:
        self.assertTrue(is_hex("deadBEEF01"))
        self.assertFalse(is_hex(""))
        self.assertFalse(is_hex("xyz"))

    def test_write_bytes_atomic_creates_parents(self) -> None:
        root = Path(tempfile.mkdtemp(prefix="gitcore_util_"))
        target = root / "a" / "b" / "file"
        write_bytes_atomic(target, b"data")
        self.assertEqual(target.read_bytes(), b"data")
        self.assertEqual([p.name for p in target.parent.iterdir()], ["file"])

    def test_format_tz_offset(self) -> None:
        self.assertEqual(format_tz_offset(timedelta(0)), "+0000")
        self.assertEqual(format_tz_offset(timedelta(hours=5, minutes=30)), "+0530")
        self.assertEqual(format_tz_offset(timedelta(hours=-8)), "-0800")
        self.assertEqual(format_tz_offset(timedelta(hours=-3, minutes=-30)), "-0330")

    def test_parse_tz_offset(self) -> None:
        self.assertEqual(parse_tz_offset("+0530"), timezone(timedelta(hours=5, minutes=30)))
        self.assertEqual(parse_tz_offset("-0800"), timezone(timedelta(hours=-8)))
        self.assertEqual(parse_tz_offset("garbage"), timezone.utc)

    def test_timestamp_with_tz(self) -> None:
        ts, tz = timestamp_with_tz(1700000000)
        self.assertEqual(ts, 1700000000)
        self.assertRegex(tz, re.compile(r"[+-]\d{4}"))


if __name__ == "__main__":
    unittest.main()
