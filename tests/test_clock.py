import io
import os
import unittest
from contextlib import redirect_stderr
from datetime import date, datetime, timedelta
from unittest import mock

from dateutil import tz

from smartcal.clock import FixedClock, SystemClock, resolve_timezone
from smartcal.logging_helper import Log


class TestResolveTimezone(unittest.TestCase):
    def test_names(self) -> None:
        self.assertIs(resolve_timezone("UTC"), tz.UTC)
        self.assertIs(resolve_timezone("z"), tz.UTC)
        berlin = resolve_timezone("Europe/Berlin")
        self.assertEqual(datetime(2026, 7, 1, tzinfo=berlin).utcoffset(), timedelta(hours=2))

    def test_local(self) -> None:
        for name in (None, "", "local", "System"):
            self.assertIsNotNone(resolve_timezone(name))

    def test_invalid(self) -> None:
        with self.assertRaises(ValueError):
            resolve_timezone("Mars/Olympus_Mons")


class TestClocks(unittest.TestCase):
    def test_fixed_clock_converts_zone(self) -> None:
        clock = FixedClock(datetime(2026, 3, 9, 23, 30, tzinfo=tz.UTC))
        self.assertEqual(clock.today(tz.UTC), date(2026, 3, 9))
        self.assertEqual(clock.today(tz.gettz("Europe/Berlin")), date(2026, 3, 10))

    def test_fixed_clock_naive_is_utc(self) -> None:
        clock = FixedClock(datetime(2026, 3, 9, 12, 0))
        self.assertEqual(clock.now(tz.UTC), datetime(2026, 3, 9, 12, 0, tzinfo=tz.UTC))

    def test_system_clock_is_aware(self) -> None:
        now = SystemClock().now(tz.UTC)
        self.assertIsNotNone(now.tzinfo)


class TestLog(unittest.TestCase):
    def test_prefixes(self) -> None:
        buf = io.StringIO()
        with mock.patch.dict(os.environ, {"SMARTCAL_QUIET": "0"}), redirect_stderr(buf):
            Log.info("hello")
            Log.kv({"a": 1, "b": "x"})
        self.assertEqual(buf.getvalue().splitlines(), ["[INFO] hello", "[KV] a=1 | b=x"])

    def test_quiet(self) -> None:
        buf = io.StringIO()
        with mock.patch.dict(os.environ, {"SMARTCAL_QUIET": "1"}), redirect_stderr(buf):
            Log.warn("hidden")
        self.assertEqual(buf.getvalue(), "")


if __name__ == "__main__":
    unittest.main()
