import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from smartcal import settings_manager
from smartcal.event_models import UnsupportedViewError


class TestSettingsManager(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.home = Path(self._tmp.name) / "home"
        patcher = mock.patch.dict(os.environ, {"SMARTCAL_HOME": str(self.home)})
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self._tmp.cleanup)

    def test_defaults_without_file(self) -> None:
        self.assertEqual(settings_manager.load_settings(), settings_manager.DEFAULT_SETTINGS)
        self.assertEqual(settings_manager.get_display_cap("month"), 3)
        self.assertEqual(settings_manager.get_display_cap("week"), 6)
        self.assertIsNone(settings_manager.get_display_cap("day"))
        self.assertEqual(settings_manager.get_timezone_name(), "local")

    def test_set_display_cap_persists(self) -> None:
        settings_manager.set_display_cap("month", 5)
        self.assertEqual(settings_manager.get_display_cap("month"), 5)
        data = json.loads((self.home / "settings.json").read_text(encoding="utf-8"))
        self.assertEqual(data["month_display_cap"], 5)
        self.assertEqual(data["week_display_cap"], 6)

    def test_invalid_cap_rejected(self) -> None:
        for bad in (-1, "3", True, 2.5):
            with self.assertRaises(ValueError):
                settings_manager.set_display_cap("week", bad)

    def test_unsupported_view(self) -> None:
        with self.assertRaises(UnsupportedViewError):
            settings_manager.get_display_cap("year")

    def test_corrupt_file_falls_back_to_defaults(self) -> None:
        self.home.mkdir(parents=True)
        (self.home / "settings.json").write_text("{not json", encoding="utf-8")
        self.assertEqual(settings_manager.load_settings(), settings_manager.DEFAULT_SETTINGS)

    def test_invalid_stored_values_fall_back(self) -> None:
        self.home.mkdir(parents=True)
        (self.home / "settings.json").write_text(
            json.dumps({"month_display_cap": "many", "timezone": "", "unknown": 1}),
            encoding="utf-8",
        )
        self.assertEqual(settings_manager.get_display_cap("month"), 3)
        self.assertEqual(settings_manager.get_timezone_name(), "local")
        self.assertNotIn("unknown", settings_manager.load_settings())

    def test_timezone_setting(self) -> None:
        settings_manager.set_timezone_name("Europe/Berlin")
        self.assertEqual(settings_manager.get_timezone_name(), "Europe/Berlin")
        with self.assertRaises(ValueError):
            settings_manager.set_timezone_name("Mars/Olympus_Mons")
        self.assertEqual(settings_manager.get_timezone_name(), "Europe/Berlin")


if __name__ == "__main__":
    unittest.main()
