"""Tests for the JSON configuration wrapper."""

from contextlib import redirect_stdout
import io
import json
import tempfile
from pathlib import Path
import sys
import unittest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config_manager import ConfigManager


class ConfigManagerTests(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = Path(self.tmpdir.name) / "config.json"
        self.path.write_text(json.dumps({
            "experiment_settings": {"runs": 2, "output_dir": "out"},
            "search_settings": {"modes": ["strict"], "workers": 1, "count_only": True},
            "problems": [{"name": "KKR_3x3", "pieces": ["K", "K", "R"], "width": 3, "height": 3}],
            "reference_counts": {"KKR_3x3": 4},
        }))

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            ConfigManager(Path(self.tmpdir.name) / "absent.json")

    def test_getters(self):
        mgr = ConfigManager(self.path)
        self.assertEqual(mgr.get_experiment_settings()["runs"], 2)
        self.assertEqual(mgr.get_search_settings()["modes"], ["strict"])
        self.assertEqual(mgr.get_problems()[0]["name"], "KKR_3x3")
        self.assertEqual(mgr.get_reference_counts("KKR_3x3"), 4)
        self.assertIsNone(mgr.get_reference_counts("QQ_2x2"))
        self.assertTrue(mgr.has_reference_count("KKR_3x3"))

    def test_save_reference_counts_skips_inconsistent_problems(self):
        mgr = ConfigManager(self.path)
        with redirect_stdout(io.StringIO()):
            mgr.save_reference_counts({"QQ_2x2": 0, "BAD_3x3": None})
        reloaded = ConfigManager(self.path)
        self.assertEqual(reloaded.get_reference_counts(), {"KKR_3x3": 4, "QQ_2x2": 0})

    def test_update_setting_persists(self):
        mgr = ConfigManager(self.path)
        mgr.update_setting("search_settings", "workers", 4)
        mgr.update_setting("new_section", "flag", True)
        reloaded = ConfigManager(self.path)
        self.assertEqual(reloaded.get_search_settings()["workers"], 4)
        self.assertTrue(reloaded.config["new_section"]["flag"])


if __name__ == "__main__":
    unittest.main()
