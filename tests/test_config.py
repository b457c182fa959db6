import unittest
from pathlib import Path

from notefinder.config import DEFAULT_SHEET_ID, AppConfig


class TestAppConfig(unittest.TestCase):
    def test_defaults(self) -> None:
        cfg = AppConfig.from_env({})
        self.assertEqual(cfg.sheet_id, DEFAULT_SHEET_ID)
        self.assertEqual(cfg.sheet_name, "notes")
        self.assertEqual(cfg.recent_limit, 5)
        self.assertEqual(cfg.departments, ("CSE", "ECE", "IT"))
        self.assertEqual(cfg.state_dir, Path.home() / ".notefinder")

    def test_env_overrides(self) -> None:
        cfg = AppConfig.from_env(
            {
                "NOTEFINDER_SHEET_ID": "abc",
                "NOTEFINDER_TIMEOUT": "2.5",
                "NOTEFINDER_RECENT_LIMIT": "3",
                "NOTEFINDER_STATE_DIR": "/tmp/nf-state",
            }
        )
        self.assertEqual(cfg.base_url, "https://docs.google.com/spreadsheets/d/abc/gviz/tq")
        self.assertEqual(cfg.timeout, 2.5)
        self.assertEqual(cfg.recent_limit, 3)
        self.assertEqual(cfg.recent_path, Path("/tmp/nf-state/recent_modules.json"))
        self.assertEqual(cfg.department_path, Path("/tmp/nf-state/department.json"))

    def test_invalid_numbers(self) -> None:
        with self.assertRaises(ValueError):
            AppConfig.from_env({"NOTEFINDER_TIMEOUT": "fast"})
        with self.assertRaises(ValueError):
            AppConfig.from_env({"NOTEFINDER_RECENT_LIMIT": "0"})


if __name__ == "__main__":
    unittest.main()
