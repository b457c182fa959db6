"""
Tests for the interactive menu loop.

User input is scripted through _prompt; the sheet loader and the remote
module query are replaced by fakes.
"""

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from rich.table import Table

from notefinder.config import AppConfig
from notefinder.engine import SnapshotStore
from notefinder.sheets import FetchError, FetchResult
from notefinder.storage import load_department, load_recent, save_department
import notefinder.interactive as interactive

SHEET_ROWS = [
    {"Department": "CSE", "Semester": "2", "Subject": "CHEM", "Module": "1", "Link": "https://x/cse-chem"},
]


class TestInteractive(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.cfg = AppConfig(state_dir=Path(self._tmp.name))

    def _run(self, answers: list[str], loader=lambda cfg: SHEET_ROWS, store=None) -> SnapshotStore:
        store = store if store is not None else SnapshotStore()
        with mock.patch.object(interactive, "_prompt", side_effect=answers):
            interactive.run_interactive(self.cfg, store=store, loader=loader)
        return store

    def test_loads_sheet_once_and_exits(self) -> None:
        calls: list[AppConfig] = []

        def loader(cfg: AppConfig) -> list[dict[str, str]]:
            calls.append(cfg)
            return SHEET_ROWS

        store = self._run(["0"], loader=loader)
        self.assertEqual(len(calls), 1)
        self.assertEqual(len(store.current), 1)

    def test_reload_failure_keeps_previous_snapshot(self) -> None:
        store = self._run(["0"])

        def failing(cfg: AppConfig) -> list[dict[str, str]]:
            raise FetchError("offline")

        with self.assertLogs("notefinder.interactive", level="ERROR"):
            self._run(["5", "0"], loader=failing, store=store)
        self.assertEqual(len(store.current), 1)

    def test_change_department(self) -> None:
        self._run(["4", "ece", "0"])
        self.assertEqual(load_department(self.cfg.department_path), "ECE")

    @mock.patch("notefinder.interactive.fetch_module", return_value=FetchResult(rows=[["https://x/L"]]))
    def test_search_records_recent(self, fetch) -> None:
        save_department("CSE", self.cfg.department_path)

        # search, decline opening the link, back, exit
        self._run(["1", "s2 chem mod1", "n", "", "0"])

        self.assertEqual(fetch.call_args.args[:4], ("CSE", "2", "chem", "1"))
        recent = load_recent(self.cfg.recent_path)
        self.assertEqual([e.link for e in recent], ["https://x/L"])

    def test_header_shows_scheme(self) -> None:
        self.cfg = AppConfig(state_dir=Path(self._tmp.name), schemes=("2019",))
        with mock.patch.object(interactive, "_println") as println:
            self._run(["0"])

        printed = " ".join(str(c.args[0]) for c in println.call_args_list if c.args)
        self.assertIn("Scheme: 2019", printed)

    @mock.patch("notefinder.interactive.fetch_subjects", return_value=[])
    def test_subjects_fall_back_to_loaded_sheet(self, fetch) -> None:
        save_department("CSE", self.cfg.department_path)
        shown: list[str] = []

        def capture(*args, **kwargs) -> None:
            if args and isinstance(args[0], Table):
                shown.extend(args[0].columns[0].cells)

        with mock.patch.object(interactive.console, "print", side_effect=capture):
            self._run(["3", "2", "0"])

        self.assertEqual(fetch.call_args.args[:2], ("CSE", "2"))
        self.assertEqual(shown, ["CHEM"])

    @mock.patch("notefinder.interactive.fetch_module")
    def test_search_subject_only_does_not_fetch(self, fetch) -> None:
        save_department("CSE", self.cfg.department_path)
        self._run(["1", "chemistry", "", "0"])
        fetch.assert_not_called()
        self.assertEqual(load_recent(self.cfg.recent_path), [])


if __name__ == "__main__":
    unittest.main()
