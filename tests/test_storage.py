"""
Unit tests for local storage of recent modules and the department.

Storage contract:
- Missing/invalid file -> empty state
- Recent history: newest first, unique (subject, module, department), bounded
- JSON schema: {"recent_modules": [ ... ]} and {"department": "..."}
"""

import json
import tempfile
import unittest
from pathlib import Path

from notefinder.model import RecentEntry
from notefinder.storage import (
    load_department,
    load_recent,
    push_recent,
    record_recent,
    save_department,
    save_recent,
)


def _entry(subject: str, module: str = "mod1", dept: str = "CSE", link: str = "") -> RecentEntry:
    return RecentEntry(subject=subject, module=module, department=dept, link=link or f"https://x/{subject}/{module}")


class TestPushRecent(unittest.TestCase):
    def test_newest_first(self) -> None:
        entries = push_recent([_entry("chem")], _entry("phy"))
        self.assertEqual([e.subject for e in entries], ["phy", "chem"])

    def test_duplicate_key_moves_to_front(self) -> None:
        old = [_entry("phy"), _entry("chem", link="https://old"), _entry("maths")]
        entries = push_recent(old, _entry("chem", link="https://new"))

        self.assertEqual([e.subject for e in entries], ["chem", "phy", "maths"])
        self.assertEqual(entries[0].link, "https://new")

    def test_same_subject_other_department_is_distinct(self) -> None:
        entries = push_recent([_entry("chem", dept="IT")], _entry("chem", dept="CSE"))
        self.assertEqual(len(entries), 2)

    def test_bound_never_exceeded(self) -> None:
        entries: list[RecentEntry] = []
        for i in range(12):
            entries = push_recent(entries, _entry("chem", module=f"mod{i % 7}"), limit=3)
            self.assertLessEqual(len(entries), 3)
            self.assertEqual(len({e.key for e in entries}), len(entries))
        self.assertEqual([e.module for e in entries], ["mod4", "mod3", "mod2"])

    def test_invalid_limit(self) -> None:
        with self.assertRaises(ValueError):
            push_recent([], _entry("chem"), limit=0)


class TestRecentFile(unittest.TestCase):
    def test_load_missing_file_returns_empty(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            self.assertEqual(load_recent(Path(d) / "missing.json"), [])

    def test_load_corrupt_file_returns_empty(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "recent.json"
            p.write_text("{not json", encoding="utf-8")
            self.assertEqual(load_recent(p), [])

    def test_save_and_load_roundtrip(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "nested" / "recent.json"
            save_recent([_entry("chem"), _entry("phy")], p)

            loaded = load_recent(p)
            self.assertEqual([e.subject for e in loaded], ["chem", "phy"])

            data = json.loads(p.read_text(encoding="utf-8"))
            self.assertIn("recent_modules", data)
            self.assertEqual(data["recent_modules"][0]["module"], "mod1")

    def test_load_skips_bad_items_and_enforces_bound(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "recent.json"
            good = {"subject": "chem", "module": "mod1", "department": "CSE", "link": "https://x"}
            items = [good, dict(good), {"subject": "phy"}, "junk"]
            items += [dict(good, module=f"mod{i}") for i in range(2, 9)]
            p.write_text(json.dumps({"recent_modules": items}), encoding="utf-8")

            loaded = load_recent(p, limit=4)
            self.assertEqual([e.module for e in loaded], ["mod1", "mod2", "mod3", "mod4"])

    def test_load_rejects_invalid_limit(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "recent.json"
            save_recent([_entry("chem")], p)
            with self.assertRaises(ValueError):
                load_recent(p, limit=0)

    def test_record_recent(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "recent.json"
            record_recent(_entry("chem"), p, limit=2)
            record_recent(_entry("phy"), p, limit=2)
            record_recent(_entry("chem"), p, limit=2)
            entries = record_recent(_entry("maths"), p, limit=2)

            self.assertEqual([e.subject for e in entries], ["maths", "chem"])
            self.assertEqual(load_recent(p, limit=2), entries)


class TestDepartmentFile(unittest.TestCase):
    def test_missing_is_empty(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            self.assertEqual(load_department(Path(d) / "department.json"), "")

    def test_roundtrip_is_uppercase(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "department.json"
            save_department(" ece ", p)
            self.assertEqual(load_department(p), "ECE")


if __name__ == "__main__":
    unittest.main()
