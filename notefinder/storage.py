"""
Persistent storage for per-user state.

This module manages two small JSON files inside the state directory
(see AppConfig.state_dir, default ~/.notefinder):

    recent_modules.json   {"recent_modules": [ {subject, module, ...}, ... ]}
    department.json       {"department": "CSE"}

Design rationale:
- the sheet snapshot is reloaded every session and never stored
- only the user's own history and last department survive between runs

Loading is defensive: a missing or corrupted file means "no state yet".
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from notefinder.config import AppConfig
from notefinder.model import RecentEntry

DEFAULT_RECENT_LIMIT = 5


def _default_recent_path() -> Path:
    return AppConfig().recent_path


def _default_department_path() -> Path:
    return AppConfig().department_path


def _read_json(path: Path) -> Any:
    """
    Return parsed JSON, or None if the file is missing or unreadable.
    """
    if not path.exists():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError):
        return None


def _write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


# ---------------------------------------------------------------------------
# Recent modules
# ---------------------------------------------------------------------------


def push_recent(
    entries: Iterable[RecentEntry],
    entry: RecentEntry,
    limit: int = DEFAULT_RECENT_LIMIT,
) -> list[RecentEntry]:
    """
    Put entry first, drop older entries with the same key, cut to limit.
    """
    if limit < 1:
        raise ValueError("limit must be at least 1")

    out = [entry]
    seen = {entry.key}
    for e in entries:
        if e.key in seen:
            continue
        seen.add(e.key)
        out.append(e)
        if len(out) >= limit:
            break
    return out[:limit]


def _entry_from_dict(item: Any) -> RecentEntry | None:
    if not isinstance(item, dict):
        return None
    fields = {}
    for name in ("subject", "module", "department", "link"):
        value = item.get(name)
        if not isinstance(value, str) or not value.strip():
            return None
        fields[name] = value.strip()
    semester = item.get("semester", "")
    fields["semester"] = semester.strip() if isinstance(semester, str) else ""
    return RecentEntry(**fields)


def load_recent(path: str | Path | None = None, limit: int = DEFAULT_RECENT_LIMIT) -> list[RecentEntry]:
    """
    Load recent modules, most recent first.

    Invalid items are skipped; duplicates and overflow from hand-edited
    files are removed so the returned list always honours the bound.
    """
    if limit < 1:
        raise ValueError("limit must be at least 1")

    recent_path = Path(path) if path is not None else _default_recent_path()
    data = _read_json(recent_path)
    if not isinstance(data, dict):
        return []

    items = data.get("recent_modules", [])
    if not isinstance(items, list):
        return []

    out: list[RecentEntry] = []
    seen: set[tuple[str, str, str]] = set()
    for item in items:
        entry = _entry_from_dict(item)
        if entry is None or entry.key in seen:
            continue
        seen.add(entry.key)
        out.append(entry)
        if len(out) >= limit:
            break
    return out


def save_recent(entries: Iterable[RecentEntry], path: str | Path | None = None) -> None:
    recent_path = Path(path) if path is not None else _default_recent_path()
    payload = {
        "recent_modules": [
            {
                "subject": e.subject,
                "module": e.module,
                "department": e.department,
                "semester": e.semester,
                "link": e.link,
            }
            for e in entries
        ]
    }
    _write_json(recent_path, payload)


def record_recent(
    entry: RecentEntry,
    path: str | Path | None = None,
    limit: int = DEFAULT_RECENT_LIMIT,
) -> list[RecentEntry]:
    """
    Add one opened module to the stored history and return the new list.
    """
    entries = push_recent(load_recent(path, limit=limit), entry, limit=limit)
    save_recent(entries, path)
    return entries


# ---------------------------------------------------------------------------
# Department
# ---------------------------------------------------------------------------


def load_department(path: str | Path | None = None) -> str:
    """
    Last selected department (uppercase), or "" if none was saved.
    """
    dept_path = Path(path) if path is not None else _default_department_path()
    data = _read_json(dept_path)
    if not isinstance(data, dict):
        return ""
    dept = data.get("department", "")
    return dept.strip().upper() if isinstance(dept, str) else ""


def save_department(department: str, path: str | Path | None = None) -> None:
    dept_path = Path(path) if path is not None else _default_department_path()
    _write_json(dept_path, {"department": department.strip().upper()})
