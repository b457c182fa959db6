"""
In-memory tabular query engine.

The whole "notes" sheet is loaded once per session into a Snapshot and
every local lookup is answered from it:

    snapshot = load_snapshot(rows)
    query(snapshot, {"Department": "CSE", "Subject": "CHEM"})

Matching rules:
- exact, case-sensitive string equality per field
- all fields of the filter must match (AND)
- results keep the original row order
- an empty filter matches every row
- unknown field names never match (no error)
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional

Row = Mapping[str, str]


def _freeze_row(row: Mapping[str, Any]) -> Row:
    """
    Copy one row into a read-only mapping with string values.
    """
    out: dict[str, str] = {}
    for key, value in row.items():
        out[str(key)] = "" if value is None else str(value)
    return MappingProxyType(out)


def _matches(row: Row, items: tuple[tuple[str, str], ...]) -> bool:
    for field, target in items:
        # A missing field never equals anything, including ""
        if field not in row or row[field] != target:
            return False
    return True


class Snapshot:
    """
    Immutable, ordered collection of rows.

    Read-only queries are safe to run concurrently; a new session state is
    a new Snapshot, never an edited one.
    """

    __slots__ = ("_rows",)

    def __init__(self, rows: Iterable[Row] = ()) -> None:
        self._rows: tuple[Row, ...] = tuple(rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    def __repr__(self) -> str:
        return f"Snapshot(rows={len(self._rows)})"

    @property
    def rows(self) -> tuple[Row, ...]:
        return self._rows

    def query(self, where: Optional[Mapping[str, str]] = None) -> list[Row]:
        """
        Return every row matching all fields of where, in snapshot order.
        """
        if not where:
            return list(self._rows)
        items = tuple((str(k), str(v)) for k, v in where.items())
        return [row for row in self._rows if _matches(row, items)]


def load_snapshot(rows: Iterable[Mapping[str, Any]]) -> Snapshot:
    """
    Build a Snapshot from already tabulated rows (e.g. csv.DictReader output).
    """
    return Snapshot(_freeze_row(r) for r in rows)


def query(snapshot: Snapshot, where: Optional[Mapping[str, str]] = None) -> list[Row]:
    return snapshot.query(where)


def distinct(snapshot: Snapshot, field: str, where: Optional[Mapping[str, str]] = None) -> list[str]:
    """
    Unique values of one field among the matching rows, first-seen order.
    Rows without the field are skipped.
    """
    seen: set[str] = set()
    out: list[str] = []
    for row in snapshot.query(where):
        value = row.get(field)
        if value is None or value in seen:
            continue
        seen.add(value)
        out.append(value)
    return out


class SnapshotStore:
    """
    Holds the session's current Snapshot.

    replace() is a single reference assignment, so a query sees either the
    old or the new snapshot, never a mix of both.
    """

    def __init__(self, snapshot: Optional[Snapshot] = None) -> None:
        self._snapshot = snapshot if snapshot is not None else Snapshot()

    @property
    def current(self) -> Snapshot:
        return self._snapshot

    def replace(self, snapshot: Snapshot) -> Snapshot:
        self._snapshot = snapshot
        return snapshot

    def load(self, rows: Iterable[Mapping[str, Any]]) -> Snapshot:
        return self.replace(load_snapshot(rows))

    def query(self, where: Optional[Mapping[str, str]] = None) -> list[Row]:
        return self._snapshot.query(where)
