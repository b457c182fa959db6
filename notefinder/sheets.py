from __future__ import annotations

import argparse
import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from urllib.parse import quote

import requests

from notefinder.config import AppConfig

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Query language (Google Visualization "tq")
# ---------------------------------------------------------------------------

# Column letters of the "notes" sheet. Must stay in sync with the sheet.
COL_DEPARTMENT = "C"
COL_SEMESTER = "D"
COL_SUBJECT = "E"
COL_MODULE = "F"
COL_LINK = "G"

# Characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


class FetchError(Exception):
    """Network failure, HTTP error or unreadable response from the sheet."""


@dataclass
class FetchResult:
    """
    Rows returned by a remote query (header already removed).

    transport_failed tells a failed request apart from a query that simply
    matched nothing; both have no rows.
    """

    rows: List[List[str]] = field(default_factory=list)
    transport_failed: bool = False

    def __len__(self) -> int:
        return len(self.rows)

    def __bool__(self) -> bool:
        return bool(self.rows)

    @property
    def first_cell(self) -> str:
        if not self.rows or not self.rows[0]:
            return ""
        return self.rows[0][0] or ""


def build_module_query(department: str, semester: str, subject: str, module: str) -> str:
    """
    Query selecting the link of one (department, semester, subject, module).

    Department and subject are quoted and uppercased, semester and module
    are bare numbers.
    """
    return (
        f"SELECT {COL_LINK} "
        f"WHERE {COL_DEPARTMENT} = '{department.upper()}' "
        f"AND {COL_SEMESTER} = {semester} "
        f"AND {COL_SUBJECT} = '{subject.upper()}' "
        f"AND {COL_MODULE} = {module}"
    )


def build_subjects_query(department: str, semester: str) -> str:
    """
    Query listing the subjects (with row counts) of one department/semester.
    """
    return (
        f"SELECT {COL_SUBJECT}, COUNT({COL_SUBJECT}) "
        f"WHERE {COL_DEPARTMENT} = '{department.upper()}' AND {COL_SEMESTER} = {semester} "
        f"GROUP BY {COL_SUBJECT} ORDER BY {COL_SUBJECT}"
    )


def sheet_url(settings: Optional[AppConfig] = None, query: Optional[str] = None) -> str:
    """
    CSV export URL of the sheet, optionally filtered by a tq query.
    """
    cfg = settings or AppConfig()
    url = f"{cfg.base_url}?tqx=out:csv&sheet={cfg.sheet_name}"
    if query is not None:
        url += "&tq=" + quote(query, safe=_URI_COMPONENT_SAFE)
    return url


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


def _download(url: str, timeout: float, session: Optional[requests.Session] = None) -> str:
    """
    GET the url and return the body text. All failures become FetchError.
    """
    http = session or requests
    try:
        resp = http.get(url, timeout=timeout)
        resp.raise_for_status()
        return resp.text
    except requests.RequestException as exc:
        raise FetchError(f"Request failed: {exc}") from exc


def _parse_csv(text: str) -> List[List[str]]:
    """
    Split CSV text into records, skipping empty lines.

    Only truly empty lines are dropped; a record of blank cells is kept.
    """
    try:
        records = list(csv.reader(io.StringIO(text)))
    except csv.Error as exc:
        raise FetchError(f"Malformed CSV response: {exc}") from exc
    return [r for r in records if r and r != [""]]


def fetch_rows(
    query: str,
    settings: Optional[AppConfig] = None,
    session: Optional[requests.Session] = None,
) -> FetchResult:
    """
    Run a tq query against the sheet and return its rows without the header.

    Failures are logged and returned as an empty result with
    transport_failed=True instead of being raised.
    """
    cfg = settings or AppConfig()
    url = sheet_url(cfg, query)
    logger.debug("Fetching %s", url)

    try:
        records = _parse_csv(_download(url, cfg.timeout, session))
    except FetchError as exc:
        logger.warning("Fetch failed: %s", exc)
        return FetchResult(rows=[], transport_failed=True)

    # First record is the header row
    return FetchResult(rows=records[1:])


def fetch_module(
    department: str,
    semester: str,
    subject: str,
    module: str,
    settings: Optional[AppConfig] = None,
    session: Optional[requests.Session] = None,
) -> FetchResult:
    return fetch_rows(build_module_query(department, semester, subject, module), settings, session)


def fetch_subjects(
    department: str,
    semester: str,
    settings: Optional[AppConfig] = None,
    session: Optional[requests.Session] = None,
) -> List[str]:
    """
    Subject codes of one department/semester, sorted by the sheet.
    """
    result = fetch_rows(build_subjects_query(department, semester), settings, session)
    return [row[0] for row in result.rows if row and row[0]]


def load_sheet(
    settings: Optional[AppConfig] = None,
    session: Optional[requests.Session] = None,
) -> List[Dict[str, str]]:
    """
    Download the whole sheet as a list of dicts keyed by the header row.

    Unlike fetch_rows this raises FetchError: without the sheet there is no
    session to run.
    """
    cfg = settings or AppConfig()
    text = _download(sheet_url(cfg), cfg.timeout, session)
    try:
        reader = csv.DictReader(io.StringIO(text))
        rows = [
            {k: (v or "") for k, v in r.items() if k is not None}
            for r in reader
            if any((v or "").strip() for v in r.values() if isinstance(v, str))
        ]
    except csv.Error as exc:
        raise FetchError(f"Malformed CSV response: {exc}") from exc

    logger.info("Loaded %d rows from sheet %r", len(rows), cfg.sheet_name)
    return rows


# ---------------------------------------------------------------------------
# CLI entry
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="notefinder.sheets", description="Print the tq query/URL for one module")
    p.add_argument("--dept", "-d", type=str, required=True, help="Department (e.g., CSE)")
    p.add_argument("--sem", "-s", type=str, required=True, help="Semester number")
    p.add_argument("--subject", type=str, required=True, help="Subject code (e.g., chem)")
    p.add_argument("--module", "-m", type=str, required=True, help="Module number")
    p.add_argument("--fetch", action="store_true", help="Also run the query and print the rows")
    return p


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    cfg = AppConfig.from_env()
    query = build_module_query(args.dept.strip(), args.sem.strip(), args.subject.strip(), args.module.strip())
    print(query)
    print(sheet_url(cfg, query))

    if args.fetch:
        result = fetch_rows(query, cfg)
        for row in result.rows:
            print(" | ".join(row))


if __name__ == "__main__":
    main()
