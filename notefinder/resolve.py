"""
Search resolution.

Decides what one search does, given the parsed intent, the session's
snapshot and the currently selected department:

1. subject only        -> look it up locally (department first, then any
                          department) and navigate to its landing page
2. anything incomplete -> ValidationError with the expected format
3. complete query      -> ask the remote sheet for the module link

The department is passed in explicitly; nothing here reads session state.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from notefinder.engine import Row, Snapshot
from notefinder.model import (
    FetchModule,
    NavigateToSubject,
    NoResultError,
    ParsedIntent,
    RecentEntry,
    Resolution,
    ValidationError,
)
from notefinder.sheets import FetchResult, fetch_module
from notefinder.synonyms import subject_slug

logger = logging.getLogger(__name__)

INVALID_QUERY_MESSAGE = (
    "Please provide a valid search query in the format: semester, subject, module (e.g., 's2, chem, mod1')"
)

# (department, semester, subject, module) -> FetchResult
Fetcher = Callable[[str, str, str, str], FetchResult]


def _subject_tiers(snapshot: Snapshot, department: str, subject: str) -> list[Row]:
    """
    Rows for a subject in the current department, else in any department.
    """
    subject_key = subject.upper()
    rows = snapshot.query({"Department": department.upper(), "Subject": subject_key})
    if rows:
        logger.debug("Subject %r found in department %r (%d rows)", subject_key, department.upper(), len(rows))
        return rows

    rows = snapshot.query({"Subject": subject_key})
    if rows:
        logger.debug("Subject %r found outside %r (%d rows)", subject_key, department.upper(), len(rows))
    return rows


def no_result_message(department: str, semester: str, subject: str, module: str) -> str:
    return f"No data found for {department} - Semester {semester}, Subject: {subject}, Module: {module}"


def resolve(
    intent: ParsedIntent,
    snapshot: Snapshot,
    department: str,
    fetcher: Optional[Fetcher] = None,
) -> Resolution:
    """
    Resolve one search. Never raises for missing tokens or empty results.

    fetcher defaults to notefinder.sheets.fetch_module and is only called
    for complete queries.
    """
    department = (department or "").strip()
    subject = intent.subject

    if subject is not None and intent.semester is None and intent.module is None:
        rows = _subject_tiers(snapshot, department, subject)
        if rows:
            first = rows[0]
            return NavigateToSubject(
                department=first.get("Department", ""),
                semester=first.get("Semester", ""),
                subject_slug=subject_slug(first.get("Subject", "")),
            )
        # Nothing local: fall through and ask for the full format
        logger.debug("Subject %r not in snapshot", subject)

    if intent.semester is None or subject is None or intent.module is None:
        return ValidationError(INVALID_QUERY_MESSAGE)

    fetch = fetcher or fetch_module
    result = fetch(department, intent.semester, subject, intent.module)

    link = result.first_cell
    if not link.strip():
        logger.debug("No link for %s/%s/%s/%s", department, intent.semester, subject, intent.module)
        return NoResultError(
            no_result_message(department, intent.semester, subject, intent.module),
            transport_failed=result.transport_failed,
        )

    return FetchModule(
        department=department,
        semester=intent.semester,
        subject=subject,
        module=intent.module,
        link=link,
    )


def recent_entry_for(outcome: FetchModule) -> RecentEntry:
    """
    History record for an opened module, e.g. subject "chem", module "mod1".
    """
    return RecentEntry(
        subject=outcome.subject,
        module=f"mod{outcome.module}",
        department=outcome.department,
        link=outcome.link,
        semester=outcome.semester,
    )
