"""
Parsing (free text -> ParsedIntent).

- Splits a search like "s2, chem, mod1" into tokens
- Classifies each token as semester, module or subject
- Maps the subject through the synonym table

Important rules (DO NOT CHANGE):
- precedence is semester -> module -> subject
- first semester / first module / first subject wins
- a token is never reclassified once consumed
- parsing never fails; unknown words after the subject are dropped
"""

from __future__ import annotations

import re

from typing import List, Mapping, Optional, Sequence

from notefinder.model import ParsedIntent, SubjectLookup
from notefinder.synonyms import SUBJECT_MAP, lookup_subject


# ---------------------------------------------------------------------------
# Token patterns
# ---------------------------------------------------------------------------

# s2, sem2, s-2, sem-2
SEMESTER_RE = re.compile(r"^(s|sem)-?(\d+)$", re.IGNORECASE)

# m1, mod1, module1, mod-1
MODULE_RE = re.compile(r"^m(od(ule)?)?-?(\d+)$", re.IGNORECASE)

# runs of whitespace and/or commas
_SPLIT_RE = re.compile(r"[\s,]+")

_DIGITS_RE = re.compile(r"\d+")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def tokenize(raw: Optional[str]) -> List[str]:
    """
    Lowercase the text and split it on whitespace/commas, dropping empties.
    """
    if not raw:
        return []
    return [t for t in _SPLIT_RE.split(raw.lower()) if t]


def _digits(token: str) -> str:
    # Patterns guarantee exactly one digit run at the end of the token
    match = _DIGITS_RE.search(token)
    return match.group(0) if match else ""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_intent(
    raw: Optional[str],
    table: Mapping[str, Sequence[str]] = SUBJECT_MAP,
) -> ParsedIntent:
    """
    Turn a loosely formatted search string into a ParsedIntent.
    """
    semester: Optional[str] = None
    module: Optional[str] = None
    subject: Optional[SubjectLookup] = None

    for token in tokenize(raw):
        if SEMESTER_RE.match(token):
            if semester is None:
                semester = _digits(token)
            continue

        if MODULE_RE.match(token):
            if module is None:
                module = _digits(token)
            continue

        if subject is None:
            subject = lookup_subject(token, table)

    return ParsedIntent(semester=semester, module=module, subject_lookup=subject)
