"""
Subject synonym table.

Students type subjects in many ways ("chem", "chemistry", "chy").
The sheet stores one canonical code per subject, so every free-text
subject token is mapped to that code before it is looked up.

Rules:
- canonical codes and variants are lowercase
- a canonical code does not have to appear in its own variant list
- variants must not be shared between codes (see validate_table)
"""

from __future__ import annotations

import re
from typing import Mapping, Sequence

from notefinder.model import SubjectLookup


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------

SUBJECT_MAP: dict[str, tuple[str, ...]] = {
    "chem": ("chemistry", "chem", "chy"),
    "phy": ("physics", "phy", "phys"),
    "maths": ("math", "maths", "mathematics", "mat", "calculus"),
    "graphics": ("graphics", "eg", "drawing"),
    "mech": ("mechanics", "mech", "em"),
    "beee": ("beee", "bee", "electrical"),
    "bce": ("bce", "civil"),
    "bme": ("bme", "mechanical"),
    "pps": ("pps", "programming", "python", "pop"),
    "evs": ("evs", "environment", "environmental"),
    "dsa": ("dsa", "ds", "datastructures"),
    "dbms": ("dbms", "database", "databases", "db"),
    "os": ("os", "operating"),
    "coa": ("coa", "organisation", "organization"),
    "toc": ("toc", "flat", "automata"),
    "cn": ("cn", "networks", "networking"),
    "ai": ("ai",),
    "ml": ("ml",),
    "dld": ("dld", "digital", "logic"),
    "oop": ("oop", "oops", "java"),
}


class SubjectTableError(ValueError):
    """Raised when a synonym table maps one variant to two codes."""


def validate_table(table: Mapping[str, Sequence[str]]) -> None:
    """
    Check that variant strings are disjoint across canonical codes.

    Lookups on a table that fails this check still work, but the winning
    code for a shared variant depends on table iteration order.
    """
    owner: dict[str, str] = {}
    for code, variants in table.items():
        for variant in variants:
            v = variant.strip().lower()
            prev = owner.get(v)
            if prev is not None and prev != code:
                raise SubjectTableError(f"Variant {v!r} is listed under both {prev!r} and {code!r}")
            owner[v] = code


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


def lookup_subject(token: str, table: Mapping[str, Sequence[str]] = SUBJECT_MAP) -> SubjectLookup:
    """
    Map a token to its canonical subject code.

    The first code (in table order) whose variants contain the token wins.
    Unknown tokens are passed through unchanged as a literal subject.
    """
    word = token.strip().lower()
    for code, variants in table.items():
        if word in variants:
            return SubjectLookup.canonical(code)
    return SubjectLookup.literal(token)


def canonical_subject(token: str, table: Mapping[str, Sequence[str]] = SUBJECT_MAP) -> str:
    return lookup_subject(token, table).value


_SLUG_SEP_RE = re.compile(r"[^a-z0-9]+")


def subject_slug(subject: str) -> str:
    """
    URL slug used for subject landing pages.

    "ENGINEERING CHEMISTRY" -> "engineering-chemistry"
    """
    return _SLUG_SEP_RE.sub("-", subject.strip().lower()).strip("-")
