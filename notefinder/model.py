"""
Central data model definitions used across the project.

This module defines the structures that flow between the parser, the
query engine, the resolver and the recent-history storage so that:
- all modules share the same field names
- a search can be followed from raw text to its outcome in tests
- the CLI and the interactive mode render the same objects
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Literal, Optional, Union


@dataclass(frozen=True)
class SubjectLookup:
    """
    Result of a synonym table lookup.

    kind == "canonical": the token is a known variant and value is the code.
    kind == "literal":   nothing matched and value is the token itself.
    """

    kind: Literal["canonical", "literal"]
    value: str

    @classmethod
    def canonical(cls, code: str) -> "SubjectLookup":
        return cls("canonical", code)

    @classmethod
    def literal(cls, token: str) -> "SubjectLookup":
        return cls("literal", token)

    @property
    def is_canonical(self) -> bool:
        return self.kind == "canonical"


@dataclass(frozen=True)
class ParsedIntent:
    """
    Structured (semester, subject, module) triple extracted from free text.

    Every field is optional on its own; an intent with nothing set is valid
    and is treated by the resolver like an incomplete query.
    """

    semester: Optional[str] = None
    module: Optional[str] = None
    subject_lookup: Optional[SubjectLookup] = None

    @property
    def subject(self) -> Optional[str]:
        return self.subject_lookup.value if self.subject_lookup else None

    @property
    def is_empty(self) -> bool:
        return self.semester is None and self.module is None and self.subject_lookup is None

    @property
    def is_complete(self) -> bool:
        return self.semester is not None and self.module is not None and self.subject_lookup is not None


# ---------------------------------------------------------------------------
# Resolution outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NavigateToSubject:
    """
    Only a subject was given and the snapshot knows it: open its landing page.
    """

    department: str
    semester: str
    subject_slug: str

    @property
    def path(self) -> str:
        return f"/{self.department}/{self.semester}/{self.subject_slug}"


@dataclass(frozen=True)
class FetchModule:
    """
    A complete query matched a row in the remote sheet; link is the resource.
    """

    department: str
    semester: str
    subject: str
    module: str
    link: str


@dataclass(frozen=True)
class ValidationError:
    """
    The query is incomplete. Always recoverable by searching again.
    """

    message: str


@dataclass(frozen=True)
class NoResultError:
    """
    The query was well formed but produced no link.

    transport_failed is True when the remote fetch itself failed; the
    message shown to the user is the same either way.
    """

    message: str
    transport_failed: bool = False


Resolution = Union[NavigateToSubject, FetchModule, ValidationError, NoResultError]


@dataclass(frozen=True)
class RecentEntry:
    """
    One item of the "recently opened modules" history.

    Entries are de-duplicated by (subject, module, department); semester is
    kept for display only.
    """

    subject: str
    module: str
    department: str
    link: str
    semester: str = ""

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.subject, self.module, self.department)
