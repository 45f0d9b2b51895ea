"""
Central data model definitions used across the project.

Records (Document, Assignment, CalendarEvent) are immutable once built.
Two records are equal when title and timestamp match, and they sort by
(timestamp, title). Every ranked view relies on that ordering.

Course is the only mutable piece here: it collects the records of one
course as the pipeline finds them.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Sequence, Tuple, TypeVar


LINK_LABEL = "Link"
NOT_A_COURSE = "Not A Course"
NO_DESCRIPTION = "No Description"

DATE_STRING_FORMAT = "%d/%b/%Y"

E = TypeVar("E", bound="Element")


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class Element:
    """
    Shared base of every record read from the portal.

    `timestamp` is a `datetime`, which is already an immutable value, so the
    record can hand it out without copying.
    """

    course_name: str
    title: str
    timestamp: datetime
    seen: bool

    @property
    def sort_key(self) -> Tuple[datetime, str]:
        return (self.timestamp, self.title)

    @property
    def date_string(self) -> str:
        """Pre-formatted date for display, e.g. 03/Feb/2020."""
        return self.timestamp.strftime(DATE_STRING_FORMAT)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        return self.title == other.title and self.timestamp == other.timestamp

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __hash__(self) -> int:
        return hash((self.title, self.timestamp))


@dataclass(frozen=True, eq=False)
class Document(Element):
    """A file (or link) distributed in a course."""

    attachment_name: str = LINK_LABEL


@dataclass(frozen=True, eq=False)
class Assignment(Element):
    """
    Represents one assignment of a course.

    `completed` is True when the portal shows a submission link for it.
    """

    completed: bool = False


@dataclass(frozen=True, eq=False)
class CalendarEvent(Element):
    """An entry of the home page calendar. Always counts as seen."""

    seen: bool = field(default=True, init=False)
    description: str = NO_DESCRIPTION


# ---------------------------------------------------------------------------
# Ranked slices
# ---------------------------------------------------------------------------


def ranked(records: Sequence[E]) -> List[E]:
    """Sorted copy of `records`, oldest first."""
    return sorted(list(records))


def ranked_slice(records: Sequence[E], n: int, from_newest_end: bool = True) -> List[E]:
    """
    Return `n` records of the sorted collection, always oldest -> newest.

    from_newest_end=True takes the last `n` (the newest ones), False the
    first `n`. `n` is clamped to the collection size; n <= 0 gives [].
    """
    ordered = ranked(records)
    if n <= 0:
        return []
    n = min(n, len(ordered))
    if from_newest_end:
        return ordered[len(ordered) - n:]
    return ordered[:n]


# ---------------------------------------------------------------------------
# Course
# ---------------------------------------------------------------------------


@dataclass
class Course:
    """
    Represents one course and the records found for it.

    Every record added here is expected to carry this course's name; the
    caller (Student) takes care of that.
    """

    name: str
    _documents: List[Document] = field(default_factory=list, init=False, repr=False)
    _assignments: List[Assignment] = field(default_factory=list, init=False, repr=False)

    def add_document(self, document: Document) -> None:
        if document is None:
            raise ValueError("document is None")
        self._documents.append(document)

    def add_assignment(self, assignment: Assignment) -> None:
        if assignment is None:
            raise ValueError("assignment is None")
        self._assignments.append(assignment)

    def documents(self) -> List[Document]:
        return ranked(self._documents)

    def assignments(self) -> List[Assignment]:
        return ranked(self._assignments)

    def newest_documents(self, n: int) -> List[Document]:
        return ranked_slice(self._documents, n, from_newest_end=True)

    def oldest_documents(self, n: int) -> List[Document]:
        return ranked_slice(self._documents, n, from_newest_end=False)

    def newest_assignments(self, n: int) -> List[Assignment]:
        return ranked_slice(self._assignments, n, from_newest_end=True)

    def oldest_assignments(self, n: int) -> List[Assignment]:
        return ranked_slice(self._assignments, n, from_newest_end=False)
