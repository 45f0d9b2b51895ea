"""
Student aggregate and the ranked queries on top of it.

A Student is built empty, filled by the pipeline, and only read afterwards.
Documents and assignments are indexed twice: in their Course and in the
student-wide lists. Both hold the same record objects.

Mutations go through one lock; reads sort a snapshot of the backing list.
"""

from __future__ import annotations

import enum
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Sequence

from omnivox.model import (
    Assignment,
    CalendarEvent,
    Course,
    Document,
    Element,
    ranked,
    ranked_slice,
)


# events older than this are not kept
CALENDAR_GRACE = timedelta(hours=24)


class RecordKind(enum.Enum):
    DOCUMENTS = "documents"
    ASSIGNMENTS = "assignments"
    CALENDAR_EVENTS = "calendar_events"


class Student:
    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self.clock = clock or datetime.now
        self._courses: Dict[str, Course] = {}
        self._documents: List[Document] = []
        self._assignments: List[Assignment] = []
        self._calendar: List[CalendarEvent] = []
        self._lock = threading.RLock()

    # -----------------------------------------------------------------------
    # Mutations (pipeline only)
    # -----------------------------------------------------------------------

    def add_course(self, course_name: str, course: Optional[Course] = None) -> Course:
        """
        Register a course. The first registration of a name wins; later
        calls return the existing Course untouched.
        """
        with self._lock:
            existing = self._courses.get(course_name)
            if existing is not None:
                return existing
            course = course if course is not None else Course(course_name)
            self._courses[course_name] = course
            return course

    def assign_document(self, course_name: str, document: Document) -> None:
        """Add a document to its course and to the global list. KeyError for unknown courses."""
        with self._lock:
            self._courses[course_name].add_document(document)
            self._documents.append(document)

    def assign_assignment(self, course_name: str, assignment: Assignment) -> None:
        with self._lock:
            self._courses[course_name].add_assignment(assignment)
            self._assignments.append(assignment)

    def assign_calendar_event(self, event: CalendarEvent) -> bool:
        """
        Keep the event unless it ended more than 24h ago.

        Returns whether it was kept.
        """
        if event is None:
            raise ValueError("event is None")
        with self._lock:
            if event.timestamp < self.clock() - CALENDAR_GRACE:
                return False
            self._calendar.append(event)
            return True

    # -----------------------------------------------------------------------
    # Lookups
    # -----------------------------------------------------------------------

    def course(self, course_name: str) -> Course:
        return self._courses[course_name]

    def course_names(self) -> List[str]:
        """Course names in the order they were first found."""
        with self._lock:
            return list(self._courses)

    def _collection(self, kind: RecordKind, course_name: Optional[str]) -> Sequence[Element]:
        with self._lock:
            if kind is RecordKind.CALENDAR_EVENTS:
                if course_name is None:
                    return list(self._calendar)
                return [e for e in self._calendar if e.course_name == course_name]
            if course_name is None:
                source = self._documents if kind is RecordKind.DOCUMENTS else self._assignments
                return list(source)
            course = self._courses[course_name]
            if kind is RecordKind.DOCUMENTS:
                return course.documents()
            return course.assignments()

    # -----------------------------------------------------------------------
    # Ranked queries
    # -----------------------------------------------------------------------

    def ranked_documents(self, course_name: Optional[str] = None) -> List[Document]:
        """All documents (or one course's), oldest first."""
        return ranked(self._collection(RecordKind.DOCUMENTS, course_name))

    def ranked_assignments(self, course_name: Optional[str] = None) -> List[Assignment]:
        return ranked(self._collection(RecordKind.ASSIGNMENTS, course_name))

    def ranked_calendar_events(self) -> List[CalendarEvent]:
        return ranked(self._collection(RecordKind.CALENDAR_EVENTS, None))

    def ranked_slice(
        self,
        kind: RecordKind,
        n: int,
        course_name: Optional[str] = None,
        from_newest_end: bool = True,
    ) -> List[Element]:
        """
        `n` records of one kind, returned oldest -> newest.

        from_newest_end picks the newest `n`, otherwise the oldest `n`.
        Oversized `n` gives the whole collection, n <= 0 gives [].
        """
        return ranked_slice(self._collection(kind, course_name), n, from_newest_end=from_newest_end)

    def newest_documents(self, n: int, course_name: Optional[str] = None) -> List[Document]:
        return self.ranked_slice(RecordKind.DOCUMENTS, n, course_name, True)

    def oldest_documents(self, n: int, course_name: Optional[str] = None) -> List[Document]:
        return self.ranked_slice(RecordKind.DOCUMENTS, n, course_name, False)

    def newest_assignments(self, n: int, course_name: Optional[str] = None) -> List[Assignment]:
        return self.ranked_slice(RecordKind.ASSIGNMENTS, n, course_name, True)

    def oldest_assignments(self, n: int, course_name: Optional[str] = None) -> List[Assignment]:
        return self.ranked_slice(RecordKind.ASSIGNMENTS, n, course_name, False)

    def newest_calendar_events(self, n: int) -> List[CalendarEvent]:
        return self.ranked_slice(RecordKind.CALENDAR_EVENTS, n, None, True)

    def oldest_calendar_events(self, n: int) -> List[CalendarEvent]:
        return self.ranked_slice(RecordKind.CALENDAR_EVENTS, n, None, False)
