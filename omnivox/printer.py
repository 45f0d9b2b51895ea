"""
Console output of a Student (rich tables).

The Student only returns data; everything that prints lives here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from omnivox.model import Assignment, CalendarEvent, Document
from omnivox.student import Student


@dataclass(frozen=True)
class PrinterConfig:
    """Column widths (characters) of the three tables."""

    document_widths: tuple[int, int, int, int] = (3, 110, 13, 30)
    assignment_widths: tuple[int, int, int, int] = (9, 3, 30, 13)
    calendar_widths: tuple[int, int, int, int] = (40, 50, 13, 50)


def _table(title: Optional[str], headers: Sequence[str], widths: Sequence[int]) -> Table:
    table = Table(title=Text(title) if title else None, box=box.SIMPLE, title_justify="left")
    for header, width in zip(headers, widths):
        table.add_column(header, max_width=width, overflow="ellipsis", no_wrap=True)
    return table


def _add_row(table: Table, *values: str) -> None:
    # portal text may contain [brackets]; keep it literal
    table.add_row(*(Text(v) for v in values))


def _mark(flag: bool) -> str:
    return "X" if flag else ""


class StudentPrinter:
    def __init__(
        self,
        student: Student,
        config: Optional[PrinterConfig] = None,
        console: Optional[Console] = None,
    ) -> None:
        self.student = student
        self.config = config or PrinterConfig()
        self.console = console or Console()

    # -----------------------------------------------------------------------
    # Table builders
    # -----------------------------------------------------------------------

    def document_table(self, documents: Iterable[Document], title: Optional[str] = None) -> Table:
        table = _table(title, ("New", "Title", "Released", "FileName"), self.config.document_widths)
        for doc in documents:
            _add_row(table, _mark(not doc.seen), doc.title, doc.date_string, doc.attachment_name)
        return table

    def assignment_table(self, assignments: Iterable[Assignment], title: Optional[str] = None) -> Table:
        table = _table(title, ("Completed", "New", "Title", "Submit Date"), self.config.assignment_widths)
        for a in assignments:
            _add_row(table, _mark(a.completed), _mark(not a.seen), a.title, a.date_string)
        return table

    def calendar_table(self, events: Iterable[CalendarEvent], title: Optional[str] = None) -> Table:
        table = _table(title, ("Title", "Description", "Date", "Course"), self.config.calendar_widths)
        for e in events:
            _add_row(table, e.title, e.description, e.date_string, e.course_name)
        return table

    # -----------------------------------------------------------------------
    # Printing
    # -----------------------------------------------------------------------

    def print_documents(self, newest: Optional[int] = None) -> None:
        """One table per course; `newest` limits each table to the N newest."""
        for name in self.student.course_names():
            docs: List[Document] = (
                self.student.ranked_documents(name) if newest is None else self.student.newest_documents(newest, name)
            )
            self.console.print(self.document_table(docs, title=name))

    def print_all_documents(self, newest: Optional[int] = None) -> None:
        docs = self.student.ranked_documents() if newest is None else self.student.newest_documents(newest)
        self.console.print(self.document_table(docs, title="All documents"))

    def print_assignments(self, newest: Optional[int] = None) -> None:
        for name in self.student.course_names():
            items: List[Assignment] = (
                self.student.ranked_assignments(name)
                if newest is None
                else self.student.newest_assignments(newest, name)
            )
            self.console.print(self.assignment_table(items, title=name))

    def print_all_assignments(self, newest: Optional[int] = None) -> None:
        items = self.student.ranked_assignments() if newest is None else self.student.newest_assignments(newest)
        self.console.print(self.assignment_table(items, title="All assignments"))

    def print_calendar_events(self, soonest: Optional[int] = None) -> None:
        """Upcoming events; `soonest` keeps only the N nearest ones."""
        events = (
            self.student.ranked_calendar_events()
            if soonest is None
            else self.student.oldest_calendar_events(soonest)
        )
        self.console.print(self.calendar_table(events, title="Calendar"))

    def print_whats_new(self, lines: Sequence[str]) -> None:
        if not lines:
            self.console.print("Nothing New")
            return
        for line in lines:
            self.console.print(line, markup=False)
