"""
Pipeline: session -> pages -> adapter -> records -> Student.

One Pipeline drives one login and one sequential crawl. Only a failed login
aborts; every other failure becomes a warning in the RunReport and the
crawl goes on with the next page.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from omnivox.adapters import Extraction, ExtractionAdapter
from omnivox.browser import Page
from omnivox.errors import AuthenticationError, ExtractionStructureError, NavigationError, PortalError
from omnivox.sessions import NavigationSession, PageResult
from omnivox.student import Student


logger = logging.getLogger(__name__)


@dataclass
class RunReport:
    """Non-fatal problems met during a run, plus simple counters."""

    warnings: List[str] = field(default_factory=list)
    errors: List[PortalError] = field(default_factory=list)
    documents: int = 0
    assignments: int = 0
    calendar_events: int = 0

    def warn(self, message: str, error: Optional[PortalError] = None) -> None:
        logger.warning(message)
        self.warnings.append(message)
        if error is not None:
            self.errors.append(error)


class Pipeline:
    def __init__(
        self,
        session: NavigationSession,
        adapter: ExtractionAdapter,
        student: Student,
        report: Optional[RunReport] = None,
    ) -> None:
        self.session = session
        self.adapter = adapter
        self.student = student
        self.report = report or RunReport()

    def login(self, username: str, password: str) -> None:
        """
        Log in and open the course list.

        Both steps are required for the rest of the run, so a course list
        that cannot be reached is reported as an AuthenticationError too.
        """
        self.session.login(username, password)
        try:
            self.session.load_course_list()
        except NavigationError as exc:
            raise AuthenticationError(str(exc), institution=self.session.institution, stage="course-list") from exc

    def _pull(
        self,
        results: List[PageResult],
        extract: Callable[[Page], Extraction],
        assign: Callable[[str, object], None],
        kind: str,
    ) -> int:
        added = 0
        for result in results:
            label = f"{kind} page of course #{result.course_index + 1}"
            if not result.ok:
                self.report.warn(f"Skipped {label}: {result.error}", result.error)
                continue

            try:
                extraction = extract(result.page)
            except ExtractionStructureError as exc:
                self.report.warn(f"Skipped {label}: {exc}", exc)
                continue

            for failure in extraction.failures:
                self.report.warn(f"Dropped a row of the {label}: {failure}", failure)

            if not extraction.records:
                continue

            course_name = extraction.records[0].course_name
            self.student.add_course(course_name)
            for record in extraction.records:
                assign(course_name, record)
                added += 1
        return added

    def pull_documents(self) -> int:
        added = self._pull(
            self.session.get_document_pages(),
            self.adapter.extract_documents,
            self.student.assign_document,
            "document",
        )
        self.report.documents += added
        return added

    def pull_assignments(self) -> int:
        added = self._pull(
            self.session.get_assignment_pages(),
            self.adapter.extract_assignments,
            self.student.assign_assignment,
            "assignment",
        )
        self.report.assignments += added
        return added

    def pull_calendar_events(self) -> int:
        """
        Read the home page calendar.

        When the widget shows no entry at all it is probably in the wrong
        view; the session is asked to switch it once and the refreshed page
        is read instead.
        """
        home = self.session.home_page
        if home is None:
            raise RuntimeError("pull_calendar_events() called before login()")

        if not self.adapter.calendar_rows(home):
            try:
                home = self.session.request_calendar_view_change(home)
            except NavigationError as exc:
                self.report.warn(f"Could not switch the calendar view: {exc}", exc)
                return 0

        try:
            extraction = self.adapter.extract_calendar_events(home)
        except ExtractionStructureError as exc:
            self.report.warn(f"Skipped the calendar: {exc}", exc)
            return 0

        for failure in extraction.failures:
            self.report.warn(f"Dropped a calendar event: {failure}", failure)

        kept = 0
        for event in extraction.records:
            if self.student.assign_calendar_event(event):
                kept += 1
        self.report.calendar_events += kept
        return kept

    def run(self, username: str, password: str) -> RunReport:
        """Login, then documents, assignments and calendar events."""
        self.login(username, password)
        self.pull_documents()
        self.pull_assignments()
        self.pull_calendar_events()
        return self.report
