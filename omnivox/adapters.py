"""
Extraction (HTML page -> records).

One adapter per institution. All supported portals run Omnivox/Léa, so the
shared OmnivoxAdapter holds the row reading logic and every institution
only states what differs: selectors, date offsets, date patterns and
month tables.

Rules:
- a row whose date cannot be parsed is dropped and reported; the other rows
  of the page are kept
- a page without a required element (e.g. the course heading) raises
  ExtractionStructureError; the pipeline skips that page
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Generic, List, Mapping, Optional, TypeVar

from omnivox.browser import Node, Page
from omnivox.dates import (
    ENGLISH_ABBREVIATED,
    ENGLISH_FULL,
    FRENCH_CA_ABBREVIATED,
    FRENCH_CA_FULL,
    normalize_and_parse,
    parse_date,
)
from omnivox.errors import DateParseError, ExtractionStructureError
from omnivox.model import (
    LINK_LABEL,
    NO_DESCRIPTION,
    NOT_A_COURSE,
    Assignment,
    CalendarEvent,
    Document,
)


logger = logging.getLogger(__name__)

R = TypeVar("R")


@dataclass
class Extraction(Generic[R]):
    """Records read from one page plus the rows that had to be dropped."""

    records: List[R] = field(default_factory=list)
    failures: List[DateParseError] = field(default_factory=list)


def clean_text(text: str) -> str:
    """Remove embedded line breaks and surrounding whitespace."""
    return text.replace("\r", "").replace("\n", " ").strip()


class ExtractionAdapter(ABC):
    """Interface every institution's extraction logic must implement."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self.clock = clock or datetime.now

    @abstractmethod
    def extract_documents(self, page: Page) -> Extraction[Document]: ...

    @abstractmethod
    def extract_assignments(self, page: Page) -> Extraction[Assignment]: ...

    @abstractmethod
    def calendar_rows(self, page: Page) -> List[Node]:
        """Calendar entries on the home page; empty when the widget is in the wrong mode."""

    @abstractmethod
    def extract_calendar_events(self, page: Page) -> Extraction[CalendarEvent]: ...


class OmnivoxAdapter(ExtractionAdapter):
    """
    Reads the Léa document list, the Léa assignment list and the home page
    calendar of an Omnivox portal.

    The calendar shows day and month only; the year comes from `clock`.
    """

    HEADING_SELECTOR = ".TitrePageLigne2"

    DOCUMENT_ROW_SELECTOR = "tr.itemDataGrid, tr.itemDataGridAltern"
    ASSIGNMENT_ROW_SELECTOR = "#tabListeTravEtu tr[height='30']"
    CELL_SELECTOR = ":scope > td"
    NEW_MARKER_SELECTOR = ":scope > td:nth-of-type(1) img"
    SUBMISSION_LINK_SELECTOR = ":scope > td table tr > td:nth-of-type(2) > a"

    CALENDAR_ROW_SELECTOR = "#tblCalendrierEvenement tr > td > div:nth-of-type(4) > div"
    EVENT_DAY_SELECTOR = ":scope > div > div:nth-of-type(2)"
    EVENT_MONTH_SELECTOR = ":scope > div > div:nth-of-type(3)"
    EVENT_TITLE_SELECTOR = ":scope > div:nth-of-type(3) > h3"
    EVENT_BODY_SELECTOR = ":scope > div:nth-of-type(3) > div"
    EVENT_COURSE_SELECTOR = ":scope > div:nth-of-type(3) > div > span"

    # "Distribué 03 fév 2020" -> the date starts after a fixed-width label
    DOCUMENT_DATE_OFFSET = 10

    MONTH_MAP: Mapping[str, str] = {}
    ABBREVIATED_MONTHS: Mapping[str, int] = {}
    FULL_MONTHS: Mapping[str, int] = {}
    DOCUMENT_DATE_PATTERN = "%d %b %Y"
    ASSIGNMENT_DATE_PATTERN = "%d-%b-%Y"
    CALENDAR_DATE_PATTERN = "%d %B %Y"

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    def course_name(self, page: Page) -> str:
        heading = page.find_one(self.HEADING_SELECTOR)
        if heading is None:
            raise ExtractionStructureError(f"No course heading ({self.HEADING_SELECTOR}) on {page.url}")
        return clean_text(heading.text())

    def _cells(self, row: Node, count: int, page: Page) -> List[Node]:
        cells = row.find_all(self.CELL_SELECTOR)
        if len(cells) < count:
            raise ExtractionStructureError(f"Row with {len(cells)} cells (expected {count}) on {page.url}")
        return cells

    def _require(self, node: Node, selector: str, page: Page) -> Node:
        found = node.find_one(selector)
        if found is None:
            raise ExtractionStructureError(f"Missing {selector!r} in calendar entry on {page.url}")
        return found

    def parse_document_date(self, raw: str) -> datetime:
        return normalize_and_parse(
            clean_text(raw)[self.DOCUMENT_DATE_OFFSET:],
            self.MONTH_MAP,
            self.DOCUMENT_DATE_PATTERN,
            self.ABBREVIATED_MONTHS,
        )

    @staticmethod
    def _assignment_date_token(raw: str) -> str:
        # "03-fév-2020 23:59" -> "03-fév-2020"; month tokens vary in width
        parts = clean_text(raw).split(maxsplit=1)
        return parts[0] if parts else ""

    def parse_assignment_date(self, raw: str) -> datetime:
        return normalize_and_parse(
            self._assignment_date_token(raw),
            self.MONTH_MAP,
            self.ASSIGNMENT_DATE_PATTERN,
            self.ABBREVIATED_MONTHS,
        )

    def parse_calendar_date(self, day: str, month: str) -> datetime:
        text = f"{clean_text(day)} {clean_text(month)} {self.clock().year}"
        return parse_date(text, self.CALENDAR_DATE_PATTERN, self.FULL_MONTHS)

    @staticmethod
    def _drop(extraction: Extraction, title: str, exc: DateParseError) -> None:
        logger.warning("Skipping %r: %s", title, exc)
        extraction.failures.append(exc)

    # -----------------------------------------------------------------------
    # Extraction
    # -----------------------------------------------------------------------

    def extract_documents(self, page: Page) -> Extraction[Document]:
        course_name = self.course_name(page)
        logger.info("Getting documents for %s...", course_name)

        out: Extraction[Document] = Extraction()
        for row in page.find_all(self.DOCUMENT_ROW_SELECTOR):
            cells = self._cells(row, 4, page)
            title = clean_text(cells[1].text())
            attachment = clean_text(cells[3].text()) or LINK_LABEL
            seen = row.find_one(self.NEW_MARKER_SELECTOR) is None
            try:
                timestamp = self.parse_document_date(cells[2].text())
            except DateParseError as exc:
                self._drop(out, title, exc)
                continue
            out.records.append(
                Document(
                    course_name=course_name,
                    title=title,
                    timestamp=timestamp,
                    seen=seen,
                    attachment_name=attachment,
                )
            )
        return out

    def extract_assignments(self, page: Page) -> Extraction[Assignment]:
        course_name = self.course_name(page)
        logger.info("Getting assignments for %s...", course_name)

        out: Extraction[Assignment] = Extraction()
        for row in page.find_all(self.ASSIGNMENT_ROW_SELECTOR):
            cells = self._cells(row, 3, page)
            title = clean_text(cells[1].text())
            completed = row.find_one(self.SUBMISSION_LINK_SELECTOR) is not None
            seen = row.find_one(self.NEW_MARKER_SELECTOR) is None
            try:
                timestamp = self.parse_assignment_date(cells[2].text())
            except DateParseError as exc:
                self._drop(out, title, exc)
                continue
            out.records.append(
                Assignment(
                    course_name=course_name,
                    title=title,
                    timestamp=timestamp,
                    seen=seen,
                    completed=completed,
                )
            )
        return out

    def calendar_rows(self, page: Page) -> List[Node]:
        return page.find_all(self.CALENDAR_ROW_SELECTOR)

    def extract_calendar_events(self, page: Page) -> Extraction[CalendarEvent]:
        out: Extraction[CalendarEvent] = Extraction()
        for row in self.calendar_rows(page):
            day = self._require(row, self.EVENT_DAY_SELECTOR, page).text()
            month = self._require(row, self.EVENT_MONTH_SELECTOR, page).text()
            title = clean_text(self._require(row, self.EVENT_TITLE_SELECTOR, page).text())

            course = row.find_one(self.EVENT_COURSE_SELECTOR)
            course_name = clean_text(course.text()) if course is not None else NOT_A_COURSE

            body = row.find_one(self.EVENT_BODY_SELECTOR)
            description = clean_text(body.own_text()) if body is not None else ""

            try:
                timestamp = self.parse_calendar_date(day, month)
            except DateParseError as exc:
                self._drop(out, title, exc)
                continue
            out.records.append(
                CalendarEvent(
                    course_name=course_name or NOT_A_COURSE,
                    title=title,
                    timestamp=timestamp,
                    description=description or NO_DESCRIPTION,
                )
            )
        return out


class MaisonneuveAdapter(OmnivoxAdapter):
    """Collège de Maisonneuve: French (Canada) dates."""

    MONTH_MAP = {
        "jan": "janv.",
        "fév": "févr.",
        "mar": "mars",
        "avr": "avr.",
        "mai": "mai",
        # the portal truncates both summer months to "jui"
        "jui": "juil.",
        "juin": "juin",
        "juil": "juil.",
        "aoû": "août",
        "sep": "sept.",
        "oct": "oct.",
        "nov": "nov.",
        "déc": "déc.",
    }
    ABBREVIATED_MONTHS = FRENCH_CA_ABBREVIATED
    FULL_MONTHS = FRENCH_CA_FULL


class ChamplainAdapter(OmnivoxAdapter):
    """Champlain College Saint-Lambert: English portal, "Released: 03 Feb 2020"."""

    MONTH_MAP = {
        "jan": "Jan",
        "feb": "Feb",
        "mar": "Mar",
        "apr": "Apr",
        "may": "May",
        "jun": "Jun",
        "jul": "Jul",
        "aug": "Aug",
        "sep": "Sep",
        "oct": "Oct",
        "nov": "Nov",
        "dec": "Dec",
    }
    ABBREVIATED_MONTHS = ENGLISH_ABBREVIATED
    FULL_MONTHS = ENGLISH_FULL
