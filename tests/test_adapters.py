"""
Unit tests for the Omnivox extraction adapters (HTML -> records).

Pages are parsed straight from HTML strings; no network involved.
"""

import unittest
from datetime import datetime

from omnivox.adapters import ChamplainAdapter, MaisonneuveAdapter
from omnivox.browser import Browser, Page
from omnivox.errors import ExtractionStructureError, UnrecognizedMonthError
from omnivox.model import NO_DESCRIPTION, NOT_A_COURSE

from portal_fixtures import assignments_page, calendar_event, documents_page, home_page


def page(html: str, url: str = "https://cmaisonneuve.omnivox.ca/intr/page.aspx") -> Page:
    return Page(Browser(), url, html)


def fixed_clock() -> datetime:
    return datetime(2026, 1, 15, 9, 0)


class TestMaisonneuveDocuments(unittest.TestCase):
    def setUp(self) -> None:
        self.adapter = MaisonneuveAdapter(clock=fixed_clock)

    def test_reads_rows(self) -> None:
        html = documents_page(
            "Programmation I",
            [
                ("Plan de cours", "Distribué 03 fév 2020", "plan.pdf", False),
                ("Notes\n semaine 1", "Distribué\n14 jan 2020", "", True),
            ],
        )
        out = self.adapter.extract_documents(page(html))

        self.assertEqual(out.failures, [])
        self.assertEqual(len(out.records), 2)
        first, second = out.records
        self.assertEqual(first.course_name, "Programmation I")
        self.assertEqual(first.title, "Plan de cours")
        self.assertEqual(first.timestamp, datetime(2020, 2, 3))
        self.assertEqual(first.attachment_name, "plan.pdf")
        self.assertTrue(first.seen)

        self.assertEqual(second.title, "Notes  semaine 1")
        self.assertEqual(second.timestamp, datetime(2020, 1, 14))
        self.assertEqual(second.attachment_name, "Link")
        self.assertFalse(second.seen)

    def test_bad_date_drops_only_that_row(self) -> None:
        html = documents_page(
            "Chimie",
            [
                ("Bon", "Distribué 03 fév 2020", "a.pdf", False),
                ("Mauvais", "Distribué 03 xyz 2020", "b.pdf", False),
                ("Aussi bon", "Distribué 05 mar 2020", "c.pdf", False),
            ],
        )
        out = self.adapter.extract_documents(page(html))
        self.assertEqual([d.title for d in out.records], ["Bon", "Aussi bon"])
        self.assertEqual(len(out.failures), 1)
        self.assertIsInstance(out.failures[0], UnrecognizedMonthError)

    def test_missing_heading_is_structural_error(self) -> None:
        html = documents_page(None, [("Bon", "Distribué 03 fév 2020", "a.pdf", False)])
        with self.assertRaises(ExtractionStructureError):
            self.adapter.extract_documents(page(html))

    def test_summer_months_are_kept(self) -> None:
        html = documents_page(
            "Biologie",
            [
                ("Guide", "Distribué 15 jui 2020", "guide.pdf", False),
                ("Horaire", "Distribué 02 juin 2020", "horaire.pdf", False),
            ],
        )
        out = self.adapter.extract_documents(page(html))

        self.assertEqual(out.failures, [])
        self.assertEqual([d.timestamp for d in out.records], [datetime(2020, 7, 15), datetime(2020, 6, 2)])

    def test_empty_page_yields_no_records(self) -> None:
        out = self.adapter.extract_documents(page(documents_page("Vide", [])))
        self.assertEqual(out.records, [])


class TestMaisonneuveAssignments(unittest.TestCase):
    def test_completed_and_seen_flags(self) -> None:
        html = assignments_page(
            "Physique",
            [
                ("Labo 1", "03-fév-2020 23:59", True, False),
                ("Labo 2", "17-déc-2020", False, True),
            ],
        )
        out = MaisonneuveAdapter().extract_assignments(page(html))

        self.assertEqual(len(out.records), 2)
        labo1, labo2 = out.records
        self.assertEqual(labo1.course_name, "Physique")
        self.assertTrue(labo1.completed)
        self.assertTrue(labo1.seen)
        self.assertEqual(labo1.timestamp, datetime(2020, 2, 3))
        self.assertFalse(labo2.completed)
        self.assertFalse(labo2.seen)
        self.assertEqual(labo2.timestamp, datetime(2020, 12, 17))

    def test_summer_months_are_kept(self) -> None:
        html = assignments_page(
            "Biologie",
            [
                ("Rapport", "15-jui-2020 23:59", False, False),
                ("Projet", "15-juin-2020 23:59", False, False),
                ("Affiche", "15-juil-2020\n23:59", False, False),
                ("Quiz", "15-mai-2020 23:59", False, False),
            ],
        )
        out = MaisonneuveAdapter().extract_assignments(page(html))

        self.assertEqual(out.failures, [])
        self.assertEqual(
            [(a.title, a.timestamp) for a in out.records],
            [
                ("Rapport", datetime(2020, 7, 15)),
                ("Projet", datetime(2020, 6, 15)),
                ("Affiche", datetime(2020, 7, 15)),
                ("Quiz", datetime(2020, 5, 15)),
            ],
        )


class TestCalendar(unittest.TestCase):
    def test_year_comes_from_clock(self) -> None:
        html = home_page(
            events=[
                calendar_event("3", "février", "Examen final", course="Physique", description="Local A-201"),
                calendar_event("20", "janvier", "Journée pédagogique"),
            ]
        )
        adapter = MaisonneuveAdapter(clock=fixed_clock)
        out = adapter.extract_calendar_events(page(html))

        self.assertEqual(len(out.records), 2)
        exam, day_off = out.records
        self.assertEqual(exam.timestamp, datetime(2026, 2, 3))
        self.assertEqual(exam.course_name, "Physique")
        self.assertEqual(exam.description, "Local A-201")
        self.assertTrue(exam.seen)
        self.assertEqual(day_off.course_name, NOT_A_COURSE)
        self.assertEqual(day_off.description, NO_DESCRIPTION)

    def test_no_rows_in_wrong_view(self) -> None:
        adapter = MaisonneuveAdapter(clock=fixed_clock)
        p = page(home_page(events=[]))
        self.assertEqual(adapter.calendar_rows(p), [])
        self.assertEqual(adapter.extract_calendar_events(p).records, [])

    def test_missing_title_is_structural_error(self) -> None:
        broken = "<div><div><div>Lun</div><div>3</div><div>mars</div></div><div></div><div></div></div>"
        with self.assertRaises(ExtractionStructureError):
            MaisonneuveAdapter(clock=fixed_clock).extract_calendar_events(page(home_page(events=[broken])))

    def test_champlain_english_months(self) -> None:
        html = home_page(events=[calendar_event("12", "March", "Midterm", course="Calculus")])
        out = ChamplainAdapter(clock=fixed_clock).extract_calendar_events(page(html))
        self.assertEqual(out.records[0].timestamp, datetime(2026, 3, 12))


class TestChamplain(unittest.TestCase):
    def test_documents_and_assignments(self) -> None:
        adapter = ChamplainAdapter()
        docs = adapter.extract_documents(
            page(documents_page("Calculus I", [("Syllabus", "Released: 28 Aug 2025", "syllabus.pdf", True)]))
        )
        self.assertEqual(docs.records[0].timestamp, datetime(2025, 8, 28))
        self.assertFalse(docs.records[0].seen)

        assignments = adapter.extract_assignments(
            page(assignments_page("Calculus I", [("Problem set 1", "09-Sep-2025 17:00", True, False)]))
        )
        self.assertEqual(assignments.records[0].timestamp, datetime(2025, 9, 9))
        self.assertTrue(assignments.records[0].completed)


if __name__ == "__main__":
    unittest.main()
