"""
Unit tests for the Student aggregate.

- first add_course for a name wins
- documents/assignments are indexed in their course and globally (same objects)
- calendar events older than now - 24h are dropped on insertion
"""

import threading
import unittest
from datetime import datetime, timedelta

from omnivox.model import Assignment, CalendarEvent, Course, Document
from omnivox.student import RecordKind, Student


NOW = datetime(2026, 3, 10, 12, 0, 0)


def doc(course: str, title: str, day: int) -> Document:
    return Document(course, title, datetime(2026, 2, day), True, "f.pdf")


class TestCourses(unittest.TestCase):
    def test_add_course_is_idempotent(self) -> None:
        student = Student(clock=lambda: NOW)
        first = student.add_course("Math")
        holder = first
        second = student.add_course("Math", Course("Math"))

        self.assertIs(second, first)
        self.assertIs(student.course("Math"), holder)
        self.assertEqual(student.course_names(), ["Math"])

    def test_course_names_keep_insertion_order(self) -> None:
        student = Student()
        for name in ("Physics", "Math", "Chemistry", "Math"):
            student.add_course(name)
        self.assertEqual(student.course_names(), ["Physics", "Math", "Chemistry"])

    def test_unknown_course_raises_key_error(self) -> None:
        student = Student()
        with self.assertRaises(KeyError):
            student.assign_document("Nope", doc("Nope", "x", 1))
        with self.assertRaises(KeyError):
            student.ranked_documents("Nope")


class TestDualIndexing(unittest.TestCase):
    def setUp(self) -> None:
        self.student = Student(clock=lambda: NOW)
        self.student.add_course("Math")
        self.student.add_course("Physics")
        self.math = [doc("Math", "m2", 5), doc("Math", "m1", 2)]
        self.phys = [doc("Physics", "p1", 3)]
        for d in self.math:
            self.student.assign_document("Math", d)
        for d in self.phys:
            self.student.assign_document("Physics", d)

    def test_same_objects_in_course_and_global_lists(self) -> None:
        per_course = self.student.ranked_documents("Math")
        everything = self.student.ranked_documents()
        for d in self.math:
            self.assertTrue(any(x is d for x in per_course))
            self.assertTrue(any(x is d for x in everything))

    def test_global_view_merges_courses_sorted(self) -> None:
        titles = [d.title for d in self.student.ranked_documents()]
        self.assertEqual(titles, ["m1", "p1", "m2"])

    def test_per_course_slices(self) -> None:
        self.assertEqual([d.title for d in self.student.newest_documents(1, "Math")], ["m2"])
        self.assertEqual([d.title for d in self.student.oldest_documents(1, "Math")], ["m1"])
        self.assertEqual(len(self.student.newest_documents(10, "Physics")), 1)

    def test_assignments(self) -> None:
        a = Assignment("Physics", "Lab", datetime(2026, 2, 1), False, True)
        self.student.assign_assignment("Physics", a)
        self.assertIs(self.student.ranked_assignments("Physics")[0], a)
        self.assertIs(self.student.oldest_assignments(1)[0], a)
        self.assertEqual(self.student.ranked_assignments("Math"), [])

    def test_ranked_slice_never_raises(self) -> None:
        for n in (-5, 0, 1, 3, 1000):
            for newest in (True, False):
                out = self.student.ranked_slice(RecordKind.DOCUMENTS, n, from_newest_end=newest)
                self.assertEqual(out, sorted(out))
                self.assertEqual(len(out), max(0, min(n, 3)))

    def test_concurrent_assignments_are_all_kept(self) -> None:
        def worker(i: int) -> None:
            for j in range(50):
                self.student.assign_document("Math", doc("Math", f"t{i}-{j}", 1 + (j % 20)))

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(len(self.student.ranked_documents("Math")), 2 + 200)
        self.assertEqual(len(self.student.ranked_documents()), 3 + 200)


class TestCalendarAdmission(unittest.TestCase):
    def setUp(self) -> None:
        self.student = Student(clock=lambda: NOW)

    def test_exactly_24h_old_is_kept(self) -> None:
        e = CalendarEvent("Not A Course", "Edge", NOW - timedelta(hours=24))
        self.assertTrue(self.student.assign_calendar_event(e))
        self.assertEqual(self.student.ranked_calendar_events(), [e])

    def test_one_second_older_is_dropped(self) -> None:
        e = CalendarEvent("Not A Course", "Gone", NOW - timedelta(hours=24, seconds=1))
        self.assertFalse(self.student.assign_calendar_event(e))
        self.assertEqual(self.student.ranked_calendar_events(), [])

    def test_future_events_and_slices(self) -> None:
        events = [
            CalendarEvent("Math", "Exam", NOW + timedelta(days=3)),
            CalendarEvent("Not A Course", "Holiday", NOW + timedelta(days=1)),
            CalendarEvent("Math", "Quiz", NOW + timedelta(days=2)),
        ]
        for e in events:
            self.student.assign_calendar_event(e)

        self.assertEqual([e.title for e in self.student.oldest_calendar_events(2)], ["Holiday", "Quiz"])
        self.assertEqual([e.title for e in self.student.newest_calendar_events(1)], ["Exam"])
        math_only = self.student.ranked_slice(RecordKind.CALENDAR_EVENTS, 5, course_name="Math")
        self.assertEqual([e.title for e in math_only], ["Quiz", "Exam"])


if __name__ == "__main__":
    unittest.main()
