"""Record validation, time parsing and document conversion."""

from __future__ import annotations

import sys
import unittest
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from fakes import make_course, make_engine, make_student
from registrar.models import Course, HistoryEntry, MeetingSlot, Student
from registrar.timeslots import TimeInterval, normalize_day, parse_clock


class TimeslotTestCase(unittest.TestCase):
    def test_day_aliases(self) -> None:
        for raw, expected in [
            ("mon", "Monday"),
            ("MONDAY", "Monday"),
            (" thurs ", "Thursday"),
            ("Sun", "Sunday"),
        ]:
            with self.subTest(raw=raw):
                self.assertEqual(expected, normalize_day(raw))

        with self.assertRaises(ValueError):
            normalize_day("Funday")

    def test_parse_clock(self) -> None:
        self.assertEqual(630, parse_clock("10:30"))
        self.assertEqual(540, parse_clock("9"))
        for bad in ("", "10:75", "25:00", "ten:30"):
            with self.subTest(value=bad):
                with self.assertRaises(ValueError):
                    parse_clock(bad)

    def test_closed_overlap_and_half_open_membership(self) -> None:
        morning = TimeInterval.from_clock("10:00", "11:30")
        touching = TimeInterval.from_clock("11:30", "12:30")
        later = TimeInterval.from_clock("11:31", "12:30")

        self.assertTrue(morning.overlaps(touching))
        self.assertFalse(morning.overlaps(later))
        self.assertTrue(morning.contains(10 * 60))
        self.assertTrue(morning.contains(11 * 60))
        self.assertFalse(morning.contains(11 * 60 + 30))

    def test_interval_requires_start_before_end(self) -> None:
        with self.assertRaises(ValueError):
            TimeInterval.from_clock("11:00", "11:00")


class RecordValidationTestCase(unittest.TestCase):
    def test_meeting_slot_normalises_day_and_checks_times(self) -> None:
        self.assertEqual("Wednesday", MeetingSlot("wed", "09:00", "10:00").day)
        with self.assertRaises(ValueError):
            MeetingSlot("Monday", "12:00", "11:00")

    def test_course_counters_are_validated(self) -> None:
        with self.assertRaises(ValueError):
            make_course(capacity=10, enrolled=11)
        with self.assertRaises(ValueError):
            make_course(enrolled=-1)
        with self.assertRaises(ValueError):
            make_course(capacity=0)
        with self.assertRaises(ValueError):
            make_course(credits=0)

    def test_course_meetings_may_not_overlap_on_one_day(self) -> None:
        with self.assertRaises(ValueError):
            make_course(meetings=[("Monday", "09:00", "10:00"), ("Monday", "10:00", "11:00")])
        with self.assertRaises(ValueError):
            make_course(meetings=[("Tuesday", "13:00", "15:00"), ("tue", "14:00", "14:30")])

        split = make_course(meetings=[("Monday", "09:00", "10:00"), ("Monday", "10:15", "11:15")])
        self.assertEqual(2, len(split.meetings))
        result = make_engine().enroll(make_student(), split)
        self.assertTrue(result.ok)
        first, second = result.student.schedule["Monday"]
        self.assertFalse(first.interval.overlaps(second.interval))

    def test_course_prerequisites_are_deduplicated_in_order(self) -> None:
        course = make_course(prerequisites=["bus301", "BUS201", "BUS301", ""])
        self.assertEqual(["BUS301", "BUS201"], course.prerequisites)

    def test_history_action_is_restricted(self) -> None:
        enrollment = make_engine().enroll(make_student(), make_course()).enrollment
        with self.assertRaises(ValueError):
            HistoryEntry(enrollment=enrollment, action="waitlisted", date="2023-09-04")


class DocumentConversionTestCase(unittest.TestCase):
    def test_course_from_loose_document(self) -> None:
        course = Course.from_document(
            {
                "_id": "c-cs301",
                "code": "cs301",
                "name": "Algorithms",
                "credits": "4",
                "capacity": 35.0,
                "enrolled": "30",
                "prerequisites": "CS201, MATH201",
                "meetings": [
                    {"dow": "Mon", "start": "14:00", "end": "15:00"},
                    "not-a-meeting",
                ],
                "year_levels": 3,
            }
        )

        self.assertEqual("CS301", course.code)
        self.assertEqual((4, 35, 30), (course.credits, course.capacity, course.enrolled))
        self.assertEqual(["CS201", "MATH201"], course.prerequisites)
        self.assertEqual([MeetingSlot("Monday", "14:00", "15:00")], course.meetings)
        self.assertEqual([3], course.year_levels)
        self.assertEqual(5, course.seats_left)

    def test_student_document_keeps_enrollment_state(self) -> None:
        result = make_engine().enroll(make_student(completed=["CS201"]), make_course())
        document = result.student.to_document()

        self.assertEqual("ST20210001", document["_id"])
        self.assertEqual("enrolled", document["enrollment_history"][0]["action"])

        restored = Student.from_document(document)
        self.assertEqual(result.student, restored)
        self.assertEqual({"CS201"}, restored.completed_course_codes())


if __name__ == "__main__":
    unittest.main()
