"""In-memory collaborators and record builders shared by the test modules."""

from __future__ import annotations

import copy
import itertools
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Tuple

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from registrar.colors import PaletteColor
from registrar.db import PersistenceError
from registrar.engine import EnrollmentEngine
from registrar.models import (
    AcademicTerm,
    CompletedCourse,
    Course,
    MeetingSlot,
    Student,
)

FIXED_NOW = datetime(2023, 9, 4, 9, 30, tzinfo=timezone.utc)


def make_course(
    code: str = "CS301",
    meetings: Sequence[Tuple[str, str, str]] = (("Monday", "10:00", "11:30"),),
    **overrides,
) -> Course:
    fields = dict(
        course_id=f"c-{code.lower()}",
        code=code,
        name=f"{code} Course",
        instructor="Dr. Grace Hopper",
        department="Computer Science",
        credits=3,
        capacity=30,
        enrolled=0,
        prerequisites=[],
        meetings=[
            MeetingSlot(day=day, start=start, end=end, location="Science Hall 101")
            for day, start, end in meetings
        ],
        program="Computer Science",
        year_levels=[3],
        term="Fall 2023",
    )
    fields.update(overrides)
    return Course(**fields)


def make_student(completed: Iterable[str] = (), **overrides) -> Student:
    fields = dict(
        student_id="ST20210001",
        name="Emma Johnson",
        email="emma.johnson@example.com",
        program="Computer Science",
        year_level=3,
        gpa=3.8,
        total_credits_completed=78,
        academic_history=[
            AcademicTerm(
                semester="Spring 2022",
                courses=[CompletedCourse(code=code, grade="A", credits=3) for code in completed],
            )
        ],
    )
    fields.update(overrides)
    return Student(**fields)


def make_engine(colors: Sequence[str] = ("#336699",)) -> EnrollmentEngine:
    counter = itertools.count(1)
    return EnrollmentEngine(
        color_assigner=PaletteColor(colors),
        id_factory=lambda: f"enr-{next(counter)}",
        clock=lambda: FIXED_NOW,
    )


class InMemoryStore:
    """Dictionary-backed store; ``fail_on`` names methods that should raise."""

    def __init__(self, students: Iterable[Student] = (), courses: Iterable[Course] = ()):
        self.students: Dict[str, Student] = {s.student_id: copy.deepcopy(s) for s in students}
        self.courses: Dict[str, Course] = {c.course_id: copy.deepcopy(c) for c in courses}
        self.fail_on: set = set()
        self.saved_students: List[Student] = []
        self.saved_courses: List[Course] = []

    def _check(self, method: str) -> None:
        if method in self.fail_on:
            raise PersistenceError(f"{method} failed")

    def load_student(self, student_id: str) -> Student | None:
        self._check("load_student")
        student = self.students.get(student_id)
        return copy.deepcopy(student) if student else None

    def load_course(self, course_id: str) -> Course | None:
        self._check("load_course")
        course = self.courses.get(course_id)
        return copy.deepcopy(course) if course else None

    def list_courses(self, term: str | None = None) -> List[Course]:
        self._check("list_courses")
        return [
            copy.deepcopy(course)
            for course in self.courses.values()
            if term is None or course.term == term
        ]

    def save_student_schedule(self, student: Student) -> None:
        self._check("save_student_schedule")
        self.saved_students.append(student)
        self.students[student.student_id] = copy.deepcopy(student)

    def save_course_enrollment(self, course: Course) -> None:
        self._check("save_course_enrollment")
        self.saved_courses.append(course)
        self.courses[course.course_id] = copy.deepcopy(course)


class RecordingActivityLog:
    def __init__(self, fail: bool = False):
        self.entries: List[dict] = []
        self.fail = fail

    def log_activity(self, entry) -> None:
        if self.fail:
            raise RuntimeError("activity log offline")
        self.entries.append(dict(entry))
