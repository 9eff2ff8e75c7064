"""Per-student view of the course catalogue."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List

from .conflicts import has_conflict
from .engine import has_capacity, is_duplicate
from .models import Course, Student
from .prerequisites import missing_prerequisites


class Availability(str, Enum):
    ENROLLED = "enrolled"
    CONFLICT = "conflict"
    MISSING_PREREQUISITES = "missing_prerequisites"
    FULL = "full"
    AVAILABLE = "available"


@dataclass
class CourseAvailability:
    course: Course
    status: Availability
    missing_prerequisites: List[str] = field(default_factory=list)
    has_conflict: bool = False

    @property
    def can_enroll(self) -> bool:
        return self.status is Availability.AVAILABLE

    def to_document(self) -> Dict[str, Any]:
        return {
            "course": self.course.to_document(),
            "status": self.status.value,
            "can_enroll": self.can_enroll,
            "has_conflict": self.has_conflict,
            "missing_prerequisites": self.missing_prerequisites,
            "seats_left": self.course.seats_left,
        }


def is_eligible(student: Student, course: Course) -> bool:
    return course.program == student.program and student.year_level in course.year_levels


def available_courses(student: Student, courses: Iterable[Course]) -> List[Course]:
    """Courses offered to the student's program and year level."""

    return [course for course in courses if is_eligible(student, course)]


def course_availability(student: Student, course: Course) -> CourseAvailability:
    missing = missing_prerequisites(course, student)
    enrolled = is_duplicate(student, course)
    conflict = not enrolled and has_conflict(course.meetings, student.schedule)

    if enrolled:
        status = Availability.ENROLLED
    elif conflict:
        status = Availability.CONFLICT
    elif missing:
        status = Availability.MISSING_PREREQUISITES
    elif not has_capacity(course):
        status = Availability.FULL
    else:
        status = Availability.AVAILABLE

    return CourseAvailability(
        course=course,
        status=status,
        missing_prerequisites=missing,
        has_conflict=conflict,
    )


def catalogue_for(student: Student, courses: Iterable[Course]) -> List[CourseAvailability]:
    return [
        course_availability(student, course)
        for course in available_courses(student, courses)
    ]


__all__ = [
    "Availability",
    "CourseAvailability",
    "is_eligible",
    "available_courses",
    "course_availability",
    "catalogue_for",
]
