"""Enrollment admission and drop logic.

The engine never mutates the aggregates it is given. A successful call
returns fresh ``Student`` and ``Course`` values; a rejected call returns the
originals untouched together with the reason.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, List

from bson import ObjectId

from .colors import ColorAssigner, RandomHslColor
from .conflicts import find_conflicts, schedule_draft
from .models import (
    DROPPED,
    ENROLLED,
    Course,
    Enrollment,
    HistoryEntry,
    ScheduleSlot,
    Student,
    sort_slots,
)
from .prerequisites import check_prerequisites

logger = logging.getLogger(__name__)


class RejectionReason(str, Enum):
    ALREADY_ENROLLED = "already_enrolled"
    COURSE_FULL = "course_full"
    SCHEDULE_CONFLICT = "schedule_conflict"
    MISSING_PREREQUISITES = "missing_prerequisites"
    ENROLLMENT_NOT_FOUND = "enrollment_not_found"


@dataclass
class EnrollResult:
    student: Student
    course: Course
    enrollment: Enrollment | None = None
    reason: RejectionReason | None = None
    missing_prerequisites: List[str] = field(default_factory=list)
    conflicts: List[ScheduleSlot] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.reason is None


@dataclass
class DropResult:
    student: Student
    course: Course | None = None
    enrollment: Enrollment | None = None
    reason: RejectionReason | None = None

    @property
    def ok(self) -> bool:
        return self.reason is None


def is_duplicate(student: Student, course: Course) -> bool:
    return student.is_enrolled_in(course.course_id)


def has_capacity(course: Course) -> bool:
    return course.enrolled < course.capacity


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_enrollment_id() -> str:
    return str(ObjectId())


class EnrollmentEngine:
    """Admit or reject enrollments and keep a student's timetable in sync."""

    def __init__(
        self,
        color_assigner: ColorAssigner | None = None,
        id_factory: Callable[[], str] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.color_assigner = color_assigner or RandomHslColor()
        self.id_factory = id_factory or _new_enrollment_id
        self.clock = clock or _utc_now

    def _timestamp(self) -> str:
        return self.clock().isoformat()

    def enroll(self, student: Student, course: Course) -> EnrollResult:
        if is_duplicate(student, course):
            return EnrollResult(student, course, reason=RejectionReason.ALREADY_ENROLLED)

        if not has_capacity(course):
            return EnrollResult(student, course, reason=RejectionReason.COURSE_FULL)

        draft = schedule_draft(student.schedule, course.meetings)
        conflicts = find_conflicts(course.meetings, draft)
        if conflicts:
            return EnrollResult(
                student,
                course,
                reason=RejectionReason.SCHEDULE_CONFLICT,
                conflicts=[slot for _, slot in conflicts],
            )

        prereq_check = check_prerequisites(course, student)
        if prereq_check is not True:
            return EnrollResult(
                student,
                course,
                reason=RejectionReason.MISSING_PREREQUISITES,
                missing_prerequisites=list(prereq_check),
            )

        color = self.color_assigner(course)
        for meeting in course.meetings:
            draft[meeting.day] = sort_slots(
                draft[meeting.day]
                + [
                    ScheduleSlot(
                        course_id=course.course_id,
                        course_code=course.code,
                        course_name=course.name,
                        time_start=meeting.start,
                        time_end=meeting.end,
                        location=meeting.location,
                        color=color,
                    )
                ]
            )

        now = self._timestamp()
        enrollment = Enrollment(
            enrollment_id=self.id_factory(),
            course_id=course.course_id,
            course_code=course.code,
            course_name=course.name,
            instructor=course.instructor,
            credits=course.credits,
            term=course.term,
            enrolled_date=now,
            status=ENROLLED,
        )

        updated_student = replace(
            student,
            schedule=draft,
            enrollments=student.enrollments + [enrollment],
            enrollment_history=student.enrollment_history
            + [HistoryEntry(enrollment=enrollment, action=ENROLLED, date=now)],
        )
        updated_course = replace(course, enrolled=course.enrolled + 1)

        logger.info(
            "Student %s enrolled in %s (%d/%d)",
            student.student_id,
            course.code,
            updated_course.enrolled,
            updated_course.capacity,
        )
        return EnrollResult(updated_student, updated_course, enrollment=enrollment)

    def drop(
        self,
        student: Student,
        enrollment_id: str,
        course: Course | None = None,
    ) -> DropResult:
        enrollment = student.find_enrollment(enrollment_id)
        if enrollment is None:
            return DropResult(student, course, reason=RejectionReason.ENROLLMENT_NOT_FOUND)

        if course is not None and course.course_id != enrollment.course_id:
            raise ValueError(
                f"Course {course.course_id} does not match enrollment "
                f"{enrollment_id} ({enrollment.course_id})."
            )

        schedule: Dict[str, List[ScheduleSlot]] = {}
        for day, slots in student.schedule.items():
            remaining = [slot for slot in slots if slot.course_id != enrollment.course_id]
            if remaining:
                schedule[day] = remaining

        updated_student = replace(
            student,
            schedule=schedule,
            enrollments=[
                e for e in student.enrollments if e.enrollment_id != enrollment_id
            ],
            enrollment_history=student.enrollment_history
            + [HistoryEntry(enrollment=enrollment, action=DROPPED, date=self._timestamp())],
        )

        updated_course = None
        if course is not None:
            if course.enrolled <= 0:
                logger.warning(
                    "Enrolled counter for %s already at zero while dropping %s",
                    course.code,
                    enrollment_id,
                )
            updated_course = replace(course, enrolled=max(course.enrolled - 1, 0))

        logger.info("Student %s dropped %s", student.student_id, enrollment.course_code)
        return DropResult(updated_student, updated_course, enrollment=enrollment)


__all__ = [
    "RejectionReason",
    "EnrollResult",
    "DropResult",
    "EnrollmentEngine",
    "is_duplicate",
    "has_capacity",
]
