"""Load aggregates, run the engine, persist the outcome and record activity."""

from __future__ import annotations

import logging

from .activity import ActivityLog, NullActivityLog, build_activity
from .db import EnrollmentStore, PersistenceError
from .engine import DropResult, EnrollmentEngine, EnrollResult
from .models import Course, Student

logger = logging.getLogger(__name__)


class RecordNotFound(LookupError):
    """Raised when the requested student or course does not exist."""

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind.capitalize()} {record_id} not found.")
        self.kind = kind
        self.record_id = record_id


class EnrollmentService:
    def __init__(
        self,
        store: EnrollmentStore,
        engine: EnrollmentEngine | None = None,
        activity_log: ActivityLog | None = None,
    ):
        self.store = store
        self.engine = engine or EnrollmentEngine()
        self.activity_log = activity_log or NullActivityLog()

    def get_student(self, student_id: str) -> Student:
        student = self.store.load_student(student_id)
        if student is None:
            raise RecordNotFound("student", student_id)
        return student

    def get_course(self, course_id: str) -> Course:
        course = self.store.load_course(course_id)
        if course is None:
            raise RecordNotFound("course", course_id)
        return course

    def enroll(self, student_id: str, course_id: str, user: str | None = None) -> EnrollResult:
        student = self.get_student(student_id)
        course = self.get_course(course_id)

        result = self.engine.enroll(student, course)
        if not result.ok:
            logger.info(
                "Enrollment of %s in %s rejected: %s",
                student_id,
                course.code,
                result.reason.value,
            )
            return result

        self._persist(student, result.student, result.course)
        self._record(
            "enrolled",
            f"{student.name} enrolled in {course.code}: {course.name}",
            user,
        )
        return result

    def drop(self, student_id: str, enrollment_id: str, user: str | None = None) -> DropResult:
        student = self.get_student(student_id)
        enrollment = student.find_enrollment(enrollment_id)

        course = None
        if enrollment is not None:
            course = self.store.load_course(enrollment.course_id)
            if course is None:
                logger.warning(
                    "Course %s for enrollment %s is missing; dropping without "
                    "adjusting its counter",
                    enrollment.course_id,
                    enrollment_id,
                )

        result = self.engine.drop(student, enrollment_id, course)
        if not result.ok:
            return result

        self._persist(student, result.student, result.course)
        self._record(
            "dropped",
            f"{student.name} dropped {result.enrollment.course_code}: "
            f"{result.enrollment.course_name}",
            user,
        )
        return result

    def _persist(self, original: Student, student: Student, course: Course | None) -> None:
        self.store.save_student_schedule(student)
        if course is None:
            return
        try:
            self.store.save_course_enrollment(course)
        except PersistenceError:
            logger.exception(
                "Saving course %s failed; restoring schedule of student %s",
                course.code,
                original.student_id,
            )
            self.store.save_student_schedule(original)
            raise

    def _record(self, action: str, details: str, user: str | None) -> None:
        try:
            self.activity_log.log_activity(build_activity(action, details, user))
        except Exception:
            logger.warning("Activity log rejected %r", details, exc_info=True)


__all__ = ["RecordNotFound", "EnrollmentService"]
