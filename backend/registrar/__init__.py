"""Course enrollment scheduling for the student information dashboard."""

from .engine import DropResult, EnrollmentEngine, EnrollResult, RejectionReason
from .models import (
    AcademicTerm,
    CompletedCourse,
    Course,
    Enrollment,
    HistoryEntry,
    MeetingSlot,
    ScheduleSlot,
    Student,
)
from .service import EnrollmentService, RecordNotFound

__all__ = [
    "AcademicTerm",
    "CompletedCourse",
    "Course",
    "DropResult",
    "EnrollResult",
    "Enrollment",
    "EnrollmentEngine",
    "EnrollmentService",
    "HistoryEntry",
    "MeetingSlot",
    "RecordNotFound",
    "RejectionReason",
    "ScheduleSlot",
    "Student",
]
