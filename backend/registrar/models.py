"""Records shared by the enrollment engine, the store and the HTTP layer.

Every record is a fixed-shape dataclass. ``from_document`` accepts the raw
MongoDB documents (or JSON payloads) and ``to_document`` produces the
JSON/BSON friendly form stored back in the ``students`` and ``courses``
collections.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from itertools import combinations
from typing import Any, Dict, Iterable, List, Mapping, Set

from .timeslots import TimeInterval, normalize_day, parse_clock

ENROLLED = "enrolled"
DROPPED = "dropped"


def _clean_string(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def _as_int(value: Any, default: int = 0) -> int:
    if value in (None, ""):
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError):
        raise ValueError(f"Expected an integer, got {value!r}.") from None


def _as_float(value: Any) -> float | None:
    if value in (None, ""):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _unique_codes(values: Iterable[Any]) -> List[str]:
    seen: Set[str] = set()
    codes: List[str] = []
    for value in values:
        code = _clean_string(value).upper()
        if code and code not in seen:
            seen.add(code)
            codes.append(code)
    return codes


@dataclass(frozen=True)
class MeetingSlot:
    """One weekly meeting of a course: a day plus an ``HH:MM`` start/end."""

    day: str
    start: str
    end: str
    location: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "day", normalize_day(self.day))
        TimeInterval.from_clock(self.start, self.end)

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval.from_clock(self.start, self.end)

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "MeetingSlot":
        return cls(
            day=_clean_string(document.get("day") or document.get("dow")),
            start=_clean_string(document.get("start")),
            end=_clean_string(document.get("end")),
            location=_clean_string(document.get("location")),
        )

    def to_document(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Course:
    course_id: str
    code: str
    name: str
    instructor: str = ""
    department: str = ""
    credits: int = 3
    capacity: int = 30
    enrolled: int = 0
    prerequisites: List[str] = field(default_factory=list)
    meetings: List[MeetingSlot] = field(default_factory=list)
    program: str = ""
    year_levels: List[int] = field(default_factory=list)
    term: str = ""

    def __post_init__(self) -> None:
        self.code = _clean_string(self.code).upper()
        self.prerequisites = _unique_codes(self.prerequisites)
        if self.credits <= 0:
            raise ValueError(f"Course {self.code} credits must be positive.")
        if self.capacity <= 0:
            raise ValueError(f"Course {self.code} capacity must be positive.")
        if not 0 <= self.enrolled <= self.capacity:
            raise ValueError(
                f"Course {self.code} enrolled count {self.enrolled} is outside "
                f"0..{self.capacity}."
            )
        for first, second in combinations(self.meetings, 2):
            if first.day == second.day and first.interval.overlaps(second.interval):
                raise ValueError(
                    f"Course {self.code} meetings overlap on {first.day}: "
                    f"{first.interval} and {second.interval}."
                )

    @property
    def seats_left(self) -> int:
        return self.capacity - self.enrolled

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "Course":
        meetings = document.get("meetings", [])
        if not isinstance(meetings, list):
            meetings = []
        year_levels = document.get("year_levels", [])
        if not isinstance(year_levels, list):
            year_levels = [year_levels]
        prereqs = document.get("prerequisites", [])
        if isinstance(prereqs, str):
            prereqs = prereqs.split(",")
        elif not isinstance(prereqs, list):
            prereqs = []

        return cls(
            course_id=_clean_string(document.get("_id", document.get("course_id"))),
            code=_clean_string(document.get("code")),
            name=_clean_string(document.get("name")),
            instructor=_clean_string(document.get("instructor")),
            department=_clean_string(document.get("department")),
            credits=_as_int(document.get("credits"), 3),
            capacity=_as_int(document.get("capacity"), 30),
            enrolled=_as_int(document.get("enrolled"), 0),
            prerequisites=prereqs,
            meetings=[
                MeetingSlot.from_document(entry)
                for entry in meetings
                if isinstance(entry, Mapping)
            ],
            program=_clean_string(document.get("program")),
            year_levels=[_as_int(level) for level in year_levels],
            term=_clean_string(document.get("term")),
        )

    def to_document(self) -> Dict[str, Any]:
        document = asdict(self)
        document["_id"] = document.pop("course_id")
        return document


@dataclass
class ScheduleSlot:
    """An occupied block on a student's weekly timetable."""

    course_id: str
    course_code: str
    course_name: str
    time_start: str
    time_end: str
    location: str = ""
    color: str = ""

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval.from_clock(self.time_start, self.time_end)

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "ScheduleSlot":
        return cls(
            course_id=_clean_string(document.get("course_id")),
            course_code=_clean_string(document.get("course_code")),
            course_name=_clean_string(document.get("course_name")),
            time_start=_clean_string(document.get("time_start")),
            time_end=_clean_string(document.get("time_end")),
            location=_clean_string(document.get("location")),
            color=_clean_string(document.get("color")),
        )

    def to_document(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Enrollment:
    enrollment_id: str
    course_id: str
    course_code: str
    course_name: str
    instructor: str
    credits: int
    term: str
    enrolled_date: str
    status: str = ENROLLED

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "Enrollment":
        return cls(
            enrollment_id=_clean_string(document.get("enrollment_id")),
            course_id=_clean_string(document.get("course_id")),
            course_code=_clean_string(document.get("course_code")),
            course_name=_clean_string(document.get("course_name")),
            instructor=_clean_string(document.get("instructor")),
            credits=_as_int(document.get("credits"), 0),
            term=_clean_string(document.get("term")),
            enrolled_date=_clean_string(document.get("enrolled_date")),
            status=_clean_string(document.get("status")) or ENROLLED,
        )

    def to_document(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class HistoryEntry:
    """An enrollment snapshot tagged with what happened to it and when."""

    enrollment: Enrollment
    action: str
    date: str

    def __post_init__(self) -> None:
        if self.action not in (ENROLLED, DROPPED):
            raise ValueError(f"Unknown enrollment action: {self.action!r}.")

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "HistoryEntry":
        return cls(
            enrollment=Enrollment.from_document(document),
            action=_clean_string(document.get("action")),
            date=_clean_string(document.get("date")),
        )

    def to_document(self) -> Dict[str, Any]:
        document = self.enrollment.to_document()
        document["action"] = self.action
        document["date"] = self.date
        return document


@dataclass
class CompletedCourse:
    code: str
    grade: str = ""
    credits: int = 0
    name: str = ""

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "CompletedCourse":
        return cls(
            code=_clean_string(document.get("code")).upper(),
            grade=_clean_string(document.get("grade")).upper(),
            credits=_as_int(document.get("credits"), 0),
            name=_clean_string(document.get("name")),
        )

    def to_document(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AcademicTerm:
    semester: str
    courses: List[CompletedCourse] = field(default_factory=list)

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "AcademicTerm":
        courses = document.get("courses", [])
        if not isinstance(courses, list):
            courses = []
        return cls(
            semester=_clean_string(document.get("semester")),
            courses=[
                CompletedCourse.from_document(entry)
                for entry in courses
                if isinstance(entry, Mapping)
            ],
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "semester": self.semester,
            "courses": [course.to_document() for course in self.courses],
        }


@dataclass
class Student:
    student_id: str
    name: str
    email: str = ""
    program: str = ""
    year_level: int = 1
    gpa: float | None = None
    total_credits_completed: int = 0
    status: str = "Active"
    schedule: Dict[str, List[ScheduleSlot]] = field(default_factory=dict)
    enrollments: List[Enrollment] = field(default_factory=list)
    enrollment_history: List[HistoryEntry] = field(default_factory=list)
    academic_history: List[AcademicTerm] = field(default_factory=list)

    def find_enrollment(self, enrollment_id: str) -> Enrollment | None:
        for enrollment in self.enrollments:
            if enrollment.enrollment_id == enrollment_id:
                return enrollment
        return None

    def is_enrolled_in(self, course_id: str) -> bool:
        return any(e.course_id == course_id for e in self.enrollments)

    def completed_course_codes(self) -> Set[str]:
        return {
            course.code
            for term in self.academic_history
            for course in term.courses
            if course.code
        }

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "Student":
        raw_schedule = document.get("schedule") or {}
        schedule: Dict[str, List[ScheduleSlot]] = {}
        if isinstance(raw_schedule, Mapping):
            for day, slots in raw_schedule.items():
                if not isinstance(slots, list):
                    continue
                schedule[normalize_day(day)] = [
                    ScheduleSlot.from_document(slot)
                    for slot in slots
                    if isinstance(slot, Mapping)
                ]

        def _documents(key: str) -> List[Mapping[str, Any]]:
            values = document.get(key) or []
            if not isinstance(values, list):
                return []
            return [value for value in values if isinstance(value, Mapping)]

        return cls(
            student_id=_clean_string(document.get("_id", document.get("student_id"))),
            name=_clean_string(document.get("name")),
            email=_clean_string(document.get("email")),
            program=_clean_string(document.get("program")),
            year_level=_as_int(document.get("year_level"), 1),
            gpa=_as_float(document.get("gpa")),
            total_credits_completed=_as_int(document.get("total_credits_completed"), 0),
            status=_clean_string(document.get("status")) or "Active",
            schedule=schedule,
            enrollments=[Enrollment.from_document(d) for d in _documents("enrollments")],
            enrollment_history=[
                HistoryEntry.from_document(d) for d in _documents("enrollment_history")
            ],
            academic_history=[
                AcademicTerm.from_document(d) for d in _documents("academic_history")
            ],
        )

    def schedule_document(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            day: [slot.to_document() for slot in slots]
            for day, slots in self.schedule.items()
        }

    def to_document(self) -> Dict[str, Any]:
        return {
            "_id": self.student_id,
            "name": self.name,
            "email": self.email,
            "program": self.program,
            "year_level": self.year_level,
            "gpa": self.gpa,
            "total_credits_completed": self.total_credits_completed,
            "status": self.status,
            "schedule": self.schedule_document(),
            "enrollments": [e.to_document() for e in self.enrollments],
            "enrollment_history": [h.to_document() for h in self.enrollment_history],
            "academic_history": [t.to_document() for t in self.academic_history],
        }


def sort_slots(slots: Iterable[ScheduleSlot]) -> List[ScheduleSlot]:
    return sorted(slots, key=lambda slot: parse_clock(slot.time_start))


__all__ = [
    "ENROLLED",
    "DROPPED",
    "MeetingSlot",
    "Course",
    "ScheduleSlot",
    "Enrollment",
    "HistoryEntry",
    "CompletedCourse",
    "AcademicTerm",
    "Student",
    "sort_slots",
]
