"""Prerequisite gate for course enrollment."""

from __future__ import annotations

from typing import List, Union

from .models import Course, Student


def missing_prerequisites(course: Course, student: Student) -> List[str]:
    """Return the prerequisite codes absent from the student's completed terms."""

    if not course.prerequisites:
        return []
    completed = student.completed_course_codes()
    return [code for code in course.prerequisites if code not in completed]


def check_prerequisites(course: Course, student: Student) -> Union[bool, List[str]]:
    """Return ``True`` when satisfied, otherwise the list of missing codes.

    The failure value is a non-empty list, which is also truthy, so callers
    must compare with ``is True``.
    """

    missing = missing_prerequisites(course, student)
    return True if not missing else missing


__all__ = ["check_prerequisites", "missing_prerequisites"]
