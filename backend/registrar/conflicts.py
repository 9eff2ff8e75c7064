"""Timetable conflict detection.

Intervals are compared as closed ranges: a course that ends at 11:30 clashes
with one that starts at 11:30. The timetable grid in :mod:`registrar.grid`
uses half-open occupancy instead.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from .models import MeetingSlot, ScheduleSlot


def find_conflicts(
    candidate_meetings: Iterable[MeetingSlot],
    student_schedule: Mapping[str, Sequence[ScheduleSlot]],
) -> List[Tuple[MeetingSlot, ScheduleSlot]]:
    """Return every (meeting, occupied slot) pair that overlaps."""

    conflicts: List[Tuple[MeetingSlot, ScheduleSlot]] = []
    for meeting in candidate_meetings:
        candidate = meeting.interval
        for slot in student_schedule.get(meeting.day, ()):
            if candidate.overlaps(slot.interval):
                conflicts.append((meeting, slot))
    return conflicts


def has_conflict(
    candidate_meetings: Iterable[MeetingSlot],
    student_schedule: Mapping[str, Sequence[ScheduleSlot]],
) -> bool:
    for meeting in candidate_meetings:
        candidate = meeting.interval
        for slot in student_schedule.get(meeting.day, ()):
            if candidate.overlaps(slot.interval):
                return True
    return False


def schedule_draft(
    student_schedule: Mapping[str, Sequence[ScheduleSlot]],
    candidate_meetings: Iterable[MeetingSlot],
) -> Dict[str, List[ScheduleSlot]]:
    """Copy ``student_schedule`` adding empty lists for the candidate's new days."""

    draft = {day: list(slots) for day, slots in student_schedule.items()}
    for meeting in candidate_meetings:
        draft.setdefault(meeting.day, [])
    return draft


__all__ = ["find_conflicts", "has_conflict", "schedule_draft"]
