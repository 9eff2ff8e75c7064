"""Project a student's timetable onto an hour-by-day grid."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Sequence

from .models import ScheduleSlot, sort_slots
from .timeslots import normalize_day

Grid = Dict[str, Dict[int, ScheduleSlot | None]]


def project_to_grid(
    schedule: Mapping[str, Sequence[ScheduleSlot]],
    days: Iterable[str],
    hours: Iterable[int],
) -> Grid:
    """Return ``grid[day][hour]`` holding the slot occupying that hour, if any.

    A slot fills the cell for hour ``h`` when its half-open
    ``[time_start, time_end)`` contains ``h:00``, so 13:30-14:30 fills only the
    14 cell. The earliest-starting slot wins a shared cell.
    """

    hour_list = list(hours)
    grid: Grid = {}
    for day in days:
        canonical = normalize_day(day)
        slots = sort_slots(schedule.get(canonical, ()))
        row: Dict[int, ScheduleSlot | None] = {}
        for hour in hour_list:
            minute = hour * 60
            row[hour] = next(
                (slot for slot in slots if slot.interval.contains(minute)),
                None,
            )
        grid[canonical] = row
    return grid


def grid_to_rows(grid: Grid, hours: Iterable[int]) -> List[Dict[str, Any]]:
    """Flatten a grid into hour rows for JSON responses."""

    rows: List[Dict[str, Any]] = []
    for hour in hours:
        cells: Dict[str, Any] = {}
        for day, row in grid.items():
            slot = row.get(hour)
            cells[day] = slot.to_document() if slot is not None else None
        rows.append({"hour": hour, "label": f"{hour}:00", "cells": cells})
    return rows


__all__ = ["Grid", "project_to_grid", "grid_to_rows"]
