"""Timetable grid projection."""

from __future__ import annotations

import sys
import unittest
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from registrar.grid import grid_to_rows, project_to_grid
from registrar.models import ScheduleSlot

WEEK = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
HOURS = list(range(8, 18))


def slot(code: str, start: str, end: str) -> ScheduleSlot:
    return ScheduleSlot(
        course_id=f"c-{code.lower()}",
        course_code=code,
        course_name=code,
        time_start=start,
        time_end=end,
        location="Room 1",
        color="#123456",
    )


class ProjectToGridTestCase(unittest.TestCase):
    def test_cell_filled_when_slot_contains_the_hour(self) -> None:
        algorithms = slot("CS301", "10:00", "11:30")
        circuits = slot("EE201", "13:30", "14:30")
        early = slot("MATH101", "09:00", "10:00")
        grid = project_to_grid({"Monday": [algorithms, circuits, early]}, WEEK, HOURS)

        monday = grid["Monday"]
        self.assertIs(early, monday[9])
        self.assertIs(algorithms, monday[10])
        self.assertIs(algorithms, monday[11])
        self.assertIsNone(monday[12])
        self.assertIsNone(monday[13])
        self.assertIs(circuits, monday[14])
        self.assertIsNone(monday[15])
        self.assertIsNone(monday[8])

    def test_every_requested_day_and_hour_is_present(self) -> None:
        grid = project_to_grid({}, WEEK, HOURS)

        self.assertEqual(WEEK, list(grid))
        for day in WEEK:
            with self.subTest(day=day):
                self.assertEqual(HOURS, list(grid[day]))
                self.assertTrue(all(cell is None for cell in grid[day].values()))

    def test_day_names_are_normalised(self) -> None:
        lab = slot("PHYS101", "08:00", "09:00")
        grid = project_to_grid({"Tuesday": [lab]}, ["tue"], [8])
        self.assertEqual({"Tuesday": {8: lab}}, grid)

    def test_earliest_slot_wins_shared_cell(self) -> None:
        first = slot("CS101", "09:30", "10:30")
        second = slot("CS102", "10:00", "10:45")
        grid = project_to_grid({"Friday": [second, first]}, ["Friday"], [10, 11])

        self.assertIs(first, grid["Friday"][10])
        self.assertIsNone(grid["Friday"][11])

    def test_rows_for_json(self) -> None:
        grid = project_to_grid({"Monday": [slot("CS301", "10:00", "11:00")]}, ["Monday"], [10, 11])
        rows = grid_to_rows(grid, [10, 11])

        self.assertEqual(["10:00", "11:00"], [row["label"] for row in rows])
        self.assertEqual("CS301", rows[0]["cells"]["Monday"]["course_code"])
        self.assertIsNone(rows[1]["cells"]["Monday"])


if __name__ == "__main__":
    unittest.main()
