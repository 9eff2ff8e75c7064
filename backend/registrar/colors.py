"""Display colour strategies for timetable slots."""

from __future__ import annotations

import random
import zlib
from typing import Callable, Sequence

from .models import Course

ColorAssigner = Callable[[Course], str]


class RandomHslColor:
    """Pick a random hue at fixed saturation and lightness."""

    def __init__(self, saturation: int = 70, lightness: int = 45, rng: random.Random | None = None):
        self.saturation = saturation
        self.lightness = lightness
        self._rng = rng or random.Random()

    def __call__(self, course: Course) -> str:
        hue = round(self._rng.uniform(0, 360), 1)
        return f"hsl({hue}, {self.saturation}%, {self.lightness}%)"


class CourseCodeColor:
    """Derive a stable hue from the course code."""

    def __init__(self, saturation: int = 70, lightness: int = 45):
        self.saturation = saturation
        self.lightness = lightness

    def __call__(self, course: Course) -> str:
        hue = zlib.crc32(course.code.encode("utf-8")) % 360
        return f"hsl({hue}, {self.saturation}%, {self.lightness}%)"


class PaletteColor:
    """Cycle through a fixed palette in call order."""

    def __init__(self, palette: Sequence[str]):
        if not palette:
            raise ValueError("Palette must contain at least one colour.")
        self.palette = list(palette)
        self._index = 0

    def __call__(self, course: Course) -> str:
        color = self.palette[self._index % len(self.palette)]
        self._index += 1
        return color


__all__ = ["ColorAssigner", "RandomHslColor", "CourseCodeColor", "PaletteColor"]
