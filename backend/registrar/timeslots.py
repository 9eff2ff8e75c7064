"""Day-of-week and clock-time helpers for weekly meeting patterns."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

WEEKDAYS: Tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

_DAY_ALIASES: Dict[str, str] = {}
for _day in WEEKDAYS:
    _DAY_ALIASES[_day.lower()] = _day
    _DAY_ALIASES[_day[:3].lower()] = _day
_DAY_ALIASES.update({"tues": "Tuesday", "thur": "Thursday", "thurs": "Thursday"})


def normalize_day(value: str) -> str:
    """Return the canonical weekday name for ``value`` (``"mon"`` -> ``"Monday"``)."""

    key = str(value).strip().lower() if value is not None else ""
    try:
        return _DAY_ALIASES[key]
    except KeyError:
        raise ValueError(f"Unknown day of week: {value!r}.") from None


def parse_clock(value: str) -> int:
    """Convert an ``HH:MM`` string into minutes after midnight."""

    text = str(value).strip() if value is not None else ""
    hours, sep, minutes = text.partition(":")
    if not sep:
        minutes = "00"
    try:
        hour_value = int(hours)
        minute_value = int(minutes)
    except ValueError:
        raise ValueError(f"Time must use HH:MM format, got {value!r}.") from None

    if not 0 <= hour_value <= 24 or not 0 <= minute_value < 60:
        raise ValueError(f"Time out of range: {value!r}.")
    total = hour_value * 60 + minute_value
    if total > 24 * 60:
        raise ValueError(f"Time out of range: {value!r}.")
    return total


def format_clock(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True, order=True)
class TimeInterval:
    """A span of the day in minutes after midnight."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise ValueError(
                f"Start time {format_clock(self.start)} must be before "
                f"end time {format_clock(self.end)}."
            )

    @classmethod
    def from_clock(cls, start: str, end: str) -> "TimeInterval":
        return cls(parse_clock(start), parse_clock(end))

    def contains(self, minute: int) -> bool:
        """Half-open membership: ``start <= minute < end``."""

        return self.start <= minute < self.end

    def overlaps(self, other: "TimeInterval") -> bool:
        """Closed-interval overlap: intervals that only touch still overlap."""

        return self.start <= other.end and self.end >= other.start

    def __str__(self) -> str:
        return f"{format_clock(self.start)}-{format_clock(self.end)}"


__all__ = [
    "WEEKDAYS",
    "normalize_day",
    "parse_clock",
    "format_clock",
    "TimeInterval",
]
