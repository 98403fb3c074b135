from __future__ import annotations

from datetime import date
from enum import IntEnum


class Weekday(IntEnum):
    # Sunday-first numbering, matching the availability sheet and the site calendar.
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @property
    def display_name(self) -> str:
        return self.name.capitalize()

    @staticmethod
    def from_date(value: date) -> "Weekday":
        # date.weekday() is Monday=0
        return Weekday((value.weekday() + 1) % 7)

    @staticmethod
    def from_name(name: str) -> "Weekday":
        normalized = (name or "").strip().upper()
        for day in Weekday:
            if day.name == normalized or day.name[:3] == normalized:
                return day
        raise ValueError(f"Unknown weekday: {name!r}")


WEEKDAYS = frozenset({Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY, Weekday.FRIDAY})
WEEKEND = frozenset({Weekday.SATURDAY, Weekday.SUNDAY})
