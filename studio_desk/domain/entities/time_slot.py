from __future__ import annotations

from dataclasses import dataclass

from studio_desk.domain.entities.weekday import Weekday


@dataclass(frozen=True, order=True)
class TimeOfDay:
    hours: int
    minutes: int = 0

    def __post_init__(self) -> None:
        if not (0 <= self.hours <= 23 and 0 <= self.minutes <= 59):
            raise ValueError(f"Invalid time of day: {self.hours}:{self.minutes}")

    @property
    def total_minutes(self) -> int:
        return self.hours * 60 + self.minutes

    @staticmethod
    def from_minutes(total: int) -> "TimeOfDay":
        return TimeOfDay(hours=total // 60, minutes=total % 60)

    def to_24h(self) -> str:
        return f"{self.hours:02d}:{self.minutes:02d}"

    def label(self) -> str:
        suffix = "PM" if self.hours >= 12 else "AM"
        hour = self.hours % 12 or 12
        return f"{hour}:{self.minutes:02d} {suffix}"


@dataclass(frozen=True)
class TimeSlot:
    weekdays: frozenset[Weekday]
    time24: str  # HH:MM
    label: str  # 12-hour rendering of time24

    @staticmethod
    def at(time: TimeOfDay, weekdays: frozenset[Weekday]) -> "TimeSlot":
        return TimeSlot(weekdays=frozenset(weekdays), time24=time.to_24h(), label=time.label())

    def is_offered_on(self, weekday: Weekday) -> bool:
        return weekday in self.weekdays
