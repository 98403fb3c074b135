from __future__ import annotations

from dataclasses import dataclass

from studio_desk.domain.entities.weekday import Weekday


@dataclass(frozen=True)
class AvailabilityRule:
    weekdays: frozenset[Weekday]
    time_spec: str  # "none", "2:00 PM" or "9:00 AM - 12:00 PM"

    @staticmethod
    def for_day(weekday: Weekday, time_spec: str | None) -> "AvailabilityRule":
        return AvailabilityRule(weekdays=frozenset({weekday}), time_spec=(time_spec or "").strip())

    @property
    def is_empty(self) -> bool:
        return not self.time_spec or self.time_spec.strip().lower() == "none"
