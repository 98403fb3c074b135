from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from studio_desk.domain.entities.time_slot import TimeSlot
from studio_desk.domain.entities.weekday import Weekday


@dataclass(frozen=True)
class CalendarDay:
    date: date
    weekday: Weekday
    is_today: bool
    available_slots: tuple[TimeSlot, ...] = ()

    @property
    def is_available(self) -> bool:
        return len(self.available_slots) > 0
