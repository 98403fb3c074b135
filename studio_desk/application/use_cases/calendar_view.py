from __future__ import annotations

from datetime import date, timedelta

from studio_desk.domain.entities.calendar_day import CalendarDay
from studio_desk.domain.entities.time_slot import TimeSlot
from studio_desk.domain.entities.weekday import Weekday

DEFAULT_DAYS_TO_SHOW = 7


class CalendarView:
    """Rolling window of bookable days over a fixed, already-derived slot set."""

    def __init__(self, slots: tuple[TimeSlot, ...] | list[TimeSlot], days_to_show: int = DEFAULT_DAYS_TO_SHOW) -> None:
        if days_to_show <= 0:
            raise ValueError("days_to_show must be positive")
        self._slots = tuple(slots)
        self._days_to_show = days_to_show

    @property
    def slots(self) -> tuple[TimeSlot, ...]:
        return self._slots

    @property
    def days_to_show(self) -> int:
        return self._days_to_show

    def slots_for_weekday(self, weekday: Weekday) -> list[TimeSlot]:
        return [slot for slot in self._slots if slot.is_offered_on(weekday)]

    def is_date_available(self, value: date) -> bool:
        return bool(self.slots_for_weekday(Weekday.from_date(value)))

    def window_contains(self, value: date, today: date) -> bool:
        return today <= value < today + timedelta(days=self._days_to_show)

    def find_slot(self, value: date, time24: str) -> TimeSlot | None:
        for slot in self.slots_for_weekday(Weekday.from_date(value)):
            if slot.time24 == time24:
                return slot
        return None

    def build_window(self, today: date) -> list[CalendarDay]:
        days: list[CalendarDay] = []
        for offset in range(self._days_to_show):
            current = today + timedelta(days=offset)
            weekday = Weekday.from_date(current)
            days.append(
                CalendarDay(
                    date=current,
                    weekday=weekday,
                    is_today=offset == 0,
                    available_slots=tuple(self.slots_for_weekday(weekday)),
                )
            )
        return days
