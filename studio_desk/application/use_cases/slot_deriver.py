from __future__ import annotations

import logging
from dataclasses import dataclass, field

from studio_desk.application.exceptions import TimeParseError
from studio_desk.application.utils.time_parser import parse_time_token, split_range
from studio_desk.domain.entities.availability import AvailabilityRule
from studio_desk.domain.entities.time_slot import TimeOfDay, TimeSlot
from studio_desk.domain.entities.weekday import Weekday

DEFAULT_INCREMENT_MINUTES = 10


@dataclass(frozen=True)
class RuleError:
    rule: AvailabilityRule
    reason: str


@dataclass(frozen=True)
class SlotDerivation:
    slots: tuple[TimeSlot, ...] = ()
    errors: tuple[RuleError, ...] = field(default_factory=tuple)


class SlotDeriver:
    """
    Turns owner availability rows into discrete bookable slots.

    A rule is either a single time ("2:00 PM"), which yields one slot, or a
    range ("9:00 AM - 12:00 PM"), which yields one slot every `increment_minutes`
    from the start up to but excluding the end. A rule that fails to parse is
    dropped and reported in SlotDerivation.errors; the others still derive.
    """

    def __init__(self, increment_minutes: int = DEFAULT_INCREMENT_MINUTES, dedupe: bool = True) -> None:
        if increment_minutes <= 0:
            raise ValueError("increment_minutes must be positive")
        self._increment = increment_minutes
        self._dedupe = dedupe
        self._logger = logging.getLogger(__name__)

    def derive_slots(self, rules: list[AvailabilityRule]) -> SlotDerivation:
        slots: list[TimeSlot] = []
        errors: list[RuleError] = []
        seen: set[tuple[frozenset[Weekday], str]] = set()

        for rule in rules:
            if rule.is_empty:
                continue
            try:
                derived = self._derive_rule(rule)
            except TimeParseError as e:
                self._logger.warning(
                    "Dropping unparseable availability rule",
                    extra={"weekday": _weekday_names(rule.weekdays), "reason": e.reason},
                )
                errors.append(RuleError(rule=rule, reason=str(e)))
                continue

            for slot in derived:
                key = (slot.weekdays, slot.time24)
                if self._dedupe and key in seen:
                    continue
                seen.add(key)
                slots.append(slot)

        return SlotDerivation(slots=tuple(slots), errors=tuple(errors))

    def expand_range(self, start: TimeOfDay, end: TimeOfDay, weekdays: frozenset[Weekday]) -> list[TimeSlot]:
        # No wraparound past midnight: an inverted or empty range yields nothing.
        if end <= start:
            return []
        return [
            TimeSlot.at(TimeOfDay.from_minutes(minute), weekdays)
            for minute in range(start.total_minutes, end.total_minutes, self._increment)
        ]

    def _derive_rule(self, rule: AvailabilityRule) -> list[TimeSlot]:
        endpoints = split_range(rule.time_spec)
        if endpoints is None:
            return [TimeSlot.at(parse_time_token(rule.time_spec), rule.weekdays)]
        start, end = endpoints
        return self.expand_range(parse_time_token(start), parse_time_token(end), rule.weekdays)


def _weekday_names(weekdays: frozenset[Weekday]) -> str:
    return ",".join(day.display_name for day in sorted(weekdays))
