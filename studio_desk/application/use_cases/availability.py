from __future__ import annotations

import logging

from studio_desk.application.exceptions import UpstreamUnavailable
from studio_desk.application.ports.availability_source import AvailabilitySourcePort
from studio_desk.application.use_cases.calendar_view import DEFAULT_DAYS_TO_SHOW, CalendarView
from studio_desk.application.use_cases.slot_deriver import SlotDerivation, SlotDeriver
from studio_desk.domain.entities.availability import AvailabilityRule
from studio_desk.domain.entities.weekday import WEEKDAYS, WEEKEND

# Used when the availability sheet cannot be read.
SAMPLE_RULES: tuple[AvailabilityRule, ...] = (
    AvailabilityRule(weekdays=WEEKDAYS, time_spec="4:00 PM"),
    AvailabilityRule(weekdays=WEEKDAYS, time_spec="5:00 PM"),
    AvailabilityRule(weekdays=WEEKDAYS, time_spec="6:00 PM"),
    AvailabilityRule(weekdays=WEEKEND, time_spec="10:00 AM"),
    AvailabilityRule(weekdays=WEEKEND, time_spec="11:00 AM"),
    AvailabilityRule(weekdays=WEEKEND, time_spec="12:00 PM"),
    AvailabilityRule(weekdays=WEEKEND, time_spec="1:00 PM"),
    AvailabilityRule(weekdays=WEEKEND, time_spec="2:00 PM"),
)


class AvailabilityService:
    """
    Loads availability rules once and keeps the derived CalendarView.

    reload() replaces the view wholesale, so a booking already holding the
    previous view keeps a consistent slot set.
    """

    def __init__(
        self,
        source: AvailabilitySourcePort,
        deriver: SlotDeriver,
        days_to_show: int = DEFAULT_DAYS_TO_SHOW,
        sample_rules: tuple[AvailabilityRule, ...] = SAMPLE_RULES,
    ) -> None:
        self._source = source
        self._deriver = deriver
        self._days_to_show = days_to_show
        self._sample_rules = sample_rules
        self._view: CalendarView | None = None
        self._used_fallback = False
        self._logger = logging.getLogger(__name__)

    @property
    def calendar(self) -> CalendarView:
        if self._view is None:
            self._view = self._derive()[1]
        return self._view

    @property
    def used_fallback(self) -> bool:
        return self._used_fallback

    def reload(self) -> SlotDerivation:
        derivation, self._view = self._derive()
        return derivation

    def _derive(self) -> tuple[SlotDerivation, CalendarView]:
        try:
            rules = self._source.load_rules()
            self._used_fallback = False
        except UpstreamUnavailable as e:
            self._logger.warning("Availability source unavailable, using sample hours", extra={"error": str(e)})
            rules = list(self._sample_rules)
            self._used_fallback = True

        derivation = self._deriver.derive_slots(rules)
        self._logger.info(
            "Availability derived",
            extra={"action": f"{len(derivation.slots)} slots", "reason": f"{len(derivation.errors)} rule errors"},
        )
        return derivation, CalendarView(derivation.slots, days_to_show=self._days_to_show)
