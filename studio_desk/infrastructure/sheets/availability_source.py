from __future__ import annotations

import logging

from studio_desk.application.ports.availability_source import AvailabilitySourcePort
from studio_desk.domain.entities.availability import AvailabilityRule
from studio_desk.domain.entities.weekday import Weekday
from studio_desk.infrastructure.sheets.google_sheets_client import GoogleSheetsClient


class SheetsAvailabilitySource(AvailabilitySourcePort):
    """
    Availability worksheet: header row, then one row per weekday:

        Day       | Times
        Monday    | 4:00 PM - 6:00 PM
        Tuesday   | none
        Saturday  | 10:00 AM
    """

    def __init__(self, client: GoogleSheetsClient, sheet_name: str = "Availability") -> None:
        self._client = client
        self._sheet_name = sheet_name
        self._logger = logging.getLogger(__name__)

    def load_rules(self) -> list[AvailabilityRule]:
        rows = self._client.get_values(f"{self._sheet_name}!A:B")
        rules: list[AvailabilityRule] = []
        for row in rows[1:]:
            if not row or not row[0]:
                continue
            try:
                weekday = Weekday.from_name(row[0])
            except ValueError:
                self._logger.warning("Skipping availability row with unknown day", extra={"weekday": row[0]})
                continue
            rules.append(AvailabilityRule.for_day(weekday, row[1] if len(row) > 1 else ""))
        return rules


class StaticAvailabilitySource(AvailabilitySourcePort):
    def __init__(self, rules: list[AvailabilityRule] | tuple[AvailabilityRule, ...]) -> None:
        self._rules = list(rules)

    def load_rules(self) -> list[AvailabilityRule]:
        return list(self._rules)
