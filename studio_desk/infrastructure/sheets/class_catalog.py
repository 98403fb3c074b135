from __future__ import annotations

import logging

from studio_desk.application.exceptions import UpstreamUnavailable
from studio_desk.application.ports.class_catalog import ClassCatalogPort
from studio_desk.domain.entities.dance_class import DanceClass
from studio_desk.infrastructure.sheets.google_sheets_client import GoogleSheetsClient

SAMPLE_CLASSES: tuple[DanceClass, ...] = (
    DanceClass(
        name="Tiny Dancers",
        age_range="3-5",
        day="Monday",
        time="10:00 AM",
        level="Beginner",
        description="Introduction to movement and music for our youngest dancers.",
    ),
    DanceClass(
        name="Ballet Basics",
        age_range="5-7",
        day="Tuesday",
        time="4:00 PM",
        level="Beginner",
        description="Learn the fundamentals of ballet in a fun and supportive environment.",
    ),
    DanceClass(
        name="Hip Hop Kids",
        age_range="6-9",
        day="Wednesday",
        time="5:00 PM",
        level="All Levels",
        description="High-energy class teaching hip hop basics and choreography.",
    ),
    DanceClass(
        name="Advanced Contemporary",
        age_range="12-18",
        day="Friday",
        time="6:30 PM",
        level="Advanced",
        description="For experienced dancers to explore contemporary techniques.",
    ),
)


class SheetsClassCatalog(ClassCatalogPort):
    """
    One worksheet per weekday, columns A-F:
    class name, description, performance, time, ages, instructor.
    """

    def __init__(self, client: GoogleSheetsClient, sheet_names: list[str]) -> None:
        self._client = client
        self._sheet_names = list(sheet_names)
        self._logger = logging.getLogger(__name__)

    def list_classes(self) -> list[DanceClass]:
        classes: list[DanceClass] = []
        failures = 0
        for day in self._sheet_names:
            try:
                rows = self._client.get_values(f"{day}!A:F")
            except UpstreamUnavailable as e:
                failures += 1
                self._logger.warning("Skipping class sheet", extra={"weekday": day, "error": str(e)})
                continue
            classes.extend(_parse_rows(day, rows))

        if self._sheet_names and failures == len(self._sheet_names):
            raise UpstreamUnavailable("Could not read any class sheet")
        return classes


class StaticClassCatalog(ClassCatalogPort):
    def __init__(self, classes: tuple[DanceClass, ...] | list[DanceClass] = SAMPLE_CLASSES) -> None:
        self._classes = list(classes)

    def list_classes(self) -> list[DanceClass]:
        return list(self._classes)


class FallbackClassCatalog(ClassCatalogPort):
    """Serves the sample schedule whenever the primary catalog is unreachable."""

    def __init__(self, primary: ClassCatalogPort, fallback: ClassCatalogPort | None = None) -> None:
        self._primary = primary
        self._fallback = fallback or StaticClassCatalog()
        self.used_fallback = False
        self._logger = logging.getLogger(__name__)

    def list_classes(self) -> list[DanceClass]:
        try:
            classes = self._primary.list_classes()
        except UpstreamUnavailable as e:
            self._logger.warning("Class data unavailable, showing sample classes", extra={"error": str(e)})
            self.used_fallback = True
            return self._fallback.list_classes()
        self.used_fallback = False
        return classes


def _parse_rows(day: str, rows: list[list[str]]) -> list[DanceClass]:
    classes = []
    for row in rows[1:]:
        cells = (row + [""] * 6)[:6]
        name, description, performance, time, ages, instructor = cells
        if not name:
            continue
        classes.append(
            DanceClass(
                name=name,
                day=day,
                description=description or "No description available",
                performance=performance,
                time=time or "TBD",
                age_range=ages or "All ages",
                instructor=instructor or "TBD",
            )
        )
    return classes
