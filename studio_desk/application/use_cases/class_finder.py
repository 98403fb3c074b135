from __future__ import annotations

import logging
from dataclasses import dataclass

from studio_desk.application.ports.class_catalog import ClassCatalogPort
from studio_desk.application.utils.class_rules import age_bucket, age_fits, extract_dance_styles
from studio_desk.domain.entities.dance_class import DanceClass
from studio_desk.domain.entities.preferences import ConversationPreferences

WEEKEND_DAYS = ("saturday", "sunday")
WEEKDAY_DAYS = ("monday", "tuesday", "wednesday", "thursday", "friday")
ANY_WORDS = ("any", "not sure", "whatever", "no preference")


@dataclass(frozen=True)
class Recommendation:
    classes: tuple[DanceClass, ...]
    match_type: str  # "direct" | "closest"


class ClassFinder:
    def __init__(self, catalog: ClassCatalogPort) -> None:
        self._catalog = catalog
        self._classes: list[DanceClass] | None = None
        self._logger = logging.getLogger(__name__)

    def classes(self) -> list[DanceClass]:
        if self._classes is None:
            self.reload()
        return list(self._classes or [])

    def reload(self) -> list[DanceClass]:
        self._classes = [c for c in self._catalog.list_classes() if c.name and c.name.strip()]
        self._logger.info("Class catalog loaded", extra={"action": f"{len(self._classes)} classes"})
        return list(self._classes)

    def filter(self, bucket: str | None = None, style: str | None = None, day: str | None = None) -> list[DanceClass]:
        out = []
        for cls in self.classes():
            if bucket and age_bucket(cls.age_range) != bucket:
                continue
            if style and style not in extract_dance_styles(cls.name):
                continue
            if day and cls.day.lower() != day.lower():
                continue
            out.append(cls)
        return out

    def recommend(self, preferences: ConversationPreferences, limit: int = 3) -> Recommendation:
        by_age = [c for c in self.classes() if age_fits(preferences.age, c.age_range)]
        direct = [
            c for c in by_age
            if _style_matches(preferences.style, c) and _day_matches(preferences.day_preference, c)
        ]
        if direct:
            return Recommendation(classes=tuple(direct[:limit]), match_type="direct")

        # Age still has to fit; rank the compromises by how much else matches.
        ranked = sorted(
            by_age,
            key=lambda c: (
                not _style_matches(preferences.style, c),
                not _day_matches(preferences.day_preference, c),
            ),
        )
        return Recommendation(classes=tuple(ranked[:limit]), match_type="closest")


def _is_open(preference: str | None) -> bool:
    return not preference or any(word in preference.lower() for word in ANY_WORDS)


def _style_matches(style: str | None, cls: DanceClass) -> bool:
    if _is_open(style):
        return True
    wanted = style.lower().replace("-", " ").strip()
    name = cls.name.lower().replace("-", " ")
    if wanted in name:
        return True
    return any(s.replace("-", " ") in wanted for s in extract_dance_styles(cls.name))


def _day_matches(day_preference: str | None, cls: DanceClass) -> bool:
    if _is_open(day_preference):
        return True
    wanted = day_preference.lower()
    day = (cls.day or "").lower()
    if "weekend" in wanted:
        return day in WEEKEND_DAYS
    if "weekday" in wanted:
        return day in WEEKDAY_DAYS
    return bool(day) and (day in wanted or day[:3] in wanted)
