from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True)
class ConversationPreferences:
    age: int | None = None
    style: str | None = None
    day_preference: str | None = None

    def merge(self, update: "ConversationPreferences") -> "ConversationPreferences":
        """Return a copy where fields present in `update` override ours."""
        return replace(
            self,
            age=update.age if update.age is not None else self.age,
            style=update.style if update.style else self.style,
            day_preference=update.day_preference if update.day_preference else self.day_preference,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"age": self.age, "style": self.style, "dayPreference": self.day_preference}

    @staticmethod
    def from_payload(payload: dict[str, Any] | None) -> "ConversationPreferences":
        payload = payload or {}
        age_raw = payload.get("age")
        try:
            age = int(age_raw) if age_raw not in (None, "") else None
        except (TypeError, ValueError):
            age = None
        style = payload.get("style")
        day = payload.get("dayPreference", payload.get("day_preference"))
        return ConversationPreferences(
            age=age,
            style=str(style).strip() or None if style else None,
            day_preference=str(day).strip() or None if day else None,
        )
