from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class BookingPayload:
    name: str
    email: str
    phone: str
    date: str  # YYYY-MM-DD
    time: str  # slot label, e.g. "4:00 PM"
    timestamp: str  # ISO-8601
    conversation_summary: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
