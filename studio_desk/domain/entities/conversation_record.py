from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class ConversationRecord:
    conversation_id: str
    messages: tuple[dict[str, str], ...] = ()
    user_preferences: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime | None = None  # first saved
    updated_at: datetime | None = None

    @property
    def message_count(self) -> int:
        return len(self.messages)

    def count_role(self, role: str) -> int:
        return sum(1 for m in self.messages if m.get("role") == role)
