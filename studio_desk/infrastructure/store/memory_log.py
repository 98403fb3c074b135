from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timezone

from studio_desk.application.ports.conversation_log import ConversationLogPort
from studio_desk.domain.entities.conversation_record import ConversationRecord


class MemoryConversationLog(ConversationLogPort):
    def __init__(self) -> None:
        self._records: dict[str, ConversationRecord] = {}
        self._lock = threading.Lock()

    def save(self, record: ConversationRecord) -> ConversationRecord:
        now = datetime.now(timezone.utc)
        with self._lock:
            existing = self._records.get(record.conversation_id)
            stored = replace(
                record,
                timestamp=(existing.timestamp if existing else None) or record.timestamp or now,
                updated_at=record.updated_at or now,
            )
            self._records[record.conversation_id] = stored
            return stored

    def get(self, conversation_id: str) -> ConversationRecord | None:
        return self._records.get(conversation_id)

    def list_all(self) -> list[ConversationRecord]:
        with self._lock:
            return list(self._records.values())
