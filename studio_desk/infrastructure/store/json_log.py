from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from studio_desk.application.ports.conversation_log import ConversationLogPort
from studio_desk.domain.entities.conversation_record import ConversationRecord


class JsonConversationLog(ConversationLogPort):
    """One JSON file per conversation under `data_dir`, written atomically."""

    def __init__(self, data_dir: str = "./data/conversations") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # guards self._locks
        self._logger = logging.getLogger(__name__)

    def _get_lock(self, conversation_id: str) -> threading.Lock:
        with self._lock_lock:
            if conversation_id not in self._locks:
                self._locks[conversation_id] = threading.Lock()
            return self._locks[conversation_id]

    def _get_file_path(self, conversation_id: str) -> Path:
        safe_id = "".join(c for c in conversation_id if c.isalnum() or c in "-_")
        return self._data_dir / f"{safe_id}.json"

    def save(self, record: ConversationRecord) -> ConversationRecord:
        now = datetime.now(timezone.utc)
        with self._get_lock(record.conversation_id):
            existing = self._load(self._get_file_path(record.conversation_id))
            stored = ConversationRecord(
                conversation_id=record.conversation_id,
                messages=record.messages,
                user_preferences=dict(record.user_preferences),
                timestamp=(existing.timestamp if existing else None) or record.timestamp or now,
                updated_at=record.updated_at or now,
            )
            self._write(self._get_file_path(record.conversation_id), self._serialize(stored))
            return stored

    def get(self, conversation_id: str) -> ConversationRecord | None:
        return self._load(self._get_file_path(conversation_id))

    def list_all(self) -> list[ConversationRecord]:
        records = []
        for path in sorted(self._data_dir.glob("*.json")):
            record = self._load(path)
            if record is not None:
                records.append(record)
        return records

    def _load(self, path: Path) -> ConversationRecord | None:
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return self._deserialize(json.load(f))
        except (json.JSONDecodeError, OSError, KeyError, TypeError, ValueError) as e:
            # A corrupted file is skipped, not fatal for the whole listing.
            self._logger.warning("Skipping unreadable conversation file", extra={"reason": f"{path.name}: {e}"})
            return None

    def _write(self, path: Path, data: dict[str, Any]) -> None:
        temp_path = path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise

    def _serialize(self, record: ConversationRecord) -> dict[str, Any]:
        return {
            "conversation_id": record.conversation_id,
            "messages": [dict(m) for m in record.messages],
            "user_preferences": record.user_preferences,
            "timestamp": record.timestamp.isoformat() if record.timestamp else None,
            "updated_at": record.updated_at.isoformat() if record.updated_at else None,
            "version": 1,
        }

    def _deserialize(self, data: dict[str, Any]) -> ConversationRecord:
        return ConversationRecord(
            conversation_id=data["conversation_id"],
            messages=tuple(data.get("messages") or ()),
            user_preferences=dict(data.get("user_preferences") or {}),
            timestamp=_parse_dt(data.get("timestamp")),
            updated_at=_parse_dt(data.get("updated_at")),
        )


def _parse_dt(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
