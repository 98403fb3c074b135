from __future__ import annotations

import csv
import io
import json
import math
from dataclasses import dataclass
from datetime import date, datetime, timezone

from studio_desk.application.ports.conversation_log import ConversationLogPort
from studio_desk.domain.entities.conversation_record import ConversationRecord

SORT_KEYS = ("newest", "oldest", "most_messages")
DEFAULT_PER_PAGE = 10
EXPORT_FORMATS = ("json", "csv")
CSV_HEADERS = ("ID", "Created", "Updated", "Messages", "User Age", "Style Preference", "Day Preference")


@dataclass(frozen=True)
class ConversationPage:
    items: tuple[ConversationRecord, ...]
    page: int
    total_pages: int
    total_matches: int


@dataclass(frozen=True)
class ConversationStats:
    total_conversations: int
    today_conversations: int
    total_messages: int
    avg_messages_per_conversation: float


class ConversationLogQuery:
    """Search, sort and page through saved chat transcripts for the admin view."""

    def __init__(self, log: ConversationLogPort) -> None:
        self._log = log

    def search(
        self,
        term: str | None = None,
        sort_by: str = "newest",
        page: int = 1,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> ConversationPage:
        needle = (term or "").strip().lower()
        matches = [r for r in self._log.list_all() if not needle or needle in _searchable_text(r)]

        if sort_by == "oldest":
            matches.sort(key=_updated_key)
        elif sort_by == "most_messages":
            matches.sort(key=lambda r: r.message_count, reverse=True)
        else:
            matches.sort(key=_updated_key, reverse=True)

        total_pages = max(1, math.ceil(len(matches) / per_page))
        page = min(max(1, page), total_pages)
        start = (page - 1) * per_page
        return ConversationPage(
            items=tuple(matches[start:start + per_page]),
            page=page,
            total_pages=total_pages,
            total_matches=len(matches),
        )

    def get(self, conversation_id: str) -> ConversationRecord | None:
        return self._log.get(conversation_id)

    def export(self) -> list[ConversationRecord]:
        return sorted(self._log.list_all(), key=_updated_key, reverse=True)

    def stats(self, today: date | None = None) -> ConversationStats:
        today = today or date.today()
        records = self._log.list_all()
        total_messages = sum(r.message_count for r in records)
        today_count = sum(1 for r in records if r.timestamp and r.timestamp.date() == today)
        avg = round(total_messages / len(records), 1) if records else 0.0
        return ConversationStats(
            total_conversations=len(records),
            today_conversations=today_count,
            total_messages=total_messages,
            avg_messages_per_conversation=avg,
        )


def _searchable_text(record: ConversationRecord) -> str:
    parts = [
        record.conversation_id,
        json.dumps(record.user_preferences, default=str),
        " ".join(m.get("content") or "" for m in record.messages),
    ]
    return " ".join(parts).lower()


def _updated_key(record: ConversationRecord) -> datetime:
    return record.updated_at or record.timestamp or datetime.min.replace(tzinfo=timezone.utc)


def conversations_to_csv(records: list[ConversationRecord]) -> str:
    """One summary row per transcript; empty cells where a preference was never given."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for r in records:
        prefs = r.user_preferences or {}
        writer.writerow(
            [
                r.conversation_id,
                r.timestamp.isoformat() if r.timestamp else "",
                r.updated_at.isoformat() if r.updated_at else "",
                r.message_count,
                prefs.get("age") or "",
                prefs.get("style") or "",
                prefs.get("dayPreference") or "",
            ]
        )
    return buf.getvalue()
