from __future__ import annotations

import datetime as dt
from typing import Any

from pydantic import BaseModel, Field

from studio_desk.application.use_cases.booking import BookingStateMachine
from studio_desk.application.use_cases.conversation_log import ConversationPage, ConversationStats
from studio_desk.domain.entities.calendar_day import CalendarDay
from studio_desk.domain.entities.conversation_record import ConversationRecord
from studio_desk.domain.entities.dance_class import DanceClass
from studio_desk.domain.entities.preferences import ConversationPreferences
from studio_desk.domain.entities.time_slot import TimeSlot


class PreferencesSchema(BaseModel):
    age: int | None = None
    style: str | None = None
    day_preference: str | None = None

    @staticmethod
    def from_entity(prefs: ConversationPreferences) -> "PreferencesSchema":
        return PreferencesSchema(age=prefs.age, style=prefs.style, day_preference=prefs.day_preference)


class DanceClassSchema(BaseModel):
    name: str
    day: str
    time: str
    age_range: str
    description: str = ""
    performance: str = ""
    instructor: str = "TBD"
    level: str = ""

    @staticmethod
    def from_entity(cls: DanceClass) -> "DanceClassSchema":
        return DanceClassSchema(
            name=cls.name,
            day=cls.day,
            time=cls.time,
            age_range=cls.age_range,
            description=cls.description,
            performance=cls.performance,
            instructor=cls.instructor,
            level=cls.level,
        )


class TimeSlotSchema(BaseModel):
    time: str  # HH:MM
    label: str

    @staticmethod
    def from_entity(slot: TimeSlot) -> "TimeSlotSchema":
        return TimeSlotSchema(time=slot.time24, label=slot.label)


class CalendarDaySchema(BaseModel):
    date: dt.date
    weekday: str
    is_today: bool
    is_available: bool
    slots: list[TimeSlotSchema] = Field(default_factory=list)

    @staticmethod
    def from_entity(day: CalendarDay) -> "CalendarDaySchema":
        return CalendarDaySchema(
            date=day.date,
            weekday=day.weekday.display_name,
            is_today=day.is_today,
            is_available=day.is_available,
            slots=[TimeSlotSchema.from_entity(s) for s in day.available_slots],
        )


class CalendarResponseSchema(BaseModel):
    days: list[CalendarDaySchema]
    used_fallback: bool = False


class RuleErrorSchema(BaseModel):
    weekdays: list[str]
    time_spec: str
    reason: str


class ReloadResponseSchema(BaseModel):
    slot_count: int
    errors: list[RuleErrorSchema] = Field(default_factory=list)
    used_fallback: bool = False


class CreateSessionResponseSchema(BaseModel):
    session_id: str
    message: str


class ChatMessageRequestSchema(BaseModel):
    message: str = Field(min_length=1)


class ContactRequestSchema(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""


class SelectionRequestSchema(BaseModel):
    date: dt.date
    time: str | None = None  # HH:MM


class BookingResponseSchema(BaseModel):
    status: str
    name: str = ""
    email: str = ""
    phone: str = ""
    date: dt.date | None = None
    time: str | None = None
    time_label: str | None = None
    last_error: str | None = None
    confirmation_message: str | None = None
    calendar: list[CalendarDaySchema] = Field(default_factory=list)

    @staticmethod
    def from_machine(machine: BookingStateMachine) -> "BookingResponseSchema":
        draft = machine.draft
        show_calendar = not draft.status.is_terminal
        return BookingResponseSchema(
            status=draft.status.value,
            name=draft.contact.name,
            email=draft.contact.email,
            phone=draft.contact.phone,
            date=draft.selected_date,
            time=draft.selected_slot.time24 if draft.selected_slot else None,
            time_label=draft.selected_slot.label if draft.selected_slot else None,
            last_error=draft.last_error,
            confirmation_message=machine.confirmation_message() or None,
            calendar=(
                [CalendarDaySchema.from_entity(d) for d in machine.calendar.build_window(machine.today())]
                if show_calendar
                else []
            ),
        )


class ChatReplySchema(BaseModel):
    message: str
    action: str
    preferences: PreferencesSchema
    classes: list[DanceClassSchema] = Field(default_factory=list)
    match_type: str | None = None
    booking: BookingResponseSchema | None = None


class ClassListResponseSchema(BaseModel):
    classes: list[DanceClassSchema]


class ConversationSchema(BaseModel):
    conversation_id: str
    messages: list[dict[str, Any]]
    user_preferences: dict[str, Any] = Field(default_factory=dict)
    timestamp: dt.datetime | None = None
    updated_at: dt.datetime | None = None
    message_count: int
    user_messages: int
    assistant_messages: int

    @staticmethod
    def from_entity(record: ConversationRecord) -> "ConversationSchema":
        return ConversationSchema(
            conversation_id=record.conversation_id,
            messages=[dict(m) for m in record.messages],
            user_preferences=dict(record.user_preferences),
            timestamp=record.timestamp,
            updated_at=record.updated_at,
            message_count=record.message_count,
            user_messages=record.count_role("user"),
            assistant_messages=record.count_role("assistant"),
        )


class ConversationPageSchema(BaseModel):
    items: list[ConversationSchema]
    page: int
    total_pages: int
    total_matches: int

    @staticmethod
    def from_entity(page: ConversationPage) -> "ConversationPageSchema":
        return ConversationPageSchema(
            items=[ConversationSchema.from_entity(r) for r in page.items],
            page=page.page,
            total_pages=page.total_pages,
            total_matches=page.total_matches,
        )


class StatsSchema(BaseModel):
    total_conversations: int
    today_conversations: int
    total_messages: int
    avg_messages_per_conversation: float

    @staticmethod
    def from_entity(stats: ConversationStats) -> "StatsSchema":
        return StatsSchema(
            total_conversations=stats.total_conversations,
            today_conversations=stats.today_conversations,
            total_messages=stats.total_messages,
            avg_messages_per_conversation=stats.avg_messages_per_conversation,
        )
