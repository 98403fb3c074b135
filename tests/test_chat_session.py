from __future__ import annotations

import json
from datetime import date

from studio_desk.application.use_cases.availability import AvailabilityService
from studio_desk.application.use_cases.chat_session import ChatSessionFactory
from studio_desk.application.use_cases.class_finder import ClassFinder
from studio_desk.application.use_cases.conversation import ConversationEngine
from studio_desk.application.use_cases.guided_intake import WELCOME_MESSAGE
from studio_desk.application.use_cases.slot_deriver import SlotDeriver
from studio_desk.domain.entities.availability import AvailabilityRule
from studio_desk.domain.entities.booking_draft import BookingStatus
from studio_desk.domain.entities.weekday import Weekday
from studio_desk.infrastructure.llm.mock_llm import MockLLM
from studio_desk.infrastructure.notifications.mock_sink import MockNotificationSink
from studio_desk.infrastructure.sheets.availability_source import StaticAvailabilitySource
from studio_desk.infrastructure.sheets.class_catalog import StaticClassCatalog
from studio_desk.infrastructure.store.memory_log import MemoryConversationLog


TODAY = date(2025, 1, 6)  # Monday


def _factory(llm: MockLLM | None = None, sink: MockNotificationSink | None = None, log=None) -> ChatSessionFactory:
    availability = AvailabilityService(
        StaticAvailabilitySource([AvailabilityRule.for_day(Weekday.MONDAY, "4:00 PM - 4:30 PM")]),
        SlotDeriver(),
    )
    return ChatSessionFactory(
        finder=ClassFinder(StaticClassCatalog()),
        availability=availability,
        sink=sink or MockNotificationSink(),
        engine=ConversationEngine(llm, sleep=lambda s: None) if llm else None,
        log=log,
        today=lambda: TODAY,
    )


def test_sessions_are_independent():
    factory = _factory()
    first, second = factory.create(), factory.create()

    first.send("5")

    assert first.session_id != second.session_id
    assert first.history[0]["content"] == WELCOME_MESSAGE
    assert len(first.history) == 3
    assert len(second.history) == 1


def test_scripted_flow_recommends_classes():
    session = _factory().create()

    for text in ("6", "hip hop"):
        session.send(text)
    turn = session.send("wednesday")

    assert [c.name for c in turn.classes] == ["Hip Hop Kids"]
    assert turn.match_type == "direct"
    assert session.preferences.age == 6


def test_schedule_call_starts_booking():
    llm = MockLLM([json.dumps({"message": "Let's set that up!", "action": "schedule_call", "preferences": {}})])
    session = _factory(llm=llm).create()

    turn = session.send("Yes please call me")

    assert turn.booking_started
    assert session.booking.status == BookingStatus.COLLECTING_CONTACT


def test_confirmed_booking_posts_message_and_carries_transcript():
    sink = MockNotificationSink()
    log = MemoryConversationLog()
    session = _factory(sink=sink, log=log).create()
    session.send("5")

    booking = session.start_booking()
    booking.submit_contact("Jo", "jo@example.com", "555")
    booking.select_date(TODAY)
    booking.select_slot("16:10")
    booking.confirm()

    assert "Customer: 5" in sink.delivered[0].conversation_summary
    assert session.history[-1]["content"].startswith("Booking Confirmed!")
    assert log.get(session.session_id).messages[-1]["content"].startswith("Booking Confirmed!")


def test_start_booking_keeps_active_draft_and_replaces_finished_one():
    session = _factory().create()

    first = session.start_booking()
    first.submit_contact("Jo", "jo@example.com", "555")
    assert session.start_booking() is first

    first.cancel()
    second = session.start_booking()
    assert second is not first
    assert second.status == BookingStatus.COLLECTING_CONTACT


def test_every_turn_is_logged():
    log = MemoryConversationLog()
    session = _factory(log=log).create()

    session.send("7")
    session.send("ballet")

    record = log.get(session.session_id)
    assert record.message_count == 5
    assert record.user_preferences["age"] == 7
