#!/usr/bin/env python3
"""
Interactive local chat harness (no HTTP).

Usage:
  python3 scripts/chat_local.py

What it does:
- Builds a chat session from the same wiring the API uses (.env is honoured)
- Sends your typed messages through ChatSession.send
- Prints the reply, extracted preferences and any recommended classes
- /book walks the booking flow from the terminal
"""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from studio_desk.application.exceptions import BookingValidationError, InvalidTransitionError
from studio_desk.application.use_cases.chat_session import ChatSession, ChatSessionFactory
from studio_desk.core.config import settings
from studio_desk.wiring.dependencies import (
    get_availability_service,
    get_class_finder,
    get_conversation_engine,
    get_conversation_log,
    get_notification_sink,
)


def _build_factory() -> ChatSessionFactory:
    return ChatSessionFactory(
        finder=get_class_finder(),
        availability=get_availability_service(),
        sink=get_notification_sink(),
        engine=get_conversation_engine(),
        log=get_conversation_log(),
        min_phone_digits=settings.PHONE_MIN_DIGITS,
    )


def _print_header(session: ChatSession) -> None:
    print("\nLocal Chat Harness")
    print("-" * 60)
    print(f"session_id: {session.session_id}")
    print(f"mode: {'llm' if session.engine else 'guided'}")
    print("Type your message and press Enter.")
    print("Commands: /new, /history, /calendar, /book, /quit, /help")
    print("-" * 60)
    print(f"(assistant) {session.history[-1]['content']}")


def _print_calendar(session: ChatSession) -> None:
    for day in get_availability_service().calendar.build_window(date.today()):
        marker = "*" if day.is_today else " "
        times = ", ".join(s.label for s in day.available_slots) or "-"
        print(f"{marker} {day.date.isoformat()} {day.weekday.display_name:<9} {times}")


def _ask(label: str) -> str:
    return input(f"  {label}: ").strip()


def _book(session: ChatSession) -> None:
    booking = session.start_booking()
    try:
        booking.submit_contact(_ask("name"), _ask("email"), _ask("phone"))
        _print_calendar(session)
        booking.select_date(date.fromisoformat(_ask("date (YYYY-MM-DD)")))
        booking.select_slot(_ask("time (HH:MM, 24h)"))
    except BookingValidationError as e:
        print(f"  {e.field}: {e.message}")
        session.discard_booking()
        return
    except (InvalidTransitionError, ValueError) as e:
        print(f"  {e}")
        session.discard_booking()
        return

    if _ask("confirm? [y/N]").lower() != "y":
        booking.cancel()
        print("  cancelled")
        return

    draft = booking.confirm()
    print(f"  status: {draft.status.value}")
    if draft.last_error:
        print(f"  {draft.last_error}")
    else:
        print(booking.confirmation_message())


def main() -> None:
    factory = _build_factory()
    session = factory.create()
    _print_header(session)

    while True:
        try:
            user_text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not user_text:
            continue

        cmd = user_text.lower()
        if cmd in ("/quit", "/exit"):
            print("Bye!")
            return
        if cmd == "/help":
            print("Commands:")
            print("  /new      -> start a new session")
            print("  /history  -> show last 10 messages")
            print("  /calendar -> show bookable call times")
            print("  /book     -> schedule a callback")
            print("  /quit     -> exit")
            continue
        if cmd == "/new":
            session = factory.create()
            _print_header(session)
            continue
        if cmd == "/history":
            print("\n--- History (last 10) ---")
            for item in session.history[-10:]:
                print(f"{item.get('role')}: {item.get('content', '')}")
            continue
        if cmd == "/calendar":
            _print_calendar(session)
            continue
        if cmd == "/book":
            _book(session)
            continue

        turn = session.send(user_text)

        print("\n--- Decision ---")
        print(f"action: {turn.reply.action.value}")
        print(f"preferences: {session.preferences.to_dict()}")
        if turn.match_type:
            print(f"match_type: {turn.match_type}")

        print("\n--- Reply ---")
        print(turn.reply.message)
        for cls in turn.classes:
            print(f"  - {cls.name} ({cls.day} {cls.time}, ages {cls.age_range})")
        if turn.booking_started:
            print("\n(booking started, use /book to pick a time)")


if __name__ == "__main__":
    main()
