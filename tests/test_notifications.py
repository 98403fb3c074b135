from __future__ import annotations

import json
from datetime import date

import httpx
import pytest

from studio_desk.application.exceptions import DeliveryFailure
from studio_desk.application.use_cases.booking import BookingStateMachine
from studio_desk.application.use_cases.calendar_view import CalendarView
from studio_desk.application.use_cases.slot_deriver import SlotDeriver
from studio_desk.application.utils.booking_email import NO_HISTORY, format_booking_email, summarize_conversation
from studio_desk.domain.entities.availability import AvailabilityRule
from studio_desk.domain.entities.booking_draft import BookingStatus
from studio_desk.domain.entities.booking_payload import BookingPayload
from studio_desk.domain.entities.weekday import Weekday
from studio_desk.infrastructure.notifications import smtp_sink
from studio_desk.infrastructure.notifications.smtp_sink import SmtpNotificationSink
from studio_desk.infrastructure.notifications.webhook_sink import WebhookNotificationSink


PAYLOAD = BookingPayload(
    name="Jo",
    email="jo@example.com",
    phone="555-0100",
    date="2025-01-11",
    time="10:10 AM",
    timestamp="2025-01-06T09:00:00+00:00",
    conversation_summary="Customer: hi\n\nAssistant: hello",
)


def test_summary_formats_roles():
    history = [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hello"}]
    assert summarize_conversation(history) == "Customer: hi\n\nAssistant: hello"
    assert summarize_conversation([]) == NO_HISTORY


def test_smtp_message_contents():
    sink = SmtpNotificationSink(
        host="smtp.test", port=587, user="studio@test", password="pw", to_email="owner@test", bcc_email="copy@test"
    )

    msg = sink.build_message(PAYLOAD)

    assert msg["Subject"] == "New Dance Class Booking - Jo (2025-01-11 at 10:10 AM)"
    assert msg["To"] == "owner@test"
    assert msg["Bcc"] == "copy@test"
    assert msg["Reply-To"] == "jo@example.com"
    body = msg.get_content()
    assert "Phone: 555-0100" in body
    assert "Customer: hi" in body


def test_smtp_requires_credentials():
    with pytest.raises(ValueError):
        SmtpNotificationSink(user="", password="")


def test_email_body_without_history():
    body = format_booking_email(BookingPayload("Jo", "jo@example.com", "555", "2025-01-11", "10:10 AM", "ts"))
    assert NO_HISTORY in body


def test_webhook_posts_payload():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200)

    sink = WebhookNotificationSink(url="https://hooks.test/booking", client=httpx.Client(transport=httpx.MockTransport(handler)))
    sink.deliver(PAYLOAD)

    assert seen[0]["name"] == "Jo"
    assert seen[0]["_replyto"] == "jo@example.com"
    assert seen[0]["subject"].startswith("New Dance Class Booking")


def test_webhook_error_raises_delivery_failure():
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(500)))
    sink = WebhookNotificationSink(url="https://hooks.test/booking", client=client)

    with pytest.raises(DeliveryFailure):
        sink.deliver(PAYLOAD)


class _FakeSMTP:
    def __init__(self, sent: list):
        self.sent = sent

    def __call__(self, host, port, timeout=None):
        return self

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def ehlo(self):
        pass

    def starttls(self):
        pass

    def login(self, user, password):
        pass

    def send_message(self, msg):
        self.sent.append(msg)


def _smtp_sink() -> SmtpNotificationSink:
    return SmtpNotificationSink(host="smtp.test", port=587, user="studio@test", password="pw", to_email="owner@test")


def test_smtp_bad_header_raises_delivery_failure(monkeypatch):
    sent = []
    monkeypatch.setattr(smtp_sink.smtplib, "SMTP", _FakeSMTP(sent))
    payload = BookingPayload("Jo\nSmith", "jo@example.com", "555", "2025-01-11", "10:10 AM", "ts")

    with pytest.raises(DeliveryFailure):
        _smtp_sink().deliver(payload)
    assert sent == []


def test_multiline_contact_name_still_books_over_smtp(monkeypatch):
    sent = []
    monkeypatch.setattr(smtp_sink.smtplib, "SMTP", _FakeSMTP(sent))
    calendar = CalendarView(SlotDeriver().derive_slots([AvailabilityRule.for_day(Weekday.MONDAY, "4:00 PM")]).slots)
    monday = date(2025, 1, 6)
    machine = BookingStateMachine(calendar=calendar, sink=_smtp_sink(), today=lambda: monday)

    machine.submit_contact("Jo\nSmith", "jo@example.com", "555")
    machine.select_date(monday)
    machine.select_slot("16:00")
    draft = machine.confirm()

    assert draft.status == BookingStatus.CONFIRMED
    assert sent[0]["Subject"] == "New Dance Class Booking - Jo Smith (2025-01-06 at 4:00 PM)"
