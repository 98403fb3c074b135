"""
HTTP API tests against the FastAPI app with offline adapters swapped in.
"""

from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient

from studio_desk.application.use_cases.availability import AvailabilityService
from studio_desk.application.use_cases.class_finder import ClassFinder
from studio_desk.application.use_cases.slot_deriver import SlotDeriver
from studio_desk.domain.entities.availability import AvailabilityRule
from studio_desk.domain.entities.weekday import WEEKDAYS, WEEKEND
from studio_desk.infrastructure.notifications.mock_sink import MockNotificationSink
from studio_desk.infrastructure.sheets.availability_source import StaticAvailabilitySource
from studio_desk.infrastructure.sheets.class_catalog import StaticClassCatalog
from studio_desk.infrastructure.store.memory_log import MemoryConversationLog
from studio_desk.infrastructure.store.session_store import MemorySessionStore
from studio_desk.main import app
from studio_desk.wiring import dependencies as deps


class _Env:
    def __init__(self) -> None:
        self.sink = MockNotificationSink()
        self.log = MemoryConversationLog()
        self.store = MemorySessionStore()
        self.availability = AvailabilityService(
            StaticAvailabilitySource([AvailabilityRule(weekdays=WEEKDAYS | WEEKEND, time_spec="4:00 PM - 4:30 PM")]),
            SlotDeriver(),
        )
        self.finder = ClassFinder(StaticClassCatalog())


@pytest.fixture
def env():
    env = _Env()
    app.dependency_overrides[deps.get_notification_sink] = lambda: env.sink
    app.dependency_overrides[deps.get_conversation_log] = lambda: env.log
    app.dependency_overrides[deps.get_session_store] = lambda: env.store
    app.dependency_overrides[deps.get_availability_service] = lambda: env.availability
    app.dependency_overrides[deps.get_class_finder] = lambda: env.finder
    app.dependency_overrides[deps.get_conversation_engine] = lambda: None
    yield env
    app.dependency_overrides.clear()


@pytest.fixture
def client(env):
    return TestClient(app)


def _new_session(client: TestClient) -> str:
    response = client.post("/chat/sessions")
    assert response.status_code == 200
    return response.json()["session_id"]


def _booking_url(session_id: str, action: str = "") -> str:
    return f"/chat/sessions/{session_id}/booking" + (f"/{action}" if action else "")


def _ready_to_confirm(client: TestClient, session_id: str) -> None:
    assert client.post(_booking_url(session_id)).status_code == 200
    response = client.post(
        _booking_url(session_id, "contact"), json={"name": "Jo", "email": "jo@example.com", "phone": "555"}
    )
    assert response.json()["status"] == "choosing_slot"
    response = client.post(
        _booking_url(session_id, "selection"), json={"date": date.today().isoformat(), "time": "16:10"}
    )
    assert response.json()["status"] == "confirming_slot"


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_chat_guided_flow(client):
    response = client.post("/chat/sessions")
    session_id = response.json()["session_id"]
    assert "how old is your child" in response.json()["message"]

    for text in ("6", "hip hop"):
        client.post(f"/chat/sessions/{session_id}/messages", json={"message": text})
    reply = client.post(f"/chat/sessions/{session_id}/messages", json={"message": "wednesday"}).json()

    assert reply["action"] == "get_classes"
    assert reply["match_type"] == "direct"
    assert [c["name"] for c in reply["classes"]] == ["Hip Hop Kids"]
    assert reply["preferences"]["age"] == 6


def test_unknown_session_is_404(client):
    assert client.post("/chat/sessions/nope/messages", json={"message": "hi"}).status_code == 404
    assert client.post(_booking_url("nope")).status_code == 404


def test_booking_without_start_is_409(client):
    session_id = _new_session(client)
    assert client.get(_booking_url(session_id)).status_code == 409


def test_booking_happy_path(client, env):
    session_id = _new_session(client)
    _ready_to_confirm(client, session_id)

    body = client.post(_booking_url(session_id, "confirm")).json()

    assert body["status"] == "confirmed"
    assert body["time_label"] == "4:10 PM"
    assert body["confirmation_message"].startswith("Booking Confirmed!")
    assert body["calendar"] == []
    assert body["name"] == body["email"] == body["phone"] == ""
    assert client.get(_booking_url(session_id)).json()["phone"] == ""
    assert len(env.sink.delivered) == 1
    assert env.sink.delivered[0].date == date.today().isoformat()


def test_booking_validation_is_422_with_field(client):
    session_id = _new_session(client)
    client.post(_booking_url(session_id))

    response = client.post(
        _booking_url(session_id, "contact"), json={"name": "Jo", "email": "bad-email", "phone": "555"}
    )

    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "email"
    assert client.get(_booking_url(session_id)).json()["status"] == "collecting_contact"


def test_out_of_order_request_is_409(client):
    session_id = _new_session(client)
    client.post(_booking_url(session_id))

    assert client.post(_booking_url(session_id, "confirm")).status_code == 409


def test_delivery_failure_is_reported_and_retryable(client, env):
    env.sink.fail_next = 1
    session_id = _new_session(client)
    _ready_to_confirm(client, session_id)

    failed = client.post(_booking_url(session_id, "confirm"))
    assert failed.status_code == 200
    assert failed.json()["status"] == "failed"
    assert failed.json()["last_error"]
    assert failed.json()["name"] == "Jo"

    assert client.post(_booking_url(session_id, "confirm")).json()["status"] == "confirmed"


def test_cancel_then_restart_booking(client):
    session_id = _new_session(client)
    client.post(_booking_url(session_id))

    assert client.post(_booking_url(session_id, "cancel")).json()["status"] == "cancelled"
    assert client.post(_booking_url(session_id)).json()["status"] == "collecting_contact"


def test_calendar_window(client):
    body = client.get("/calendar", params={"days": 3}).json()

    assert len(body["days"]) == 3
    assert body["days"][0]["is_today"]
    assert [s["time"] for s in body["days"][0]["slots"]] == ["16:00", "16:10", "16:20"]
    assert client.get("/calendar", params={"days": 0}).status_code == 422


def test_availability_reload(client):
    body = client.post("/availability/reload").json()
    assert body["slot_count"] == 3
    assert body["errors"] == []
    assert body["used_fallback"] is False


def test_class_filters(client):
    names = [c["name"] for c in client.get("/classes", params={"age_bucket": "teen"}).json()["classes"]]
    assert names == ["Advanced Contemporary"]
    assert client.get("/classes", params={"age_bucket": "seniors"}).status_code == 400


def test_admin_views(client):
    session_id = _new_session(client)
    client.post(f"/chat/sessions/{session_id}/messages", json={"message": "My daughter is 4"})

    page = client.get("/admin/conversations", params={"q": "daughter"}).json()
    assert page["total_matches"] == 1
    assert page["items"][0]["conversation_id"] == session_id
    assert page["items"][0]["user_messages"] == 1

    assert client.get(f"/admin/conversations/{session_id}").status_code == 200
    assert client.get("/admin/conversations/missing").status_code == 404
    assert client.get("/admin/conversations", params={"sort": "random"}).status_code == 400

    stats = client.get("/admin/stats").json()
    assert stats["total_conversations"] == 1
    assert stats["total_messages"] == 3


def test_age_buckets_are_listed_in_order(client):
    buckets = client.get("/classes/age-buckets").json()
    assert buckets[0] == {"value": "toddler", "label": "Toddler (1-3)"}
    assert [b["value"] for b in buckets][-1] == "all-ages"


def test_ended_session_is_gone(client, env):
    session_id = _new_session(client)

    assert client.delete(f"/chat/sessions/{session_id}").status_code == 204
    assert client.post(f"/chat/sessions/{session_id}/messages", json={"message": "hi"}).status_code == 404
    assert env.log.get(session_id) is not None


def test_admin_export(client):
    session_id = _new_session(client)
    client.post(f"/chat/sessions/{session_id}/messages", json={"message": "My daughter is 4"})

    dump = client.get("/admin/conversations/export")
    assert dump.status_code == 200
    assert dump.headers["content-disposition"].startswith('attachment; filename="conversations-')
    assert [c["conversation_id"] for c in dump.json()] == [session_id]

    summary = client.get("/admin/conversations/export", params={"format": "csv"})
    assert summary.headers["content-type"].startswith("text/csv")
    lines = summary.text.splitlines()
    assert lines[0] == "ID,Created,Updated,Messages,User Age,Style Preference,Day Preference"
    assert lines[1].startswith(f"{session_id},")
    assert lines[1].split(",")[3] == "3"

    assert client.get("/admin/conversations/export", params={"format": "xml"}).status_code == 400
