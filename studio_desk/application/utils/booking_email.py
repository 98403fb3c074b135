from __future__ import annotations

from typing import Any

from studio_desk.domain.entities.booking_payload import BookingPayload

NO_HISTORY = "No conversation history available"


def summarize_conversation(history: list[dict[str, Any]]) -> str:
    """Render a chat transcript as "Customer: ..." / "Assistant: ..." paragraphs."""
    if not history:
        return NO_HISTORY
    lines = []
    for message in history:
        role = "Customer" if message.get("role") == "user" else "Assistant"
        lines.append(f"{role}: {message.get('content', '')}")
    return "\n\n".join(lines)


def booking_subject(payload: BookingPayload) -> str:
    return f"New Dance Class Booking - {payload.name} ({payload.date} at {payload.time})"


def format_booking_email(payload: BookingPayload) -> str:
    return (
        "New Dance Studio Consultation Call\n"
        "\n"
        "CALL DETAILS:\n"
        "=============\n"
        f"Name: {payload.name}\n"
        f"Email: {payload.email}\n"
        f"Phone: {payload.phone}\n"
        f"Scheduled: {payload.date} at {payload.time}\n"
        f"Booked at: {payload.timestamp}\n"
        "\n"
        "FULL CONVERSATION:\n"
        "==================\n"
        f"{payload.conversation_summary or NO_HISTORY}\n"
        "\n"
        "NEXT STEPS:\n"
        "===========\n"
        f"- Call the customer at {payload.phone} at the scheduled time\n"
        "- Discuss dance class options based on their preferences\n"
        "\n"
        "This booking was made through the dance studio chat assistant."
    )
