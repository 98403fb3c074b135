from __future__ import annotations

import logging

import httpx

from studio_desk.application.exceptions import DeliveryFailure
from studio_desk.application.ports.notification_sink import NotificationSinkPort
from studio_desk.application.utils.booking_email import booking_subject, format_booking_email
from studio_desk.core.config import settings
from studio_desk.domain.entities.booking_payload import BookingPayload


class WebhookNotificationSink(NotificationSinkPort):
    """POSTs the booking as JSON to a form or automation endpoint (FormSubmit, Apps Script, Zapier, ...)."""

    def __init__(self, url: str | None = None, client: httpx.Client | None = None) -> None:
        self._url = url or settings.BOOKING_WEBHOOK_URL
        self._client = client or httpx.Client(timeout=10.0)
        self._logger = logging.getLogger(__name__)

        if not self._url:
            raise ValueError("BOOKING_WEBHOOK_URL is required for webhook notifications")

    def deliver(self, payload: BookingPayload) -> None:
        body = {
            **payload.to_dict(),
            "subject": booking_subject(payload),
            "message": format_booking_email(payload),
            "_replyto": payload.email,
        }
        try:
            response = self._client.post(self._url, json=body)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise DeliveryFailure(f"Webhook delivery failed: {e}") from e

        self._logger.info("Booking webhook delivered", extra={"action": "webhook", "status": "sent"})
