from __future__ import annotations

import logging

from studio_desk.application.exceptions import DeliveryFailure
from studio_desk.application.ports.notification_sink import NotificationSinkPort
from studio_desk.domain.entities.booking_payload import BookingPayload


class MockNotificationSink(NotificationSinkPort):
    """Keeps deliveries in memory. Set `fail_next` to make the next N deliveries raise."""

    def __init__(self, fail_next: int = 0) -> None:
        self.delivered: list[BookingPayload] = []
        self.attempts = 0
        self.fail_next = fail_next
        self._logger = logging.getLogger(__name__)

    def deliver(self, payload: BookingPayload) -> None:
        self.attempts += 1
        if self.fail_next > 0:
            self.fail_next -= 1
            raise DeliveryFailure("mock delivery failure")
        self.delivered.append(payload)
        self._logger.info("Booking recorded", extra={"action": "mock", "status": "sent"})
