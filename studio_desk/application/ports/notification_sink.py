from __future__ import annotations

from abc import ABC, abstractmethod

from studio_desk.domain.entities.booking_payload import BookingPayload


class NotificationSinkPort(ABC):
    @abstractmethod
    def deliver(self, payload: BookingPayload) -> None:
        """Deliver a confirmed booking. Raises DeliveryFailure on any error."""
        raise NotImplementedError
