from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage

from studio_desk.application.exceptions import DeliveryFailure
from studio_desk.application.ports.notification_sink import NotificationSinkPort
from studio_desk.application.utils.booking_email import booking_subject, format_booking_email
from studio_desk.core.config import settings
from studio_desk.domain.entities.booking_payload import BookingPayload


class SmtpNotificationSink(NotificationSinkPort):
    """Emails each booking to the studio admin over SMTP with STARTTLS (Gmail app passwords work)."""

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        user: str | None = None,
        password: str | None = None,
        to_email: str | None = None,
        bcc_email: str | None = None,
    ) -> None:
        self._host = host or settings.SMTP_HOST
        self._port = port or settings.SMTP_PORT
        self._user = user or settings.EMAIL_USER
        self._password = password or settings.EMAIL_PASS
        self._to = to_email or settings.ADMIN_EMAIL
        self._bcc = bcc_email if bcc_email is not None else settings.BCC_EMAIL
        self._logger = logging.getLogger(__name__)

        if not self._user or not self._password:
            raise ValueError("EMAIL_USER and EMAIL_PASS are required for SMTP notifications")

    def build_message(self, payload: BookingPayload) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = booking_subject(payload)
        msg["From"] = self._user
        msg["To"] = self._to
        if self._bcc:
            msg["Bcc"] = self._bcc
        msg["Reply-To"] = payload.email
        msg.set_content(format_booking_email(payload))
        return msg

    def deliver(self, payload: BookingPayload) -> None:
        try:
            msg = self.build_message(payload)
            with smtplib.SMTP(self._host, self._port, timeout=30) as s:
                s.ehlo()
                s.starttls()
                s.ehlo()
                s.login(self._user, self._password)
                s.send_message(msg)
        except (smtplib.SMTPException, OSError, ValueError) as e:
            raise DeliveryFailure(f"SMTP delivery failed: {e}") from e

        self._logger.info("Booking email sent", extra={"action": "smtp", "status": "sent"})
