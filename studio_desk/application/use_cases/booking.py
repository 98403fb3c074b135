from __future__ import annotations

import logging
import re
from dataclasses import replace
from datetime import date, datetime
from typing import Callable

from studio_desk.application.exceptions import BookingValidationError, InvalidTransitionError
from studio_desk.application.ports.notification_sink import NotificationSinkPort
from studio_desk.application.use_cases.calendar_view import CalendarView
from studio_desk.domain.entities.booking_draft import BookingDraft, BookingStatus, ContactInfo
from studio_desk.domain.entities.booking_payload import BookingPayload

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

DELIVERY_FAILED_MESSAGE = (
    "There was an error saving your booking. Please try again, "
    "or contact the studio directly if the problem continues."
)

S = BookingStatus

# action -> states it may be requested from
TRANSITIONS: dict[str, frozenset[BookingStatus]] = {
    "submit_contact": frozenset({S.COLLECTING_CONTACT}),
    "select_date": frozenset({S.CHOOSING_SLOT, S.CONFIRMING_SLOT}),
    "select_slot": frozenset({S.CHOOSING_SLOT, S.CONFIRMING_SLOT}),
    "request_confirmation": frozenset({S.CHOOSING_SLOT}),
    "change": frozenset({S.CONFIRMING_SLOT, S.FAILED}),
    "retry": frozenset({S.FAILED}),
    "confirm": frozenset({S.CONFIRMING_SLOT, S.FAILED}),
    "cancel": frozenset({S.COLLECTING_CONTACT, S.CHOOSING_SLOT, S.CONFIRMING_SLOT, S.FAILED}),
}


class BookingStateMachine:
    """
    Owns one session's BookingDraft and walks it through
    contact entry -> slot choice -> confirmation -> submission.

    Every public method is a transition request. Requests that are not valid
    from the current status raise InvalidTransitionError; rejected input raises
    BookingValidationError. Neither changes the draft.
    """

    def __init__(
        self,
        calendar: CalendarView,
        sink: NotificationSinkPort,
        today: Callable[[], date] = date.today,
        summary_provider: Callable[[], str] | None = None,
        on_confirmed: Callable[[BookingDraft, BookingPayload], None] | None = None,
        min_phone_digits: int = 0,
    ) -> None:
        self._calendar = calendar
        self._sink = sink
        self._today = today
        self._summary_provider = summary_provider
        self._on_confirmed = on_confirmed
        self._min_phone_digits = min_phone_digits
        self._draft = BookingDraft()
        self._logger = logging.getLogger(__name__)

    @property
    def draft(self) -> BookingDraft:
        return self._draft

    @property
    def status(self) -> BookingStatus:
        return self._draft.status

    @property
    def calendar(self) -> CalendarView:
        return self._calendar

    def today(self) -> date:
        return self._today()

    def submit_contact(self, name: str, email: str, phone: str) -> BookingDraft:
        self._require("submit_contact")
        contact = self._validate_contact(name, email, phone)
        return self._move(S.CHOOSING_SLOT, contact=contact)

    def select_date(self, value: date) -> BookingDraft:
        self._require("select_date")
        today = self._today()
        if not self._calendar.window_contains(value, today):
            raise BookingValidationError("date", "Please choose a date from the calendar shown.")
        if not self._calendar.is_date_available(value):
            raise BookingValidationError("date", "No available time slots for this day.")

        slot = self._draft.selected_slot
        if slot is not None and self._calendar.find_slot(value, slot.time24) is None:
            slot = None
        return self._move(S.CHOOSING_SLOT, selected_date=value, selected_slot=slot)

    def select_slot(self, time24: str) -> BookingDraft:
        self._require("select_slot")
        if self._draft.selected_date is None:
            raise BookingValidationError("date", "Please choose a date first.")
        slot = self._calendar.find_slot(self._draft.selected_date, time24)
        if slot is None:
            raise BookingValidationError("time", "That time is not available on the selected date.")
        return self._move(S.CONFIRMING_SLOT, selected_slot=slot)

    def request_confirmation(self) -> BookingDraft:
        self._require("request_confirmation")
        if self._draft.selected_date is None:
            raise BookingValidationError("date", "Please choose a date first.")
        if self._draft.selected_slot is None:
            raise BookingValidationError("time", "Please choose a time first.")
        return self._move(S.CONFIRMING_SLOT)

    def change(self) -> BookingDraft:
        self._require("change")
        return self._move(S.CHOOSING_SLOT, last_error=None)

    def retry(self) -> BookingDraft:
        self._require("retry")
        return self._move(S.CONFIRMING_SLOT)

    def confirm(self) -> BookingDraft:
        """
        Submit the draft to the notification sink exactly once.

        On failure the draft keeps every field, moves to FAILED and carries a
        user-facing `last_error`; calling confirm() again is the retry path.
        On success the contact fields are cleared and only the confirmation
        text is kept.
        """
        self._require("confirm")
        if self.status == S.FAILED:
            self.retry()

        payload = self.payload()
        self._move(S.SUBMITTING, last_error=None)
        try:
            self._sink.deliver(payload)
        except Exception as e:
            self._logger.error(
                "Booking delivery failed",
                extra={"status": S.FAILED.value, "error": str(e)},
            )
            return self._move(S.FAILED, last_error=DELIVERY_FAILED_MESSAGE)

        # Contact details only travel in the delivered payload.
        draft = self._move(S.CONFIRMED, contact=ContactInfo(), confirmation=self._render_confirmation())
        self._logger.info("Booking confirmed", extra={"status": draft.status.value})
        self._notify_confirmed(draft, payload)
        return draft

    def cancel(self) -> BookingDraft:
        self._require("cancel")
        self._logger.info("Booking cancelled", extra={"status": self.status.value})
        self._draft = BookingDraft(status=S.CANCELLED)
        return self._draft

    def payload(self) -> BookingPayload:
        draft = self._draft
        if draft.selected_date is None or draft.selected_slot is None:
            raise BookingValidationError("time", "Please choose a date and time first.")
        summary = self._summary_provider() if self._summary_provider else ""
        return BookingPayload(
            name=draft.contact.name,
            email=draft.contact.email,
            phone=draft.contact.phone,
            date=draft.selected_date.isoformat(),
            time=draft.selected_slot.label,
            timestamp=datetime.now().astimezone().isoformat(),
            conversation_summary=summary,
        )

    def confirmation_message(self) -> str:
        if self._draft.status != S.CONFIRMED:
            return ""
        return self._draft.confirmation

    def _render_confirmation(self) -> str:
        draft = self._draft
        if draft.selected_date is None or draft.selected_slot is None:
            return ""
        when = draft.selected_date.strftime("%A, %B %d, %Y").replace(" 0", " ")
        return (
            "Booking Confirmed!\n"
            "\n"
            f"Your call has been scheduled for {when} at {draft.selected_slot.label}.\n"
            "\n"
            f"Our studio owner will call you at {draft.contact.phone} at the scheduled time "
            "to discuss dance classes for your child.\n"
            "\n"
            "If you need to reschedule or have any questions, please contact us directly."
        )

    def _validate_contact(self, name: str, email: str, phone: str) -> ContactInfo:
        name = " ".join((name or "").split())
        email = (email or "").strip()
        phone = (phone or "").strip()

        if not name:
            raise BookingValidationError("name", "Please enter your name.")
        if not email:
            raise BookingValidationError("email", "Please enter your email.")
        if not EMAIL_PATTERN.match(email):
            raise BookingValidationError("email", "Please enter a valid email address.")
        if not phone:
            raise BookingValidationError("phone", "Please enter your phone number.")
        if self._min_phone_digits and sum(c.isdigit() for c in phone) < self._min_phone_digits:
            raise BookingValidationError("phone", "Please enter a valid phone number.")
        return ContactInfo(name=name, email=email, phone=phone)

    def _notify_confirmed(self, draft: BookingDraft, payload: BookingPayload) -> None:
        if self._on_confirmed is None:
            return
        try:
            self._on_confirmed(draft, payload)
        except Exception as e:
            # Secondary notice only; the booking itself is already delivered.
            self._logger.warning("Confirmation follow-up failed", extra={"error": str(e)})

    def _require(self, action: str) -> None:
        if self.status not in TRANSITIONS[action]:
            raise InvalidTransitionError(self.status.value, action)

    def _move(self, status: BookingStatus, **changes: object) -> BookingDraft:
        self._draft = replace(self._draft, status=status, **changes)
        return self._draft
