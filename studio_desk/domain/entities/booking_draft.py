from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from studio_desk.domain.entities.time_slot import TimeSlot


class BookingStatus(str, Enum):
    COLLECTING_CONTACT = "collecting_contact"
    CHOOSING_SLOT = "choosing_slot"
    CONFIRMING_SLOT = "confirming_slot"
    SUBMITTING = "submitting"
    CONFIRMED = "confirmed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (BookingStatus.CONFIRMED, BookingStatus.CANCELLED)


@dataclass(frozen=True)
class ContactInfo:
    name: str = ""
    email: str = ""
    phone: str = ""


@dataclass(frozen=True)
class BookingDraft:
    contact: ContactInfo = ContactInfo()
    selected_date: date | None = None
    selected_slot: TimeSlot | None = None
    status: BookingStatus = BookingStatus.COLLECTING_CONTACT
    last_error: str | None = None  # set when a delivery attempt failed
    confirmation: str = ""  # rendered once delivery succeeds
