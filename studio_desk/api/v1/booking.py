import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import APIRouter, Depends, HTTPException

from studio_desk.api.v1.chat import load_session
from studio_desk.api.v1.schemas import BookingResponseSchema, ContactRequestSchema, SelectionRequestSchema
from studio_desk.application.exceptions import BookingValidationError, InvalidTransitionError
from studio_desk.application.ports.session_store import SessionStorePort
from studio_desk.application.use_cases.booking import BookingStateMachine
from studio_desk.wiring.dependencies import get_session_store

router = APIRouter(prefix="/chat/sessions/{session_id}/booking")
logger = logging.getLogger(__name__)


@contextmanager
def _booking(session_id: str, store: SessionStorePort) -> Iterator[BookingStateMachine]:
    session = load_session(session_id, store)
    with session.lock:
        if session.booking is None:
            raise HTTPException(status_code=409, detail="No booking in progress")
        try:
            yield session.booking
        except BookingValidationError as e:
            raise HTTPException(status_code=422, detail={"field": e.field, "message": e.message})
        except InvalidTransitionError as e:
            raise HTTPException(status_code=409, detail=str(e))


@router.post("", response_model=BookingResponseSchema)
def start_booking(session_id: str, store: SessionStorePort = Depends(get_session_store)):
    session = load_session(session_id, store)
    with session.lock:
        machine = session.start_booking()
        return BookingResponseSchema.from_machine(machine)


@router.get("", response_model=BookingResponseSchema)
def get_booking(session_id: str, store: SessionStorePort = Depends(get_session_store)):
    with _booking(session_id, store) as machine:
        return BookingResponseSchema.from_machine(machine)


@router.post("/contact", response_model=BookingResponseSchema)
def submit_contact(
    session_id: str,
    req: ContactRequestSchema,
    store: SessionStorePort = Depends(get_session_store),
):
    with _booking(session_id, store) as machine:
        machine.submit_contact(req.name, req.email, req.phone)
        return BookingResponseSchema.from_machine(machine)


@router.post("/selection", response_model=BookingResponseSchema)
def select(
    session_id: str,
    req: SelectionRequestSchema,
    store: SessionStorePort = Depends(get_session_store),
):
    with _booking(session_id, store) as machine:
        draft = machine.draft
        if draft.selected_date != req.date:
            machine.select_date(req.date)
        if req.time:
            machine.select_slot(req.time)
        return BookingResponseSchema.from_machine(machine)


@router.post("/confirm", response_model=BookingResponseSchema)
def confirm(session_id: str, store: SessionStorePort = Depends(get_session_store)):
    with _booking(session_id, store) as machine:
        draft = machine.confirm()
        logger.info("Booking confirm requested", extra={"session_id": session_id, "status": draft.status.value})
        return BookingResponseSchema.from_machine(machine)


@router.post("/change", response_model=BookingResponseSchema)
def change(session_id: str, store: SessionStorePort = Depends(get_session_store)):
    with _booking(session_id, store) as machine:
        machine.change()
        return BookingResponseSchema.from_machine(machine)


@router.post("/cancel", response_model=BookingResponseSchema)
def cancel(session_id: str, store: SessionStorePort = Depends(get_session_store)):
    with _booking(session_id, store) as machine:
        machine.cancel()
        return BookingResponseSchema.from_machine(machine)
