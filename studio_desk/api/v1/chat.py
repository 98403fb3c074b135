import logging

from fastapi import APIRouter, Depends, HTTPException

from studio_desk.api.v1.schemas import (
    BookingResponseSchema,
    ChatMessageRequestSchema,
    ChatReplySchema,
    CreateSessionResponseSchema,
    DanceClassSchema,
    PreferencesSchema,
)
from studio_desk.application.ports.session_store import SessionStorePort
from studio_desk.application.use_cases.chat_session import ChatSession, ChatSessionFactory
from studio_desk.wiring.dependencies import get_session_factory, get_session_store

router = APIRouter()
logger = logging.getLogger(__name__)


def load_session(session_id: str, store: SessionStorePort) -> ChatSession:
    session = store.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Unknown chat session")
    return session


@router.post("/chat/sessions", response_model=CreateSessionResponseSchema)
def create_session(
    factory: ChatSessionFactory = Depends(get_session_factory),
    store: SessionStorePort = Depends(get_session_store),
):
    session = factory.create()
    store.put(session)
    logger.info("Chat session created", extra={"session_id": session.session_id})
    return CreateSessionResponseSchema(session_id=session.session_id, message=session.history[-1]["content"])


@router.post("/chat/sessions/{session_id}/messages", response_model=ChatReplySchema)
def send_message(
    session_id: str,
    req: ChatMessageRequestSchema,
    store: SessionStorePort = Depends(get_session_store),
):
    session = load_session(session_id, store)
    with session.lock:
        turn = session.send(req.message)
        booking = (
            BookingResponseSchema.from_machine(session.booking)
            if turn.booking_started and session.booking is not None
            else None
        )

    return ChatReplySchema(
        message=turn.reply.message,
        action=turn.reply.action.value,
        preferences=PreferencesSchema.from_entity(session.preferences),
        classes=[DanceClassSchema.from_entity(c) for c in turn.classes],
        match_type=turn.match_type,
        booking=booking,
    )


@router.post("/chat/sessions/{session_id}/restart", response_model=ChatReplySchema)
def restart_search(
    session_id: str,
    store: SessionStorePort = Depends(get_session_store),
):
    session = load_session(session_id, store)
    with session.lock:
        reply = session.restart_search()
    return ChatReplySchema(
        message=reply.message,
        action=reply.action.value,
        preferences=PreferencesSchema.from_entity(session.preferences),
    )


@router.delete("/chat/sessions/{session_id}", status_code=204)
def end_session(
    session_id: str,
    store: SessionStorePort = Depends(get_session_store),
):
    session = load_session(session_id, store)
    with session.lock:
        session.save_log()
    store.delete(session_id)
    logger.info("Chat session ended", extra={"session_id": session_id})
