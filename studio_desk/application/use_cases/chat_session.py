from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Callable

from studio_desk.application.ports.conversation_log import ConversationLogPort
from studio_desk.application.ports.notification_sink import NotificationSinkPort
from studio_desk.application.use_cases.availability import AvailabilityService
from studio_desk.application.use_cases.booking import BookingStateMachine
from studio_desk.application.use_cases.class_finder import ClassFinder
from studio_desk.application.use_cases.conversation import ConversationEngine, extract_recommended_classes
from studio_desk.application.use_cases.guided_intake import WELCOME_MESSAGE, GuidedIntakeFlow
from studio_desk.application.utils.booking_email import summarize_conversation
from studio_desk.domain.entities.assistant_reply import AssistantAction, AssistantReply
from studio_desk.domain.entities.booking_draft import BookingDraft
from studio_desk.domain.entities.booking_payload import BookingPayload
from studio_desk.domain.entities.conversation_record import ConversationRecord
from studio_desk.domain.entities.dance_class import DanceClass
from studio_desk.domain.entities.preferences import ConversationPreferences

BookingFactory = Callable[["ChatSession"], BookingStateMachine]


@dataclass(frozen=True)
class ChatTurn:
    reply: AssistantReply
    classes: tuple[DanceClass, ...] = ()
    match_type: str | None = None
    booking_started: bool = False


@dataclass
class ChatSession:
    """
    Everything one visitor's chat owns: transcript, extracted preferences and
    at most one booking in progress. Nothing here is shared between sessions.
    """

    session_id: str
    finder: ClassFinder
    booking_factory: BookingFactory
    engine: ConversationEngine | None = None
    log: ConversationLogPort | None = None
    history: list[dict[str, str]] = field(default_factory=list)
    preferences: ConversationPreferences = ConversationPreferences()
    booking: BookingStateMachine | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._intake = GuidedIntakeFlow(self.finder)
        self._logger = logging.getLogger(__name__)

    def welcome(self) -> str:
        if not self.history:
            self.history.append({"role": "assistant", "content": WELCOME_MESSAGE})
        return WELCOME_MESSAGE

    def send(self, text: str) -> ChatTurn:
        text = (text or "").strip()
        prior = list(self.history)
        self.history.append({"role": "user", "content": text})

        if self.engine is not None:
            turn = self._llm_turn(self.engine, prior, text)
        else:
            turn = self._scripted_turn(text)

        self.preferences = self.preferences.merge(turn.reply.preferences)
        self.history.append({"role": "assistant", "content": turn.reply.message})

        if turn.reply.action == AssistantAction.SCHEDULE_CALL:
            self.start_booking()
            turn = ChatTurn(reply=turn.reply, classes=turn.classes, match_type=turn.match_type, booking_started=True)

        self.save_log()
        return turn

    def restart_search(self) -> AssistantReply:
        reply = self._intake.restart()
        self.preferences = ConversationPreferences()
        self.history.append({"role": "assistant", "content": reply.message})
        return reply

    def start_booking(self) -> BookingStateMachine:
        # A new booking replaces a finished or abandoned one.
        if self.booking is None or self.booking.status.is_terminal:
            self.booking = self.booking_factory(self)
            self._logger.info("Booking started", extra={"session_id": self.session_id})
        return self.booking

    def discard_booking(self) -> None:
        self.booking = None

    def summary(self) -> str:
        return summarize_conversation(self.history)

    def record_confirmation(self, draft: BookingDraft, payload: BookingPayload) -> None:
        """Post the human-readable confirmation into the chat transcript."""
        if self.booking is None:
            return
        message = self.booking.confirmation_message()
        if message:
            self.history.append({"role": "assistant", "content": message})
        self.save_log()

    def save_log(self) -> None:
        if self.log is None:
            return
        try:
            self.log.save(
                ConversationRecord(
                    conversation_id=self.session_id,
                    messages=tuple(dict(m) for m in self.history),
                    user_preferences=self.preferences.to_dict(),
                    timestamp=self.created_at,
                    updated_at=datetime.now(timezone.utc),
                )
            )
        except Exception as e:
            self._logger.error("Failed to save conversation", extra={"session_id": self.session_id, "error": str(e)})

    def _llm_turn(self, engine: ConversationEngine, prior: list[dict[str, str]], text: str) -> ChatTurn:
        classes = self.finder.classes()
        reply = engine.preferences_from_utterance(prior, text, self.preferences, classes)
        matched = extract_recommended_classes(reply, classes)
        return ChatTurn(reply=reply, classes=tuple(matched), match_type="direct" if matched else None)

    def _scripted_turn(self, text: str) -> ChatTurn:
        turn = self._intake.handle(text)
        if turn.recommendation is None:
            return ChatTurn(reply=turn.reply)
        return ChatTurn(
            reply=turn.reply,
            classes=turn.recommendation.classes,
            match_type=turn.recommendation.match_type,
        )


class ChatSessionFactory:
    """Builds sessions that share the catalog, availability and sink but nothing else."""

    def __init__(
        self,
        finder: ClassFinder,
        availability: AvailabilityService,
        sink: NotificationSinkPort,
        engine: ConversationEngine | None = None,
        log: ConversationLogPort | None = None,
        min_phone_digits: int = 0,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._finder = finder
        self._availability = availability
        self._sink = sink
        self._engine = engine
        self._log = log
        self._min_phone_digits = min_phone_digits
        self._today = today

    def create(self) -> ChatSession:
        session = ChatSession(
            session_id=uuid.uuid4().hex,
            finder=self._finder,
            booking_factory=self._booking_for,
            engine=self._engine,
            log=self._log,
        )
        session.welcome()
        return session

    def _booking_for(self, session: ChatSession) -> BookingStateMachine:
        # Each booking pins the calendar current at start; a later reload does not move it.
        return BookingStateMachine(
            calendar=self._availability.calendar,
            sink=self._sink,
            today=self._today,
            summary_provider=session.summary,
            on_confirmed=session.record_confirmation,
            min_phone_digits=self._min_phone_digits,
        )
