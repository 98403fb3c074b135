from functools import lru_cache
import logging

from fastapi import Depends

from studio_desk.core.config import settings
from studio_desk.application.ports.class_catalog import ClassCatalogPort
from studio_desk.application.ports.conversation_log import ConversationLogPort
from studio_desk.application.ports.notification_sink import NotificationSinkPort
from studio_desk.application.ports.session_store import SessionStorePort
from studio_desk.application.use_cases.availability import SAMPLE_RULES, AvailabilityService
from studio_desk.application.use_cases.chat_session import ChatSessionFactory
from studio_desk.application.use_cases.class_finder import ClassFinder
from studio_desk.application.use_cases.conversation import ConversationEngine
from studio_desk.application.use_cases.conversation_log import ConversationLogQuery
from studio_desk.application.use_cases.slot_deriver import SlotDeriver
from studio_desk.infrastructure.llm.openrouter_llm import OpenRouterLLM
from studio_desk.infrastructure.notifications.mock_sink import MockNotificationSink
from studio_desk.infrastructure.notifications.smtp_sink import SmtpNotificationSink
from studio_desk.infrastructure.notifications.webhook_sink import WebhookNotificationSink
from studio_desk.infrastructure.sheets.availability_source import SheetsAvailabilitySource, StaticAvailabilitySource
from studio_desk.infrastructure.sheets.class_catalog import FallbackClassCatalog, SheetsClassCatalog, StaticClassCatalog
from studio_desk.infrastructure.sheets.google_sheets_client import GoogleSheetsClient
from studio_desk.infrastructure.store.json_log import JsonConversationLog
from studio_desk.infrastructure.store.memory_log import MemoryConversationLog
from studio_desk.infrastructure.store.session_store import MemorySessionStore


logger = logging.getLogger(__name__)


@lru_cache
def get_sheets_client() -> GoogleSheetsClient | None:
    if not settings.GOOGLE_SHEET_ID or not settings.GOOGLE_API_KEY:
        logger.info("Google Sheets not configured, using sample schedule")
        return None
    return GoogleSheetsClient()


@lru_cache
def get_conversation_engine() -> ConversationEngine | None:
    if settings.OPENROUTER_API_KEY and settings.OPENROUTER_API_KEY.strip():
        return ConversationEngine(llm=OpenRouterLLM(), max_retries=settings.LLM_MAX_RETRIES)
    logger.info("OPENROUTER_API_KEY missing, chat uses the guided intake flow")
    return None


@lru_cache
def get_availability_service() -> AvailabilityService:
    client = get_sheets_client()
    if client is None:
        source = StaticAvailabilitySource(SAMPLE_RULES)
    else:
        source = SheetsAvailabilitySource(client, sheet_name=settings.AVAILABILITY_SHEET_NAME)
    return AvailabilityService(
        source=source,
        deriver=SlotDeriver(increment_minutes=settings.SLOT_INCREMENT_MINUTES, dedupe=settings.DEDUPE_SLOTS),
        days_to_show=settings.CALENDAR_DAYS_TO_SHOW,
    )


@lru_cache
def get_class_catalog() -> ClassCatalogPort:
    client = get_sheets_client()
    if client is None:
        return StaticClassCatalog()
    return FallbackClassCatalog(SheetsClassCatalog(client, settings.CLASS_SHEET_NAMES))


@lru_cache
def get_class_finder() -> ClassFinder:
    return ClassFinder(get_class_catalog())


@lru_cache
def get_notification_sink() -> NotificationSinkPort:
    backend = settings.NOTIFICATION_BACKEND.lower()
    if backend == "smtp":
        return SmtpNotificationSink()
    if backend == "webhook":
        return WebhookNotificationSink()
    if settings.ENV.lower() not in {"dev", "local", "test"}:
        logger.warning("NOTIFICATION_BACKEND=mock outside dev, bookings are not delivered anywhere")
    return MockNotificationSink()


@lru_cache
def get_conversation_log() -> ConversationLogPort:
    if settings.ENV.lower() in {"dev", "local"}:
        return JsonConversationLog(data_dir=settings.CONVERSATION_LOG_DIR)
    return MemoryConversationLog()


@lru_cache
def get_session_store() -> SessionStorePort:
    return MemorySessionStore()


def get_conversation_log_query(
    log: ConversationLogPort = Depends(get_conversation_log),
) -> ConversationLogQuery:
    return ConversationLogQuery(log)


def get_session_factory(
    finder: ClassFinder = Depends(get_class_finder),
    availability: AvailabilityService = Depends(get_availability_service),
    sink: NotificationSinkPort = Depends(get_notification_sink),
    engine: ConversationEngine | None = Depends(get_conversation_engine),
    log: ConversationLogPort = Depends(get_conversation_log),
) -> ChatSessionFactory:
    return ChatSessionFactory(
        finder=finder,
        availability=availability,
        sink=sink,
        engine=engine,
        log=log,
        min_phone_digits=settings.PHONE_MIN_DIGITS,
    )
