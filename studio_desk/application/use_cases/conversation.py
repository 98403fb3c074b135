from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from studio_desk.application.exceptions import LLMContractError, LLMUpstreamError
from studio_desk.application.ports.llm import LLMPort
from studio_desk.application.utils.prompts import build_system_prompt
from studio_desk.domain.entities.assistant_reply import AssistantAction, AssistantReply
from studio_desk.domain.entities.dance_class import DanceClass
from studio_desk.domain.entities.preferences import ConversationPreferences

HISTORY_WINDOW = 10
DEFAULT_MAX_RETRIES = 2

FALLBACK_MESSAGE = (
    "I'm experiencing some technical difficulties right now. Please try again in a moment, "
    "or feel free to schedule a callback for immediate assistance."
)


class ConversationEngine:
    """
    LLM-driven dialogue: turns the next user utterance into an AssistantReply.

    Provider failures are retried `max_retries` times with exponential backoff
    (2s, 4s, ...). When every attempt fails the reply is a fixed apology with
    action schedule_call so the user can still reach the studio.
    """

    def __init__(
        self,
        llm: LLMPort,
        max_retries: int = DEFAULT_MAX_RETRIES,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._llm = llm
        self._max_retries = max_retries
        self._sleep = sleep
        self._logger = logging.getLogger(__name__)

    def preferences_from_utterance(
        self,
        history: list[dict[str, str]],
        new_message: str,
        preferences: ConversationPreferences | None = None,
        classes: list[DanceClass] | None = None,
    ) -> AssistantReply:
        current = preferences or ConversationPreferences()
        messages = self.build_messages(history, new_message, current, classes or [])

        retrying = Retrying(
            retry=retry_if_exception_type((LLMUpstreamError, LLMContractError)),
            stop=stop_after_attempt(self._max_retries + 1),
            wait=wait_exponential(multiplier=2),
            sleep=self._sleep,
            before_sleep=self._log_retry,
            reraise=True,
        )
        try:
            raw = retrying(self._llm.complete_json, messages)
        except (LLMUpstreamError, LLMContractError) as e:
            self._logger.error("LLM unavailable, using fallback reply", extra={"error": str(e)})
            return AssistantReply(
                message=FALLBACK_MESSAGE,
                action=AssistantAction.SCHEDULE_CALL,
                preferences=current,
            )

        return parse_reply(raw, current)

    def build_messages(
        self,
        history: list[dict[str, str]],
        new_message: str,
        preferences: ConversationPreferences,
        classes: list[DanceClass],
    ) -> list[dict[str, str]]:
        recent = [
            {"role": m["role"], "content": m.get("content", "")}
            for m in history[-HISTORY_WINDOW:]
            if m.get("role") in ("user", "assistant")
        ]
        return [
            {"role": "system", "content": build_system_prompt(classes, preferences)},
            *recent,
            {"role": "user", "content": new_message},
        ]

    def _log_retry(self, retry_state: Any) -> None:
        self._logger.warning(
            "LLM call failed, retrying",
            extra={
                "reason": str(retry_state.outcome.exception()) if retry_state.outcome else "",
                "action": f"attempt {retry_state.attempt_number}",
            },
        )


def parse_reply(raw: str, current: ConversationPreferences) -> AssistantReply:
    """Decode the model's JSON. Non-JSON text is shown as-is with action continue."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        return AssistantReply(message=raw, action=AssistantAction.CONTINUE, preferences=current)
    if not isinstance(data, dict):
        return AssistantReply(message=raw, action=AssistantAction.CONTINUE, preferences=current)

    message = str(data.get("message") or "").strip() or raw
    recommended = data.get("recommendedClasses") or []
    if not isinstance(recommended, list):
        recommended = []

    prefs_raw = data.get("preferences")
    update = ConversationPreferences.from_payload(prefs_raw if isinstance(prefs_raw, dict) else None)

    return AssistantReply(
        message=message,
        action=AssistantAction.parse(data.get("action")),
        preferences=current.merge(update),
        recommended_classes=tuple(str(name) for name in recommended if str(name).strip()),
    )


def extract_recommended_classes(reply: AssistantReply, classes: list[DanceClass]) -> list[DanceClass]:
    """Resolve recommended class names against the catalog (case-insensitive substring)."""
    matched: list[DanceClass] = []
    for wanted in reply.recommended_classes:
        needle = wanted.lower()
        for cls in classes:
            if cls.name and needle in cls.name.lower():
                if cls not in matched:
                    matched.append(cls)
                break
    return matched
