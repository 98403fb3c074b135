from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from studio_desk.domain.entities.preferences import ConversationPreferences


class AssistantAction(str, Enum):
    CONTINUE = "continue"
    GET_CLASSES = "get_classes"
    SCHEDULE_CALL = "schedule_call"

    @staticmethod
    def parse(value: str | None) -> "AssistantAction":
        normalized = (value or "").strip().lower()
        if normalized == "recommend":
            return AssistantAction.GET_CLASSES
        for action in AssistantAction:
            if action.value == normalized:
                return action
        return AssistantAction.CONTINUE


@dataclass(frozen=True)
class AssistantReply:
    message: str
    action: AssistantAction = AssistantAction.CONTINUE
    preferences: ConversationPreferences = ConversationPreferences()
    recommended_classes: tuple[str, ...] = ()
