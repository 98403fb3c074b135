from __future__ import annotations

import json

from studio_desk.application.ports.llm import LLMPort
from studio_desk.application.utils.class_rules import extract_age, extract_dance_styles


class MockLLM(LLMPort):
    """
    Offline stand-in for the chat model.

    With `responses` it replays them in order (an Exception instance is raised
    instead of returned). Without, it answers from simple keyword rules.
    """

    def __init__(self, responses: list[str | Exception] | None = None) -> None:
        self._responses = list(responses or [])
        self.calls: list[list[dict[str, str]]] = []

    def complete_json(self, messages: list[dict[str, str]]) -> str:
        self.calls.append(messages)
        if self._responses:
            item = self._responses.pop(0)
            if isinstance(item, Exception):
                raise item
            return item
        return json.dumps(self._keyword_reply(messages[-1]["content"] if messages else ""))

    @staticmethod
    def _keyword_reply(text: str) -> dict:
        normalized = text.lower()
        age = extract_age(text)
        styles = extract_dance_styles(text)

        if any(word in normalized for word in ("yes", "call me", "callback", "schedule")):
            return {
                "message": "Great! Please pick a time that works for you.",
                "action": "schedule_call",
                "preferences": {},
                "recommendedClasses": [],
            }
        if age is not None or styles:
            return {
                "message": "Thanks! Here are some classes that could be a good fit. Would you like a callback?",
                "action": "get_classes",
                "preferences": {"age": age, "style": styles[0] if styles else None},
                "recommendedClasses": [],
            }
        return {
            "message": "Happy to help! How old is your dancer?",
            "action": "continue",
            "preferences": {},
            "recommendedClasses": [],
        }
