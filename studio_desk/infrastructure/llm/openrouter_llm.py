from __future__ import annotations

import logging

from openai import OpenAI

from studio_desk.application.exceptions import LLMContractError, LLMUpstreamError
from studio_desk.application.ports.llm import LLMPort
from studio_desk.core.config import settings


class OpenRouterLLM(LLMPort):
    """
    OpenAI-compatible chat-completions adapter pointed at OpenRouter.

    Contract guarantees:
    - complete_json returns non-empty assistant text
    - Raises:
        LLMUpstreamError: networking/provider failures
        LLMContractError: the provider answered without any content
    """

    def __init__(self, client: OpenAI | None = None) -> None:
        if client is None and not settings.OPENROUTER_API_KEY:
            raise ValueError("OPENROUTER_API_KEY is required for the OpenRouter LLM")
        self.client = client or OpenAI(
            base_url=settings.LLM_BASE_URL,
            api_key=settings.OPENROUTER_API_KEY,
        )
        self._logger = logging.getLogger(__name__)

    def complete_json(self, messages: list[dict[str, str]]) -> str:
        headers = {"X-Title": settings.LLM_APP_TITLE}
        if settings.LLM_REFERER:
            headers["HTTP-Referer"] = settings.LLM_REFERER

        try:
            resp = self.client.chat.completions.create(
                model=settings.LLM_MODEL,
                messages=messages,
                temperature=settings.LLM_TEMPERATURE,
                max_tokens=settings.LLM_MAX_TOKENS,
                response_format={"type": "json_object"},
                extra_headers=headers,
            )
        except Exception as e:
            raise LLMUpstreamError(f"OpenRouter API error: {e}") from e

        content = (resp.choices[0].message.content or "").strip() if resp.choices else ""
        if not content:
            raise LLMContractError("LLM returned empty response text.")

        self._logger.debug("LLM reply received", extra={"action": settings.LLM_MODEL})
        return content
