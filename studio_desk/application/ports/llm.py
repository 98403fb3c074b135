from abc import ABC, abstractmethod


class LLMPort(ABC):
    @abstractmethod
    def complete_json(self, messages: list[dict[str, str]]) -> str:
        """
        Send a chat-completion request and return the raw assistant text.

        Requirements:
        - `messages` is the full ordered list (system, history, new user message)
        - The provider should be asked for a JSON object, but the returned text
          is not guaranteed to parse; callers handle that

        Raises:
            LLMUpstreamError: networking/provider failures (retryable)
            LLMContractError: provider answered but with no usable content
        """
        raise NotImplementedError
