from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from studio_desk.application.use_cases.chat_session import ChatSession


class SessionStorePort(ABC):
    @abstractmethod
    def get(self, session_id: str) -> "ChatSession | None":
        raise NotImplementedError

    @abstractmethod
    def put(self, session: "ChatSession") -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, session_id: str) -> None:
        raise NotImplementedError
