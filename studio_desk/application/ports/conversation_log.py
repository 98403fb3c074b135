from abc import ABC, abstractmethod

from studio_desk.domain.entities.conversation_record import ConversationRecord


class ConversationLogPort(ABC):
    @abstractmethod
    def save(self, record: ConversationRecord) -> ConversationRecord:
        """
        Upsert a conversation by conversation_id.
        Keeps the original `timestamp` of an existing record and refreshes `updated_at`.
        """
        raise NotImplementedError

    @abstractmethod
    def get(self, conversation_id: str) -> ConversationRecord | None:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> list[ConversationRecord]:
        raise NotImplementedError
