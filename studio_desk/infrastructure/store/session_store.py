from __future__ import annotations

import threading
from collections import OrderedDict

from studio_desk.application.ports.session_store import SessionStorePort
from studio_desk.application.use_cases.chat_session import ChatSession


class MemorySessionStore(SessionStorePort):
    """Process-local chat sessions, oldest evicted once `max_sessions` is reached."""

    def __init__(self, max_sessions: int = 1000) -> None:
        self._sessions: OrderedDict[str, ChatSession] = OrderedDict()
        self._max_sessions = max_sessions
        self._lock = threading.Lock()

    def get(self, session_id: str) -> ChatSession | None:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                self._sessions.move_to_end(session_id)
            return session

    def put(self, session: ChatSession) -> None:
        with self._lock:
            self._sessions[session.session_id] = session
            self._sessions.move_to_end(session.session_id)
            while len(self._sessions) > self._max_sessions:
                self._sessions.popitem(last=False)

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)
