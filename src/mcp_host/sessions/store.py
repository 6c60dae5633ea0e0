"""In-memory store of chat sessions.

Each session owns one Conversation. Sessions live for the life of the
process only; nothing is written to disk.
"""

import asyncio
import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from mcp_host.core.types import Conversation

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class ChatSession:
    """A conversation plus the lock that keeps its loop runs sequential."""

    session_id: str
    conversation: Conversation
    created_at: str = field(default_factory=_now)
    updated_at: str = field(default_factory=_now)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)

    def touch(self) -> None:
        self.updated_at = _now()


class SessionStore:
    """Keeps chat sessions keyed by session id.

    Attributes:
        conversation_factory: Creates the seeded conversation of a new session
    """

    def __init__(self, conversation_factory: Callable[[], Conversation]) -> None:
        self.conversation_factory = conversation_factory
        self._sessions: dict[str, ChatSession] = {}

    @staticmethod
    def generate_session_id() -> str:
        """Generate a new 10-character hex session id."""
        return uuid.uuid4().hex[:10]

    def create(self) -> ChatSession:
        session_id = self.generate_session_id()
        while session_id in self._sessions:
            session_id = self.generate_session_id()

        session = ChatSession(
            session_id=session_id,
            conversation=self.conversation_factory(),
        )
        self._sessions[session_id] = session
        logger.info(f"Created session {session_id}")
        return session

    def get(self, session_id: str) -> ChatSession | None:
        return self._sessions.get(session_id)

    def list(self) -> list[ChatSession]:
        """List sessions, newest activity first."""
        return sorted(self._sessions.values(), key=lambda s: s.updated_at, reverse=True)

    def delete(self, session_id: str) -> bool:
        """Delete a session. Returns False if it did not exist."""
        if self._sessions.pop(session_id, None) is None:
            return False
        logger.info(f"Deleted session {session_id}")
        return True

    def __len__(self) -> int:
        return len(self._sessions)
