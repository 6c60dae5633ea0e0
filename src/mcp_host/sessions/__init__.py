"""Session management for mcp-host.

This package keeps in-memory chat sessions, each owning one conversation.
"""

from mcp_host.sessions.store import ChatSession, SessionStore

__all__ = [
    "ChatSession",
    "SessionStore",
]
