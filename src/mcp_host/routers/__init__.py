"""FastAPI routers for API endpoints.

This package contains all route handlers organized by resource type.
"""

from mcp_host.routers import chat, health, sessions, tools

__all__ = [
    "chat",
    "health",
    "sessions",
    "tools",
]
