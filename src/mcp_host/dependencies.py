"""Dependency injection providers for FastAPI endpoints.

This module provides FastAPI dependency functions that are used across
multiple routers to inject common dependencies like settings and the
tool host.
"""

from functools import lru_cache

from fastapi import HTTPException, Request

from mcp_host.config import McpHostSettings
from mcp_host.host import ToolHost
from mcp_host.sessions import SessionStore


@lru_cache
def get_settings() -> McpHostSettings:
    """Get the application settings instance.

    This function is cached so that the same settings instance is reused
    across all requests. Settings are loaded from environment variables
    with the MCP_HOST_ prefix.

    Returns:
        McpHostSettings: The application configuration settings.
    """
    return McpHostSettings()


def get_tool_host(request: Request) -> ToolHost:
    """Get the tool host from app state.

    Raises:
        HTTPException: If the tool host failed to start (503 Service Unavailable).
    """
    host = getattr(request.app.state, "tool_host", None)
    if host is None:
        raise HTTPException(
            status_code=503,
            detail={
                "error": {
                    "code": "tool_host_unavailable",
                    "message": "Tool provider is not connected",
                    "details": {},
                }
            },
        )
    return host


def get_session_store(request: Request) -> SessionStore:
    """Get the session store from app state.

    The store only exists once the tool host started, since new sessions are
    seeded by the host.

    Raises:
        HTTPException: If the tool host failed to start (503 Service Unavailable).
    """
    get_tool_host(request)
    return request.app.state.session_store
