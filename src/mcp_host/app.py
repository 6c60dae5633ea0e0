"""FastAPI application factory and lifespan management.

This module contains the create_app() factory function that creates and configures
the FastAPI application instance, including lifespan management for startup/shutdown
and router registration.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mcp_host import __version__
from mcp_host.completion import build_completion_client
from mcp_host.config import McpHostSettings
from mcp_host.core.errors import McpHostError
from mcp_host.host import ToolHost
from mcp_host.routers import chat, health, sessions, tools
from mcp_host.sessions import SessionStore
from mcp_host.tools import build_tool_provider

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for FastAPI application.

    The completion client, tool provider and catalog are created once at
    startup and stored in app.state for reuse across all requests. If the tool
    provider cannot be reached the app still starts, and chat endpoints
    answer 503.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control is yielded while the app is running.
    """
    settings: McpHostSettings = app.state.settings
    app.state.tool_host = None

    try:
        tool_provider = build_tool_provider(settings)
        completion_client = build_completion_client(settings)
        tool_host = await ToolHost.start(
            completion_client=completion_client,
            tool_provider=tool_provider,
            max_tool_rounds=settings.max_tool_rounds,
            system_prompt=settings.system_prompt,
        )
    except (McpHostError, ValueError) as e:
        logger.error(f"Tool host failed to start: {e}")
    else:
        app.state.tool_host = tool_host
        app.state.session_store = SessionStore(tool_host.new_conversation)
        logger.info(
            f"Tool host ready with {len(tool_host.catalog)} tools "
            f"({settings.completion_backend} completion backend)"
        )

    yield

    # Shutdown: Clean up resources
    if app.state.tool_host is not None:
        await app.state.tool_host.close()


def create_app(settings: McpHostSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional McpHostSettings instance. If not provided,
                  settings will be loaded from environment variables.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        from mcp_host.dependencies import get_settings

        settings = get_settings()

    app = FastAPI(
        title="mcp-host",
        description="Chat host that lets a completion service call MCP tools",
        version=__version__,
        lifespan=lifespan,
    )

    # Store settings in app.state for lifespan access
    app.state.settings = settings

    # Note: FastAPI's type hints for add_middleware are overly strict
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(chat.router)
    app.include_router(sessions.router)
    app.include_router(tools.router)

    return app
