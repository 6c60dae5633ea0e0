"""Orchestration core: message model, catalog, tool executor and loop."""

from mcp_host.core.catalog import Catalog, CatalogEntry, build_catalog
from mcp_host.core.errors import (
    InvalidUserInput,
    LoopExceeded,
    MalformedMessage,
    MalformedResponse,
    McpHostError,
    ToolExecutionFailure,
    TransportFailure,
    validate_user_message,
)
from mcp_host.core.executor import ToolExecutor
from mcp_host.core.types import (
    Conversation,
    Message,
    Role,
    ToolCallRequest,
    is_final,
    message_from_wire,
    message_to_wire,
    requires_tool_round,
)

__all__ = [
    "Catalog",
    "CatalogEntry",
    "Conversation",
    "InvalidUserInput",
    "LoopExceeded",
    "MalformedMessage",
    "MalformedResponse",
    "McpHostError",
    "Message",
    "Role",
    "ToolCallRequest",
    "ToolExecutionFailure",
    "ToolExecutor",
    "TransportFailure",
    "build_catalog",
    "is_final",
    "message_from_wire",
    "message_to_wire",
    "requires_tool_round",
    "validate_user_message",
]
