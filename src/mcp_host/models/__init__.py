"""Pydantic models for API request and response schemas.

This package contains all Pydantic models used for validating and
serializing API requests and responses across all endpoints.
"""

from mcp_host.models.chat import ChatRequest, ChatResponse, ExecutedToolCall
from mcp_host.models.health import HealthResponse
from mcp_host.models.sessions import (
    MessageModel,
    SessionDetailResponse,
    SessionListResponse,
    SessionSummary,
)
from mcp_host.models.tools import ToolInfo, ToolListResponse

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ExecutedToolCall",
    "HealthResponse",
    "MessageModel",
    "SessionDetailResponse",
    "SessionListResponse",
    "SessionSummary",
    "ToolInfo",
    "ToolListResponse",
]
