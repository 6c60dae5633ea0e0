"""Pydantic models for chat API requests and responses.

This module defines the request and response schemas for the chat endpoints,
including the events emitted by the streaming endpoint.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    """Request body for POST /api/v1/chat and POST /api/v1/chat/stream."""

    message: str = Field(description="The user message to send.")
    session_id: str | None = Field(
        default=None,
        description="Session to continue. A new session is created if omitted.",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"message": "What time is it?"},
                {"message": "And in Berlin?", "session_id": "a1b2c3d4e5"},
            ]
        }
    )


class ExecutedToolCall(BaseModel):
    """A tool call that ran while producing the reply."""

    id: str = Field(description="Tool call id assigned by the completion service")
    name: str = Field(description="Tool name")
    is_error: bool = Field(default=False, description="Whether the tool reported an error")


class ChatResponse(BaseModel):
    """Response body for the non-streaming chat endpoint."""

    session_id: str = Field(description="Session identifier")
    reply: str = Field(description="The assistant's final answer")
    tool_calls_executed: list[ExecutedToolCall] = Field(
        default_factory=list,
        description="Tool calls executed while producing this reply, in order",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "session_id": "a1b2c3d4e5",
                "reply": "It is currently 2025-01-15T10:35:00Z.",
                "tool_calls_executed": [
                    {"id": "call_1", "name": "GetTime", "is_error": False}
                ],
            }
        }
    )


# --- SSE event payloads ---


class ToolCallInfo(BaseModel):
    id: str
    name: str
    arguments: Any = None


class ToolCallsEvent(BaseModel):
    """SSE event: the assistant requested a round of tool calls."""

    round: int
    tool_calls: list[ToolCallInfo]


class ToolResultEvent(BaseModel):
    """SSE event: a tool call was answered."""

    tool_call_id: str
    name: str
    content: str
    is_error: bool = False


class MessageCompleteEvent(BaseModel):
    """SSE event: the final answer is available."""

    reply: str


class DoneEvent(BaseModel):
    """SSE event: the stream is complete."""

    session_id: str


class ErrorEvent(BaseModel):
    """SSE event: the run failed."""

    code: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
