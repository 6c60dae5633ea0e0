"""Pydantic models for session API responses."""

from typing import Any

from pydantic import BaseModel, Field


class MessageModel(BaseModel):
    """A conversation message as exposed by the API."""

    role: str = Field(description="Message role: system, user, assistant or tool")
    content: str | None = Field(default=None, description="Message text")
    tool_calls: list[dict[str, Any]] | None = Field(
        default=None, description="Tool calls requested by an assistant message"
    )
    tool_call_id: str | None = Field(
        default=None, description="Tool call answered by a tool message"
    )
    name: str | None = Field(default=None, description="Tool name of a tool message")
    is_error: bool = Field(default=False, description="Tool reported an error")


class SessionSummary(BaseModel):
    session_id: str
    created_at: str
    updated_at: str
    message_count: int


class SessionListResponse(BaseModel):
    sessions: list[SessionSummary]


class SessionDetailResponse(SessionSummary):
    messages: list[MessageModel]
