"""Pydantic models for the tool catalog endpoint."""

from typing import Any

from pydantic import BaseModel, Field


class ToolInfo(BaseModel):
    name: str = Field(description="Tool name")
    description: str | None = Field(default=None, description="Tool description")
    parameters: dict[str, Any] = Field(description="JSON schema of the arguments")


class ToolListResponse(BaseModel):
    tools: list[ToolInfo]
