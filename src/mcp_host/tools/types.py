"""Type definitions shared by tool providers.

This module contains the descriptor and result dataclasses exchanged with a
tool provider, and the ToolProvider protocol the orchestration core consumes.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class ToolDescriptor:
    """A tool offered by a provider.

    Attributes:
        name: Tool name, unique within a catalog
        description: Free-text description shown to the model
        input_schema: JSON schema of accepted arguments (None if the provider
            did not declare one)
    """

    name: str
    description: str | None = None
    input_schema: dict[str, Any] | None = None


@dataclass(frozen=True)
class ContentBlock:
    """One block of tool output. Non-text blocks carry text=None."""

    text: str | None = None
    type: str = "text"


@dataclass(frozen=True)
class ToolResult:
    """Outcome of a tool call as reported by the provider."""

    is_error: bool = False
    content: tuple[ContentBlock, ...] = field(default_factory=tuple)

    @classmethod
    def text(cls, text: str, is_error: bool = False) -> "ToolResult":
        return cls(is_error=is_error, content=(ContentBlock(text=text),))


@runtime_checkable
class ToolProvider(Protocol):
    """Discovers and executes tools.

    Implementations raise TransportFailure when the provider cannot be
    reached and ToolExecutionFailure when a call cannot be executed.
    """

    async def connect(self) -> None: ...

    async def list_tools(self) -> list[ToolDescriptor]: ...

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> ToolResult: ...

    async def close(self) -> None: ...
