"""Completion outcome variants and the client protocol."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from mcp_host.core.catalog import Catalog
from mcp_host.core.errors import MalformedMessage, MalformedResponse
from mcp_host.core.types import Conversation, ToolCallRequest, tool_call_from_wire


@dataclass(frozen=True)
class Final:
    """The completion service produced a natural-language answer."""

    text: str


@dataclass(frozen=True)
class ToolCallsRequested:
    """The completion service asked for one or more tool calls.

    Attributes:
        tool_calls: Requested calls in the order the service emitted them
        content: Text the assistant sent alongside the calls, if any
    """

    tool_calls: tuple[ToolCallRequest, ...]
    content: str | None = None


CompletionOutcome = Final | ToolCallsRequested


@runtime_checkable
class CompletionClient(Protocol):
    """Asks a completion service for the next assistant move.

    Implementations send the whole conversation and catalog on every call,
    raise TransportFailure when the request cannot be completed and
    MalformedResponse when the reply cannot be parsed. They never retry.
    """

    async def complete(
        self, conversation: Conversation, catalog: Catalog
    ) -> CompletionOutcome: ...

    async def close(self) -> None: ...


def outcome_from_message(message: Mapping[str, Any]) -> CompletionOutcome:
    """Turn an assistant reply message into a completion outcome.

    Args:
        message: Reply message dict with role, content and optional tool_calls

    Returns:
        ToolCallsRequested if the reply carries tool calls, Final otherwise

    Raises:
        MalformedResponse: If a tool call is missing its id or function name
    """
    raw_calls = message.get("tool_calls") or []
    content = message.get("content")

    if raw_calls:
        try:
            calls = tuple(tool_call_from_wire(call) for call in raw_calls)
        except (MalformedMessage, AttributeError) as e:
            raise MalformedResponse(f"Invalid tool call in completion reply: {e}")
        return ToolCallsRequested(tool_calls=calls, content=content or None)

    return Final(text=content or "")
