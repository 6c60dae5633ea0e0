"""Message model for tool-calling conversations.

This module defines the typed representation of one conversation turn, the
tool-call requests an assistant turn can carry, and the append-only
Conversation that the orchestration loop owns while it runs. It also holds
the codec between messages and the chat-completions wire shape.
"""

import json
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from mcp_host.core.errors import MalformedMessage


class Role(str, Enum):
    """Closed set of conversation roles."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass(frozen=True)
class ToolCallRequest:
    """A completion service's request to run one tool.

    Attributes:
        id: Correlation token, unique within the conversation
        name: Name of the tool to invoke
        raw_arguments: Argument payload as JSON text. A JSON text is kept
            exactly as the service produced it; an already-decoded mapping
            (as sent by Ollama) is stored as its JSON encoding and None as ""
    """

    id: str
    name: str
    raw_arguments: str | Mapping[str, Any] | None = ""

    def __post_init__(self) -> None:
        if self.raw_arguments is None:
            object.__setattr__(self, "raw_arguments", "")
        elif isinstance(self.raw_arguments, Mapping):
            object.__setattr__(self, "raw_arguments", json.dumps(dict(self.raw_arguments)))
        elif not isinstance(self.raw_arguments, str):
            raise MalformedMessage(
                f"Tool call {self.id} arguments must be JSON text or an object"
            )


@dataclass(frozen=True)
class Message:
    """One conversation entry.

    Use the role-specific constructors (Message.user, Message.tool, ...)
    rather than building instances by hand.
    """

    role: Role
    content: str | None = None
    tool_calls: tuple[ToolCallRequest, ...] = ()
    tool_call_id: str | None = None
    name: str | None = None
    is_error: bool = False

    def __post_init__(self) -> None:
        role = Role(self.role)
        object.__setattr__(self, "role", role)
        object.__setattr__(self, "tool_calls", tuple(self.tool_calls))

        if role is Role.TOOL and not self.tool_call_id:
            raise MalformedMessage("Tool message requires a tool_call_id")
        if role is not Role.TOOL and self.tool_call_id is not None:
            raise MalformedMessage(f"{role.value} message cannot carry a tool_call_id")
        if role is not Role.ASSISTANT and self.tool_calls:
            raise MalformedMessage(f"{role.value} message cannot carry tool calls")
        if role is not Role.ASSISTANT and self.content is None:
            raise MalformedMessage(f"{role.value} message requires content")

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role=Role.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(
        cls,
        content: str | None = None,
        tool_calls: Iterable[ToolCallRequest] = (),
    ) -> "Message":
        return cls(role=Role.ASSISTANT, content=content, tool_calls=tuple(tool_calls))

    @classmethod
    def tool(
        cls,
        tool_call_id: str,
        content: str,
        name: str | None = None,
        is_error: bool = False,
    ) -> "Message":
        return cls(
            role=Role.TOOL,
            content=content,
            tool_call_id=tool_call_id,
            name=name,
            is_error=is_error,
        )


def is_final(message: Message) -> bool:
    """Return True for an assistant message that requests no tools."""
    return message.role is Role.ASSISTANT and not message.tool_calls


def requires_tool_round(message: Message) -> bool:
    """Return True for an assistant message that requests at least one tool."""
    return message.role is Role.ASSISTANT and bool(message.tool_calls)


def message_to_wire(message: Message) -> dict[str, Any]:
    """Encode a message in the chat-completions request shape.

    Args:
        message: The message to encode

    Returns:
        Message dict, e.g. {"role": "tool", "tool_call_id": "...", "content": "..."}
    """
    wire: dict[str, Any] = {"role": message.role.value}

    if message.content is not None:
        wire["content"] = message.content

    if message.tool_calls:
        wire["tool_calls"] = [
            {
                "id": call.id,
                "type": "function",
                "function": {
                    "name": call.name,
                    "arguments": call.raw_arguments,
                },
            }
            for call in message.tool_calls
        ]

    if message.tool_call_id is not None:
        wire["tool_call_id"] = message.tool_call_id

    return wire


def tool_call_from_wire(data: Mapping[str, Any]) -> ToolCallRequest:
    """Decode one wire tool call.

    Raises:
        MalformedMessage: If the id, function block or function name is missing
    """
    function = data.get("function")
    call_id = data.get("id")
    if not call_id or not isinstance(function, Mapping) or not function.get("name"):
        raise MalformedMessage(f"Tool call is missing id or function name: {data!r}")
    return ToolCallRequest(
        id=str(call_id),
        name=str(function["name"]),
        raw_arguments=function.get("arguments"),
    )


def message_from_wire(data: Mapping[str, Any]) -> Message:
    """Decode a chat-completions message dict.

    Raises:
        MalformedMessage: If the role is unknown or the shape is invalid
    """
    role = data.get("role")
    try:
        role = Role(role)
    except ValueError:
        raise MalformedMessage(f"Unknown message role: {role}")

    tool_calls = tuple(tool_call_from_wire(call) for call in data.get("tool_calls") or ())

    return Message(
        role=role,
        content=data.get("content"),
        tool_calls=tool_calls,
        tool_call_id=data.get("tool_call_id"),
        name=data.get("name") if role is Role.TOOL else None,
    )


@dataclass
class Conversation:
    """Append-only message history for one logical exchange.

    The conversation tracks which tool calls are still unanswered and refuses
    appends that would break the request/result correlation. It is owned by
    one loop run at a time and must not be shared across concurrent runs.
    """

    _messages: list[Message] = field(default_factory=list)
    _pending: dict[str, ToolCallRequest] = field(default_factory=dict)
    _call_ids: set[str] = field(default_factory=set)

    @classmethod
    def from_messages(cls, messages: Iterable[Message]) -> "Conversation":
        conversation = cls()
        for message in messages:
            conversation.append(message)
        return conversation

    @classmethod
    def with_system_prompt(cls, prompt: str | None) -> "Conversation":
        """Create a conversation seeded with a system message (if prompt is set)."""
        conversation = cls()
        if prompt:
            conversation.append(Message.system(prompt))
        return conversation

    def append(self, message: Message) -> None:
        """Append a message, enforcing tool-call correlation.

        Raises:
            MalformedMessage: If a tool message answers an unknown or already
                answered call, if a non-tool message is appended while calls
                are pending, or if a tool-call id is reused
        """
        if message.role is Role.TOOL:
            if message.tool_call_id not in self._pending:
                raise MalformedMessage(
                    f"Tool message answers unknown or already answered call "
                    f"{message.tool_call_id}"
                )
            del self._pending[message.tool_call_id]
        elif self._pending:
            raise MalformedMessage(
                f"Cannot append {message.role.value} message while tool calls "
                f"{list(self._pending)} are unanswered"
            )

        if message.tool_calls:
            ids = [call.id for call in message.tool_calls]
            if len(set(ids)) != len(ids) or self._call_ids.intersection(ids):
                raise MalformedMessage(f"Duplicate tool call id in {ids}")
            self._call_ids.update(ids)
            self._pending = {call.id: call for call in message.tool_calls}

        self._messages.append(message)

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    @property
    def pending_tool_calls(self) -> tuple[ToolCallRequest, ...]:
        """Tool calls of the last assistant turn that have no result yet."""
        return tuple(self._pending.values())

    def to_wire(self) -> list[dict[str, Any]]:
        return [message_to_wire(message) for message in self._messages]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(list(self._messages))

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]
