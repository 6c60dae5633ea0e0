"""Completion client for a local Ollama server.

This module wraps ollama.AsyncClient and translates between the conversation
model and Ollama's native chat shape, where tool arguments are objects,
tool results are keyed by tool name and tool calls may come without ids.
"""

import json
import logging
import uuid
from typing import Any

import httpx
import ollama

from mcp_host.completion.types import CompletionOutcome, Final, ToolCallsRequested
from mcp_host.core.catalog import Catalog, catalog_to_wire
from mcp_host.core.errors import MalformedMessage, MalformedResponse, TransportFailure
from mcp_host.core.types import Conversation, Message, Role, ToolCallRequest

logger = logging.getLogger(__name__)


def _arguments_as_object(call: ToolCallRequest) -> dict[str, Any]:
    if not call.raw_arguments.strip():
        return {}
    try:
        parsed = json.loads(call.raw_arguments)
    except json.JSONDecodeError as e:
        logger.warning(
            f"Sending empty arguments for tool call {call.id} ({call.name}): "
            f"arguments are not valid JSON ({e})"
        )
        return {}
    if not isinstance(parsed, dict):
        logger.warning(
            f"Sending empty arguments for tool call {call.id} ({call.name}): "
            f"arguments are a JSON {type(parsed).__name__}, not an object"
        )
        return {}
    return parsed


def message_to_ollama(message: Message) -> dict[str, Any]:
    """Convert a message to Ollama chat format."""
    ollama_msg: dict[str, Any] = {
        "role": message.role.value,
        "content": message.content or "",
    }

    if message.tool_calls:
        ollama_msg["tool_calls"] = [
            {
                "function": {
                    "name": call.name,
                    "arguments": _arguments_as_object(call),
                }
            }
            for call in message.tool_calls
        ]

    if message.role is Role.TOOL and message.name:
        ollama_msg["tool_name"] = message.name

    return ollama_msg


def _to_dict(obj: Any) -> Any:
    if hasattr(obj, "model_dump"):
        return obj.model_dump()
    return obj


def parse_ollama_response(response: Any) -> CompletionOutcome:
    """Parse an Ollama chat response into a completion outcome.

    Raises:
        MalformedResponse: If the message or a tool call name is missing
    """
    data = _to_dict(response)
    message = data.get("message") if isinstance(data, dict) else None
    if not isinstance(message, dict):
        raise MalformedResponse("Ollama response is missing a message")

    raw_calls = message.get("tool_calls") or []
    content = message.get("content")

    if not raw_calls:
        return Final(text=content or "")

    calls = []
    for raw_call in raw_calls:
        function = raw_call.get("function") if isinstance(raw_call, dict) else None
        if not isinstance(function, dict) or not function.get("name"):
            raise MalformedResponse(f"Invalid tool call in Ollama reply: {raw_call!r}")
        try:
            call = ToolCallRequest(
                id=raw_call.get("id") or f"call_{uuid.uuid4().hex[:12]}",
                name=function["name"],
                raw_arguments=function.get("arguments") or {},
            )
        except MalformedMessage as e:
            raise MalformedResponse(f"Invalid tool call in Ollama reply: {e}")
        calls.append(call)

    return ToolCallsRequested(tool_calls=tuple(calls), content=content or None)


class OllamaCompletionClient:
    """Async completion client backed by ollama.AsyncClient.

    Attributes:
        host: The Ollama server URL (e.g., "http://localhost:11434")
        model: Model name sent with every request
    """

    def __init__(self, host: str, model: str, timeout: float = 60.0) -> None:
        self.host = host
        self.model = model
        self._client = ollama.AsyncClient(host=host, timeout=timeout)
        logger.info(f"OllamaCompletionClient initialized with host: {host}")

    async def complete(
        self, conversation: Conversation, catalog: Catalog
    ) -> CompletionOutcome:
        """Request the next assistant move from Ollama.

        Raises:
            TransportFailure: If Ollama is unreachable or returns an error status
            MalformedResponse: If the reply cannot be parsed
        """
        messages = [message_to_ollama(message) for message in conversation]
        logger.debug(f"Sending {len(messages)} messages to Ollama model {self.model}")

        try:
            response = await self._client.chat(
                model=self.model,
                messages=messages,
                tools=catalog_to_wire(catalog) or None,
                stream=False,
            )
        except ollama.ResponseError as e:
            logger.error(f"Ollama API error: {e}")
            raise TransportFailure(f"Ollama API error: {e.error}", status_code=e.status_code)
        except (httpx.HTTPError, ConnectionError) as e:
            logger.error(f"Ollama request failed: {e}")
            raise TransportFailure(f"Ollama request failed: {e}")

        return parse_ollama_response(response)

    async def close(self) -> None:
        """Release the client.

        ollama.AsyncClient has no public close; its connection pool is
        released with the client object.
        """
        logger.debug("OllamaCompletionClient closed")
