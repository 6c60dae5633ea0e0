"""Tool invocation executor.

Runs one tool-call request against the tool provider and turns whatever
happens into a tool message the completion service can read. A failing tool
never aborts the round it belongs to.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

from mcp_host.core.errors import ToolExecutionFailure
from mcp_host.core.types import Message, ToolCallRequest
from mcp_host.tools.types import ToolProvider, ToolResult

logger = logging.getLogger(__name__)

EMPTY_ERROR_PLACEHOLDER = "Tool returned an error with no content."


def parse_arguments(raw_arguments: str | Mapping[str, Any] | None) -> dict[str, Any]:
    """Decode a tool call's raw argument payload into an argument object.

    Args:
        raw_arguments: JSON text, a decoded mapping, or None

    Returns:
        The argument object; empty for a missing or blank payload

    Raises:
        ToolExecutionFailure: If the payload is not valid JSON or not an object
    """
    if raw_arguments is None:
        return {}
    if isinstance(raw_arguments, Mapping):
        return dict(raw_arguments)
    if not raw_arguments.strip():
        return {}

    try:
        parsed = json.loads(raw_arguments)
    except json.JSONDecodeError as e:
        raise ToolExecutionFailure(f"arguments are not valid JSON ({e})")

    if not isinstance(parsed, dict):
        raise ToolExecutionFailure(
            f"arguments must be a JSON object, got {type(parsed).__name__}"
        )
    return parsed


def flatten_result(result: ToolResult) -> str:
    """Join the non-blank text blocks of a result with newlines.

    An error result without any text yields a fixed placeholder so the
    completion service always sees that something went wrong.
    """
    texts = [
        block.text
        for block in result.content
        if block.text is not None and block.text.strip()
    ]
    if not texts:
        return EMPTY_ERROR_PLACEHOLDER if result.is_error else ""
    return "\n".join(texts)


class ToolExecutor:
    """Executes tool-call requests against a tool provider.

    Attributes:
        provider: The tool provider that performs the calls
    """

    def __init__(self, provider: ToolProvider) -> None:
        self.provider = provider

    async def execute(self, request: ToolCallRequest) -> Message:
        """Run one requested tool call.

        Args:
            request: The tool call emitted by the completion service

        Returns:
            A tool message correlated to the request. Provider failures are
            reported in the message text with is_error set.
        """
        try:
            arguments = parse_arguments(request.raw_arguments)
        except ToolExecutionFailure as e:
            logger.warning(f"Invalid arguments for tool {request.name}: {e}")
            return Message.tool(
                tool_call_id=request.id,
                content=f"Invalid arguments for tool '{request.name}': {e}",
                name=request.name,
                is_error=True,
            )

        logger.debug(f"Calling tool {request.name} with {len(arguments)} argument(s)")

        try:
            result = await self.provider.call_tool(request.name, arguments)
        except Exception as e:
            logger.error(f"Tool {request.name} failed: {e}")
            return Message.tool(
                tool_call_id=request.id,
                content=f"Tool '{request.name}' failed: {str(e) or type(e).__name__}",
                name=request.name,
                is_error=True,
            )

        logger.info(f"Tool {request.name} executed. Error: {result.is_error}")

        return Message.tool(
            tool_call_id=request.id,
            content=flatten_result(result),
            name=request.name,
            is_error=result.is_error,
        )
