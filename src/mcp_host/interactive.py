"""Interactive console session.

Reads a prompt per line, runs the orchestration loop for it and prints the
final answer. A blank line or end of input ends the session.
"""

import asyncio
import logging
from collections.abc import Callable

from mcp_host.core.errors import McpHostError
from mcp_host.host import ToolHost

logger = logging.getLogger(__name__)

PROMPT = "\n> "


async def run_interactive(
    tool_host: ToolHost,
    read_line: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> None:
    """Run the read-eval-print loop until the user enters a blank line.

    Args:
        tool_host: Started tool host
        read_line: Blocking line reader, called in a worker thread
        write: Output function for replies and errors
    """
    conversation = tool_host.new_conversation()
    write("Enter a prompt (empty line to exit).")

    while True:
        try:
            line = await asyncio.to_thread(read_line, PROMPT)
        except EOFError:
            break

        if not line or not line.strip():
            break

        try:
            reply = await tool_host.orchestrator.run_to_completion(conversation, line)
        except McpHostError as e:
            logger.error(f"Run failed: {e}")
            write(f"\nError: {e}\n")
            if conversation.pending_tool_calls:
                conversation = tool_host.new_conversation()
            continue

        write(f"\n{reply}\n")
