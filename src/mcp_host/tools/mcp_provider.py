"""Tool provider backed by an MCP server over streamable HTTP.

This module wraps mcp.ClientSession. A single session is opened at startup,
with a bounded number of connection attempts and a fixed delay between them,
and is shared by every conversation until shutdown.
"""

import asyncio
import logging
from contextlib import AsyncExitStack
from datetime import timedelta
from typing import Any

from mcp import ClientSession, McpError
from mcp.client.streamable_http import streamablehttp_client

from mcp_host.core.errors import ToolExecutionFailure, TransportFailure
from mcp_host.tools.types import ContentBlock, ToolDescriptor, ToolResult

logger = logging.getLogger(__name__)


def result_from_mcp(result: Any) -> ToolResult:
    """Convert an MCP CallToolResult into a ToolResult.

    Text blocks keep their text; image, audio and resource blocks are kept
    as blocks without text.
    """
    blocks = []
    for item in result.content or []:
        block_type = getattr(item, "type", "text")
        text = getattr(item, "text", None) if block_type == "text" else None
        blocks.append(ContentBlock(text=text, type=block_type))
    return ToolResult(is_error=bool(result.isError), content=tuple(blocks))


class McpToolProvider:
    """Discovers and calls tools on a remote MCP server.

    Attributes:
        server_url: MCP endpoint URL (e.g., "http://localhost:5000/mcp")
        timeout: Per-request timeout in seconds
        retry_attempts: Connection attempts before giving up
        retry_delay_ms: Delay between connection attempts
    """

    def __init__(
        self,
        server_url: str,
        api_key: str | None = None,
        timeout: float = 30.0,
        retry_attempts: int = 3,
        retry_delay_ms: int = 1000,
    ) -> None:
        self.server_url = server_url
        self.timeout = timeout
        self.retry_attempts = retry_attempts
        self.retry_delay_ms = retry_delay_ms
        self._api_key = api_key
        self._session: ClientSession | None = None
        self._exit_stack: AsyncExitStack | None = None

    @property
    def connected(self) -> bool:
        return self._session is not None

    async def connect(self) -> None:
        """Open and initialize the MCP session.

        Raises:
            TransportFailure: If every connection attempt fails
        """
        if self._session is not None:
            return

        last_error: Exception | None = None
        for attempt in range(1, self.retry_attempts + 1):
            try:
                await self._open_session()
                logger.info(f"Connected to MCP server {self.server_url}")
                return
            except Exception as e:
                last_error = e
                logger.warning(
                    f"MCP connection attempt {attempt}/{self.retry_attempts} "
                    f"to {self.server_url} failed: {e}"
                )
                await self._close_stack()
                if attempt < self.retry_attempts:
                    await asyncio.sleep(self.retry_delay_ms / 1000)

        raise TransportFailure(
            f"Could not connect to MCP server {self.server_url}: {last_error}"
        )

    async def _open_session(self) -> None:
        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else None
        timeout = timedelta(seconds=self.timeout)

        stack = AsyncExitStack()
        self._exit_stack = stack
        read_stream, write_stream, _ = await stack.enter_async_context(
            streamablehttp_client(self.server_url, headers=headers, timeout=timeout)
        )
        session = await stack.enter_async_context(
            ClientSession(read_stream, write_stream, read_timeout_seconds=timeout)
        )
        await session.initialize()
        self._session = session

    def _require_session(self) -> ClientSession:
        if self._session is None:
            raise TransportFailure(f"Not connected to MCP server {self.server_url}")
        return self._session

    async def list_tools(self) -> list[ToolDescriptor]:
        """List every tool the server offers, following pagination cursors."""
        session = self._require_session()
        descriptors: list[ToolDescriptor] = []

        try:
            result = await session.list_tools()
            while True:
                for tool in result.tools:
                    descriptors.append(
                        ToolDescriptor(
                            name=tool.name,
                            description=tool.description,
                            input_schema=tool.inputSchema,
                        )
                    )
                if not result.nextCursor:
                    break
                result = await session.list_tools(cursor=result.nextCursor)
        except McpError as e:
            raise TransportFailure(f"MCP tool discovery failed: {e}")

        logger.info(f"MCP server {self.server_url} offers {len(descriptors)} tools")
        return descriptors

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        """Call a tool by name.

        Raises:
            ToolExecutionFailure: If the server rejects the call (e.g. unknown tool)
            TransportFailure: If the session is missing or the request fails
        """
        session = self._require_session()

        try:
            result = await session.call_tool(name, arguments)
        except McpError as e:
            raise ToolExecutionFailure(e.error.message)
        except Exception as e:
            raise TransportFailure(f"MCP call to {name} failed: {e}") from e

        return result_from_mcp(result)

    async def _close_stack(self) -> None:
        stack, self._exit_stack = self._exit_stack, None
        self._session = None
        if stack is not None:
            try:
                await stack.aclose()
            except Exception as e:
                logger.debug(f"Error while closing MCP connection: {e}")

    async def close(self) -> None:
        await self._close_stack()
        logger.info("MCP tool provider closed")
