"""Tool providers: discovery and execution of the tools offered to the model.

This package provides the ToolProvider protocol with its descriptor and result
types, a provider for remote MCP servers and an in-process provider of
utility tools.
"""

from mcp_host.config import McpHostSettings
from mcp_host.tools.local import LocalToolProvider
from mcp_host.tools.mcp_provider import McpToolProvider
from mcp_host.tools.types import ContentBlock, ToolDescriptor, ToolProvider, ToolResult


def build_tool_provider(settings: McpHostSettings) -> ToolProvider:
    """Create the tool provider selected by settings.tool_provider.

    Raises:
        ValueError: If the MCP provider is selected without a server URL
    """
    if settings.tool_provider == "local":
        return LocalToolProvider()

    if not settings.mcp_server_url:
        raise ValueError(
            "MCP server URL is missing. Set MCP_HOST_MCP_SERVER_URL or use "
            "MCP_HOST_TOOL_PROVIDER=local."
        )
    return McpToolProvider(
        server_url=settings.mcp_server_url,
        api_key=settings.mcp_api_key,
        timeout=settings.mcp_timeout,
        retry_attempts=settings.mcp_retry_attempts,
        retry_delay_ms=settings.mcp_retry_delay_ms,
    )


__all__ = [
    "ContentBlock",
    "LocalToolProvider",
    "McpToolProvider",
    "ToolDescriptor",
    "ToolProvider",
    "ToolResult",
    "build_tool_provider",
]
