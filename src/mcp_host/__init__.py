"""mcp-host: chat host that lets a completion service call tools.

This package runs the tool-calling loop between a user, an OpenAI-compatible
or Ollama completion service and an MCP tool server, behind a REST API and an
interactive console.
"""

__version__ = "0.1.0"

from mcp_host.app import create_app  # noqa: E402

__all__ = ["create_app", "__version__"]
