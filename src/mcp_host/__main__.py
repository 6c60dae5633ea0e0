"""CLI entry point for mcp-host.

This module provides the command-line interface. It can be invoked as
`mcp-host` (via the script entry point) or `python -m mcp_host`:

    mcp-host serve   start the HTTP API (default)
    mcp-host chat    interactive console session
"""

import argparse
import asyncio
import logging
import sys

import uvicorn

from mcp_host import __version__, create_app
from mcp_host.completion import build_completion_client
from mcp_host.config import McpHostSettings
from mcp_host.core.errors import McpHostError
from mcp_host.host import ToolHost
from mcp_host.interactive import run_interactive
from mcp_host.tools import build_tool_provider

logger = logging.getLogger("mcp_host")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcp-host",
        description="Chat host that lets a completion service call MCP tools",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"mcp-host {__version__}",
    )

    parser.add_argument(
        "command",
        nargs="?",
        choices=["serve", "chat"],
        default="serve",
        help="serve: start the HTTP API (default); chat: interactive console",
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind the server to (default: 127.0.0.1, can be set via MCP_HOST_HOST)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind the server to (default: 8000, can be set via MCP_HOST_PORT)",
    )

    parser.add_argument(
        "--mcp-server-url",
        type=str,
        default=None,
        help="MCP server URL (can be set via MCP_HOST_MCP_SERVER_URL)",
    )

    parser.add_argument(
        "--tool-provider",
        type=str,
        default=None,
        choices=["mcp", "local"],
        help="Tool provider (default: mcp, can be set via MCP_HOST_TOOL_PROVIDER)",
    )

    parser.add_argument(
        "--completion-backend",
        type=str,
        default=None,
        choices=["openai", "ollama"],
        help="Completion backend (default: openai, can be set via MCP_HOST_COMPLETION_BACKEND)",
    )

    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Completion model (can be set via MCP_HOST_COMPLETION_MODEL)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO, can be set via MCP_HOST_LOG_LEVEL)",
    )

    return parser


def settings_from_args(args: argparse.Namespace) -> McpHostSettings:
    """Build settings; CLI args override environment variables."""
    settings_kwargs = {}
    if args.host is not None:
        settings_kwargs["host"] = args.host
    if args.port is not None:
        settings_kwargs["port"] = args.port
    if args.mcp_server_url is not None:
        settings_kwargs["mcp_server_url"] = args.mcp_server_url
    if args.tool_provider is not None:
        settings_kwargs["tool_provider"] = args.tool_provider
    if args.completion_backend is not None:
        settings_kwargs["completion_backend"] = args.completion_backend
    if args.model is not None:
        settings_kwargs["completion_model"] = args.model
    if args.log_level is not None:
        settings_kwargs["log_level"] = args.log_level

    return McpHostSettings(**settings_kwargs)


async def chat_main(settings: McpHostSettings) -> int:
    """Start the tool host and run an interactive session.

    Returns:
        Process exit status
    """
    if settings.completion_backend == "openai" and not settings.completion_api_key:
        logger.error(
            "Completion API key is missing. Set MCP_HOST_COMPLETION_API_KEY."
        )
        return 1

    try:
        tool_provider = build_tool_provider(settings)
        tool_host = await ToolHost.start(
            completion_client=build_completion_client(settings),
            tool_provider=tool_provider,
            max_tool_rounds=settings.max_tool_rounds,
            system_prompt=settings.system_prompt,
        )
    except (McpHostError, ValueError) as e:
        logger.error(str(e))
        return 1

    try:
        await run_interactive(tool_host)
    finally:
        await tool_host.close()
    return 0


def main() -> int:
    """Main entry point for the mcp-host CLI."""
    args = build_parser().parse_args()
    settings = settings_from_args(args)

    if args.command == "chat":
        logging.basicConfig(
            level=settings.log_level.upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        return asyncio.run(chat_main(settings))

    app = create_app(settings=settings)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
