"""Completion service clients.

This package provides the completion outcome variants, the client protocol
and two backends: an OpenAI-compatible HTTP client and an Ollama client.
"""

from mcp_host.completion.ollama_client import OllamaCompletionClient
from mcp_host.completion.openai_client import OpenAICompletionClient
from mcp_host.completion.types import (
    CompletionClient,
    CompletionOutcome,
    Final,
    ToolCallsRequested,
)
from mcp_host.config import McpHostSettings


def build_completion_client(settings: McpHostSettings) -> CompletionClient:
    """Create the completion client selected by settings.completion_backend."""
    if settings.completion_backend == "ollama":
        return OllamaCompletionClient(
            host=settings.ollama_host,
            model=settings.completion_model,
            timeout=settings.completion_timeout,
        )
    return OpenAICompletionClient(
        base_url=settings.completion_base_url,
        model=settings.completion_model,
        api_key=settings.completion_api_key,
        timeout=settings.completion_timeout,
    )


__all__ = [
    "CompletionClient",
    "CompletionOutcome",
    "Final",
    "OllamaCompletionClient",
    "OpenAICompletionClient",
    "ToolCallsRequested",
    "build_completion_client",
]
