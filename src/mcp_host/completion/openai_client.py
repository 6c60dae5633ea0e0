"""Completion client for OpenAI-compatible chat-completions endpoints.

This module provides an async client that posts the conversation and tool
catalog to `{base_url}/chat/completions` using a pooled httpx.AsyncClient.
The client is created once at startup and shared across conversations.
"""

import logging
from typing import Any

import httpx

from mcp_host.completion.types import CompletionOutcome, outcome_from_message
from mcp_host.core.catalog import Catalog, catalog_to_wire
from mcp_host.core.errors import MalformedResponse, TransportFailure
from mcp_host.core.types import Conversation

logger = logging.getLogger(__name__)


def parse_chat_completion(payload: Any) -> CompletionOutcome:
    """Parse a chat-completions response body.

    Only the first choice is read.

    Raises:
        MalformedResponse: If choices or the first choice's message are missing
    """
    if not isinstance(payload, dict):
        raise MalformedResponse("Completion response is not a JSON object")

    choices = payload.get("choices")
    if not choices or not isinstance(choices, list):
        raise MalformedResponse("Completion response has no choices")

    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    if not isinstance(message, dict):
        raise MalformedResponse("Completion response is missing a message")

    return outcome_from_message(message)


class OpenAICompletionClient:
    """Async client for an OpenAI-compatible completion service.

    Attributes:
        model: Model name sent with every request
        base_url: Service base URL (e.g. "https://api.openai.com/v1")
    """

    def __init__(
        self,
        base_url: str,
        model: str,
        api_key: str | None = None,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Service base URL
            model: Model name
            api_key: Bearer token; omitted from requests when None
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url
        self.model = model

        headers = {}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )
        logger.info(f"OpenAICompletionClient initialized with base URL: {base_url}")

    def build_request(self, conversation: Conversation, catalog: Catalog) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": self.model,
            "messages": conversation.to_wire(),
        }
        if catalog:
            body["tools"] = catalog_to_wire(catalog)
        return body

    async def complete(
        self, conversation: Conversation, catalog: Catalog
    ) -> CompletionOutcome:
        """Request the next assistant move.

        Args:
            conversation: Full conversation so far
            catalog: Session tool catalog

        Returns:
            Final or ToolCallsRequested

        Raises:
            TransportFailure: On network errors or a non-success status
            MalformedResponse: If the reply cannot be parsed
        """
        body = self.build_request(conversation, catalog)
        logger.debug(
            f"Requesting completion with {len(body['messages'])} messages "
            f"and {len(catalog)} tools"
        )

        try:
            response = await self._client.post("chat/completions", json=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"Completion service returned status {status}")
            raise TransportFailure(
                f"Completion service returned status {status}", status_code=status
            )
        except httpx.HTTPError as e:
            logger.error(f"Completion request failed: {e}")
            raise TransportFailure(f"Completion request failed: {e}")

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedResponse(f"Completion response is not valid JSON: {e}")

        return parse_chat_completion(payload)

    async def close(self) -> None:
        await self._client.aclose()
        logger.debug("OpenAICompletionClient closed")
