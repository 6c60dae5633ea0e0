"""Pytest configuration and shared fixtures for mcp-host tests.

This module provides common fixtures used across all test modules,
including scripted collaborators for the orchestration loop, test app
creation and async client setup.
"""

from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from mcp_host import create_app
from mcp_host.config import McpHostSettings
from mcp_host.core.errors import ToolExecutionFailure
from mcp_host.tools.types import ToolDescriptor, ToolResult


class ScriptedCompletionClient:
    """Completion client returning queued outcomes in order.

    Each call records the wire messages it was sent, so tests can inspect
    exactly what the completion service would have received.
    """

    def __init__(self, *outcomes: Any) -> None:
        self.outcomes = list(outcomes)
        self.requests: list[list[dict[str, Any]]] = []
        self.catalogs: list[Any] = []
        self.closed = False

    def queue(self, *outcomes: Any) -> None:
        self.outcomes.extend(outcomes)

    async def complete(self, conversation, catalog):
        self.requests.append(conversation.to_wire())
        self.catalogs.append(catalog)
        if not self.outcomes:
            raise AssertionError("No scripted completion outcome left")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def close(self) -> None:
        self.closed = True


class FakeToolProvider:
    """Tool provider answering from a name -> result (or exception) table."""

    def __init__(
        self,
        descriptors: list[ToolDescriptor] | None = None,
        results: dict[str, Any] | None = None,
    ) -> None:
        self.descriptors = descriptors or [
            ToolDescriptor(
                name="GetTime",
                description="Gets the current UTC time in ISO 8601 format.",
            ),
            ToolDescriptor(
                name="GetHostInfo",
                description="Gets host and runtime information about the current process.",
            ),
            ToolDescriptor(
                name="GetRandomNumber",
                description="Returns a random integer within the provided inclusive range.",
                input_schema={
                    "type": "object",
                    "properties": {
                        "minValue": {"type": "integer"},
                        "maxValue": {"type": "integer"},
                    },
                    "required": ["minValue", "maxValue"],
                },
            ),
        ]
        self.results: dict[str, Any] = results or {}
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.connected = False
        self.closed = False

    async def connect(self) -> None:
        self.connected = True

    async def list_tools(self) -> list[ToolDescriptor]:
        return list(self.descriptors)

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        self.calls.append((name, arguments))
        outcome = self.results.get(name)
        if outcome is None:
            raise ToolExecutionFailure(f"Unknown tool: {name}")
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def completion_client():
    """A scripted completion client with an empty script."""
    return ScriptedCompletionClient()


@pytest.fixture
def tool_provider():
    """A fake tool provider offering GetTime, GetHostInfo and GetRandomNumber."""
    return FakeToolProvider(
        results={
            "GetTime": ToolResult.text("2025-01-15T10:35:00.0000000+00:00"),
            "GetHostInfo": ToolResult.text('{"machineName": "test-host"}'),
            "GetRandomNumber": ToolResult.text("4"),
        }
    )


@pytest.fixture
def test_settings():
    """Create test settings that never reach a real service.

    Returns:
        McpHostSettings: Settings instance configured for testing.
    """
    return McpHostSettings(
        host="127.0.0.1",
        port=8000,
        completion_backend="openai",
        completion_base_url="http://completion.test/v1",
        completion_api_key="test-key",
        completion_model="test-model",
        tool_provider="local",
        max_tool_rounds=3,
        system_prompt="You are a helpful assistant.",
        log_level="DEBUG",
        cors_origins=["*"],
    )


@pytest.fixture
def test_app(test_settings):
    """Create a FastAPI test application instance.

    Args:
        test_settings: Test settings fixture.

    Returns:
        FastAPI: Configured test application.
    """
    return create_app(settings=test_settings)


@pytest_asyncio.fixture
async def async_client(test_app):
    """Create an async HTTP client for testing FastAPI endpoints.

    Args:
        test_app: Test application fixture.

    Yields:
        AsyncClient: Async HTTP client for making test requests.
    """
    # Trigger the lifespan startup manually for tests
    async with test_app.router.lifespan_context(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
