"""Pytest configuration for integration tests.

This module patches the collaborators the app builds at startup so every
integration test runs against the scripted completion client and the fake
tool provider from the parent conftest.
"""

from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def mock_host_clients(completion_client, tool_provider):
    """Patch the client builders before the app lifespan runs.

    Yields:
        tuple: The scripted completion client and the fake tool provider
    """
    with (
        patch(
            "mcp_host.app.build_completion_client", return_value=completion_client
        ),
        patch("mcp_host.app.build_tool_provider", return_value=tool_provider),
    ):
        yield completion_client, tool_provider
