"""Unit tests for the Ollama completion client."""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import ollama
import pytest

from mcp_host.completion.ollama_client import (
    OllamaCompletionClient,
    message_to_ollama,
    parse_ollama_response,
)
from mcp_host.completion.types import Final, ToolCallsRequested
from mcp_host.core.catalog import build_catalog
from mcp_host.core.errors import MalformedResponse, TransportFailure
from mcp_host.core.types import Conversation, Message, ToolCallRequest
from mcp_host.tools.types import ToolDescriptor


@pytest.fixture
def mock_ollama_async_client():
    """Create a mock ollama.AsyncClient."""
    with patch("mcp_host.completion.ollama_client.ollama.AsyncClient") as mock_class:
        mock_instance = AsyncMock()
        mock_class.return_value = mock_instance
        yield mock_instance


@pytest.fixture
def ollama_client(mock_ollama_async_client):
    """Create an OllamaCompletionClient with mocked AsyncClient."""
    return OllamaCompletionClient(host="http://localhost:11434", model="qwen3:14b")


@pytest.fixture
def conversation():
    conversation = Conversation.with_system_prompt("You are a helpful assistant.")
    conversation.append(Message.user("Roll a die"))
    return conversation


def test_client_initialization():
    """Test that OllamaCompletionClient initializes correctly."""
    with patch("mcp_host.completion.ollama_client.ollama.AsyncClient") as mock_class:
        client = OllamaCompletionClient(host="http://test:11434", model="llama3", timeout=5.0)

    assert client.host == "http://test:11434"
    assert client.model == "llama3"
    mock_class.assert_called_once_with(host="http://test:11434", timeout=5.0)


def test_message_to_ollama_tool_call_arguments_become_objects():
    message = Message.assistant(
        None,
        [ToolCallRequest(id="call_1", name="GetRandomNumber", raw_arguments='{"minValue":1}')],
    )

    result = message_to_ollama(message)

    assert result == {
        "role": "assistant",
        "content": "",
        "tool_calls": [
            {"function": {"name": "GetRandomNumber", "arguments": {"minValue": 1}}}
        ],
    }


def test_message_to_ollama_tool_result_carries_tool_name():
    message = Message.tool("call_1", "4", name="GetRandomNumber")

    assert message_to_ollama(message) == {
        "role": "tool",
        "content": "4",
        "tool_name": "GetRandomNumber",
    }


def test_message_to_ollama_warns_on_unparseable_arguments(caplog):
    message = Message.assistant(
        None, [ToolCallRequest(id="call_1", name="Echo", raw_arguments="{not json")]
    )

    with caplog.at_level(logging.WARNING, logger="mcp_host.completion.ollama_client"):
        result = message_to_ollama(message)

    assert result["tool_calls"][0]["function"]["arguments"] == {}
    assert "call_1" in caplog.text
    assert "not valid JSON" in caplog.text


def test_message_to_ollama_empty_arguments_do_not_warn(caplog):
    message = Message.assistant(None, [ToolCallRequest(id="call_1", name="GetTime")])

    with caplog.at_level(logging.WARNING, logger="mcp_host.completion.ollama_client"):
        result = message_to_ollama(message)

    assert result["tool_calls"][0]["function"]["arguments"] == {}
    assert caplog.records == []


def test_parse_final_answer():
    response = {"model": "qwen3:14b", "message": {"role": "assistant", "content": "Hi"}}

    assert parse_ollama_response(response) == Final(text="Hi")


def test_parse_tool_calls_synthesizes_ids():
    response = {
        "message": {
            "role": "assistant",
            "content": "",
            "tool_calls": [
                {"function": {"name": "GetTime", "arguments": {}}},
                {"function": {"name": "GetRandomNumber", "arguments": {"minValue": 1}}},
            ],
        }
    }

    outcome = parse_ollama_response(response)

    assert isinstance(outcome, ToolCallsRequested)
    ids = [call.id for call in outcome.tool_calls]
    assert all(call_id.startswith("call_") for call_id in ids)
    assert len(set(ids)) == 2
    assert outcome.tool_calls[1].raw_arguments == '{"minValue": 1}'
    assert outcome.content is None


def test_parse_uses_model_dump():
    response = MagicMock()
    response.model_dump.return_value = {
        "message": {"role": "assistant", "content": "Dumped"}
    }

    assert parse_ollama_response(response) == Final(text="Dumped")


@pytest.mark.parametrize(
    "response",
    [
        {},
        {"message": None},
        {"message": {"role": "assistant", "tool_calls": [{"function": {}}]}},
        {
            "message": {
                "role": "assistant",
                "tool_calls": [{"function": {"name": "Echo", "arguments": ["hi"]}}],
            }
        },
    ],
)
def test_parse_malformed(response):
    with pytest.raises(MalformedResponse):
        parse_ollama_response(response)


@pytest.mark.asyncio
async def test_complete_sends_messages_and_tools(
    ollama_client, mock_ollama_async_client, conversation
):
    mock_ollama_async_client.chat.return_value = {
        "message": {"role": "assistant", "content": "You rolled a 4."}
    }
    catalog = build_catalog([ToolDescriptor(name="GetRandomNumber")])

    outcome = await ollama_client.complete(conversation, catalog)

    assert outcome == Final(text="You rolled a 4.")
    kwargs = mock_ollama_async_client.chat.call_args.kwargs
    assert kwargs["model"] == "qwen3:14b"
    assert kwargs["stream"] is False
    assert [m["role"] for m in kwargs["messages"]] == ["system", "user"]
    assert kwargs["tools"][0]["function"]["name"] == "GetRandomNumber"


@pytest.mark.asyncio
async def test_complete_without_tools_passes_none(
    ollama_client, mock_ollama_async_client, conversation
):
    mock_ollama_async_client.chat.return_value = {
        "message": {"role": "assistant", "content": "Hi"}
    }

    await ollama_client.complete(conversation, ())

    assert mock_ollama_async_client.chat.call_args.kwargs["tools"] is None


@pytest.mark.asyncio
async def test_complete_response_error(ollama_client, mock_ollama_async_client, conversation):
    mock_ollama_async_client.chat.side_effect = ollama.ResponseError(
        "model not found", status_code=404
    )

    with pytest.raises(TransportFailure) as exc_info:
        await ollama_client.complete(conversation, ())

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_complete_connection_error(
    ollama_client, mock_ollama_async_client, conversation
):
    mock_ollama_async_client.chat.side_effect = httpx.ConnectError("Connection refused")

    with pytest.raises(TransportFailure):
        await ollama_client.complete(conversation, ())


@pytest.mark.asyncio
async def test_close_leaves_ollama_client_untouched(ollama_client, mock_ollama_async_client):
    await ollama_client.close()

    assert mock_ollama_async_client.mock_calls == []
