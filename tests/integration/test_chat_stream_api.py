"""Integration tests for the streaming chat API endpoint.

This module tests the SSE progress stream of POST /api/v1/chat/stream:
- Event order for a run with tool rounds
- Session state after the stream completes
- Error events for failed runs
"""

import json

import pytest
from httpx import AsyncClient

from mcp_host.completion.types import Final, ToolCallsRequested
from mcp_host.core.errors import TransportFailure
from mcp_host.core.types import ToolCallRequest


def parse_sse_events(text: str) -> list[dict]:
    """Parse an SSE response body into a list of {event, data} dicts."""
    events = []
    # Normalize line endings and split by double newline
    normalized_text = text.replace("\r\n", "\n")
    for chunk in normalized_text.strip().split("\n\n"):
        event_type = None
        event_data = None
        for part in chunk.split("\n"):
            if part.startswith("event:"):
                event_type = part.split(":", 1)[1].strip()
            elif part.startswith("data:"):
                event_data = part.split(":", 1)[1].strip()
        if event_type and event_data:
            events.append({"event": event_type, "data": json.loads(event_data)})
    return events


@pytest.mark.asyncio
async def test_stream_chat_without_tools(async_client: AsyncClient, completion_client):
    completion_client.queue(Final("Hello there!"))

    response = await async_client.post("/api/v1/chat/stream", json={"message": "Hi!"})

    assert response.status_code == 200
    events = parse_sse_events(response.text)
    assert [e["event"] for e in events] == ["message_complete", "done"]
    assert events[0]["data"]["reply"] == "Hello there!"
    assert len(events[1]["data"]["session_id"]) == 10


@pytest.mark.asyncio
async def test_stream_chat_reports_tool_progress(
    async_client: AsyncClient, completion_client
):
    completion_client.queue(
        ToolCallsRequested(
            tool_calls=(
                ToolCallRequest(id="call_1", name="GetHostInfo", raw_arguments="{}"),
                ToolCallRequest(
                    id="call_2",
                    name="GetRandomNumber",
                    raw_arguments='{"minValue":1,"maxValue":6}',
                ),
            )
        ),
        Final("test-host rolled a 4."),
    )

    response = await async_client.post(
        "/api/v1/chat/stream", json={"message": "Host and a die roll"}
    )

    assert response.status_code == 200
    events = parse_sse_events(response.text)
    assert [e["event"] for e in events] == [
        "tool_calls",
        "tool_result",
        "tool_result",
        "message_complete",
        "done",
    ]

    tool_calls = events[0]["data"]
    assert tool_calls["round"] == 1
    assert [c["name"] for c in tool_calls["tool_calls"]] == ["GetHostInfo", "GetRandomNumber"]
    assert tool_calls["tool_calls"][1]["arguments"] == '{"minValue":1,"maxValue":6}'

    assert events[1]["data"] == {
        "tool_call_id": "call_1",
        "name": "GetHostInfo",
        "content": '{"machineName": "test-host"}',
        "is_error": False,
    }
    assert events[2]["data"]["content"] == "4"

    # The run is stored in the session
    session_id = events[-1]["data"]["session_id"]
    session_response = await async_client.get(f"/api/v1/sessions/{session_id}")
    assert session_response.status_code == 200
    messages = session_response.json()["messages"]
    assert [m["role"] for m in messages] == [
        "system",
        "user",
        "assistant",
        "tool",
        "tool",
        "assistant",
    ]
    assert messages[-1]["content"] == "test-host rolled a 4."


@pytest.mark.asyncio
async def test_stream_chat_continues_session(async_client: AsyncClient, completion_client):
    completion_client.queue(Final("First."), Final("Second."))

    first = await async_client.post("/api/v1/chat", json={"message": "one"})
    session_id = first.json()["session_id"]

    response = await async_client.post(
        "/api/v1/chat/stream", json={"message": "two", "session_id": session_id}
    )

    events = parse_sse_events(response.text)
    assert events[-1]["data"]["session_id"] == session_id
    assert len(completion_client.requests[1]) == 4


@pytest.mark.asyncio
async def test_stream_chat_session_not_found(async_client: AsyncClient):
    """Test streaming chat with non-existent session."""
    response = await async_client.post(
        "/api/v1/chat/stream",
        json={"message": "Hi", "session_id": "nonexistent"},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_stream_chat_blank_message(async_client: AsyncClient):
    response = await async_client.post("/api/v1/chat/stream", json={"message": "  "})

    assert response.status_code == 400
    assert response.json()["detail"]["error"]["code"] == "invalid_user_input"


@pytest.mark.asyncio
async def test_stream_chat_completion_error(async_client: AsyncClient, completion_client):
    """Test streaming chat when the completion service fails."""
    completion_client.queue(TransportFailure("connection refused"))

    response = await async_client.post("/api/v1/chat/stream", json={"message": "Hi!"})

    assert response.status_code == 200
    events = parse_sse_events(response.text)
    assert [e["event"] for e in events] == ["error"]
    assert events[0]["data"]["code"] == "completion_failed"
    assert "connection refused" not in events[0]["data"]["message"]


@pytest.mark.asyncio
async def test_stream_chat_round_limit(
    async_client: AsyncClient, completion_client, test_settings
):
    for i in range(test_settings.max_tool_rounds + 1):
        completion_client.queue(
            ToolCallsRequested(tool_calls=(ToolCallRequest(id=f"call_{i}", name="GetTime"),))
        )

    response = await async_client.post("/api/v1/chat/stream", json={"message": "loop"})

    events = parse_sse_events(response.text)
    assert [e["event"] for e in events].count("tool_calls") == test_settings.max_tool_rounds
    assert events[-1]["event"] == "error"
    assert events[-1]["data"]["code"] == "tool_round_limit"
