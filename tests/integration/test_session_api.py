"""Integration tests for session API endpoints.

Tests the session CRUD API with httpx AsyncClient against the FastAPI
application.
"""

import pytest
from httpx import AsyncClient

from mcp_host.completion.types import Final, ToolCallsRequested
from mcp_host.core.types import ToolCallRequest


@pytest.mark.asyncio
async def test_create_session(async_client: AsyncClient):
    response = await async_client.post("/api/v1/sessions")

    assert response.status_code == 201
    data = response.json()
    assert len(data["session_id"]) == 10
    assert data["message_count"] == 1
    assert data["messages"] == [
        {
            "role": "system",
            "content": "You are a helpful assistant.",
            "tool_calls": None,
            "tool_call_id": None,
            "name": None,
            "is_error": False,
        }
    ]


@pytest.mark.asyncio
async def test_chat_in_created_session(async_client: AsyncClient, completion_client):
    completion_client.queue(Final("Hello!"))
    session_id = (await async_client.post("/api/v1/sessions")).json()["session_id"]

    response = await async_client.post(
        "/api/v1/chat", json={"message": "Hi", "session_id": session_id}
    )

    assert response.status_code == 200
    detail = (await async_client.get(f"/api/v1/sessions/{session_id}")).json()
    assert detail["message_count"] == 3
    assert [m["role"] for m in detail["messages"]] == ["system", "user", "assistant"]


@pytest.mark.asyncio
async def test_list_sessions(async_client: AsyncClient):
    empty = await async_client.get("/api/v1/sessions")
    assert empty.status_code == 200
    assert empty.json() == {"sessions": []}

    first = (await async_client.post("/api/v1/sessions")).json()["session_id"]
    second = (await async_client.post("/api/v1/sessions")).json()["session_id"]

    response = await async_client.get("/api/v1/sessions")

    ids = {s["session_id"] for s in response.json()["sessions"]}
    assert ids == {first, second}


@pytest.mark.asyncio
async def test_get_session_includes_tool_messages(
    async_client: AsyncClient, completion_client
):
    completion_client.queue(
        ToolCallsRequested(
            tool_calls=(ToolCallRequest(id="call_1", name="GetTime", raw_arguments="{}"),)
        ),
        Final("It is 10:35."),
    )
    chat = await async_client.post("/api/v1/chat", json={"message": "Time?"})
    session_id = chat.json()["session_id"]

    response = await async_client.get(f"/api/v1/sessions/{session_id}")

    assert response.status_code == 200
    messages = response.json()["messages"]
    assistant, tool = messages[2], messages[3]
    assert assistant["tool_calls"] == [
        {
            "id": "call_1",
            "type": "function",
            "function": {"name": "GetTime", "arguments": "{}"},
        }
    ]
    assert tool["role"] == "tool"
    assert tool["tool_call_id"] == "call_1"
    assert tool["name"] == "GetTime"
    assert tool["content"] == "2025-01-15T10:35:00.0000000+00:00"


@pytest.mark.asyncio
async def test_get_session_not_found(async_client: AsyncClient):
    response = await async_client.get("/api/v1/sessions/nonexistent")

    assert response.status_code == 404
    assert response.json()["detail"]["error"]["code"] == "session_not_found"


@pytest.mark.asyncio
async def test_delete_session(async_client: AsyncClient):
    session_id = (await async_client.post("/api/v1/sessions")).json()["session_id"]

    response = await async_client.delete(f"/api/v1/sessions/{session_id}")
    assert response.status_code == 204

    response = await async_client.get(f"/api/v1/sessions/{session_id}")
    assert response.status_code == 404

    response = await async_client.delete(f"/api/v1/sessions/{session_id}")
    assert response.status_code == 404
