"""Session API endpoints.

Sessions are in-memory conversations; they disappear when the process exits.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from mcp_host.core.types import message_to_wire
from mcp_host.dependencies import get_session_store
from mcp_host.models.sessions import (
    MessageModel,
    SessionDetailResponse,
    SessionListResponse,
    SessionSummary,
)
from mcp_host.sessions import ChatSession, SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/sessions", tags=["sessions"])


def _summary(session: ChatSession) -> SessionSummary:
    return SessionSummary(
        session_id=session.session_id,
        created_at=session.created_at,
        updated_at=session.updated_at,
        message_count=len(session.conversation),
    )


def _detail(session: ChatSession) -> SessionDetailResponse:
    messages = []
    for message in session.conversation:
        wire = message_to_wire(message)
        messages.append(
            MessageModel(
                role=wire["role"],
                content=wire.get("content"),
                tool_calls=wire.get("tool_calls"),
                tool_call_id=wire.get("tool_call_id"),
                name=message.name,
                is_error=message.is_error,
            )
        )
    return SessionDetailResponse(**_summary(session).model_dump(), messages=messages)


def _not_found(session_id: str) -> HTTPException:
    return HTTPException(
        status_code=404,
        detail={
            "error": {
                "code": "session_not_found",
                "message": f"Session {session_id} not found",
                "details": {"session_id": session_id},
            }
        },
    )


@router.post("", response_model=SessionDetailResponse, status_code=201)
async def create_session(
    session_store: SessionStore = Depends(get_session_store),
) -> SessionDetailResponse:
    """Create a new session seeded with the system prompt."""
    session = session_store.create()
    return _detail(session)


@router.get("", response_model=SessionListResponse)
async def list_sessions(
    session_store: SessionStore = Depends(get_session_store),
) -> SessionListResponse:
    """List all sessions, most recently active first."""
    return SessionListResponse(
        sessions=[_summary(session) for session in session_store.list()]
    )


@router.get("/{session_id}", response_model=SessionDetailResponse)
async def get_session(
    session_id: str,
    session_store: SessionStore = Depends(get_session_store),
) -> SessionDetailResponse:
    """Get a session with its full message history.

    Raises:
        HTTPException: 404 if the session does not exist
    """
    session = session_store.get(session_id)
    if session is None:
        raise _not_found(session_id)
    return _detail(session)


@router.delete("/{session_id}", status_code=204)
async def delete_session(
    session_id: str,
    session_store: SessionStore = Depends(get_session_store),
) -> Response:
    """Delete a session.

    Raises:
        HTTPException: 404 if the session does not exist
    """
    if not session_store.delete(session_id):
        raise _not_found(session_id)
    return Response(status_code=204)
