"""Chat API endpoints.

This module provides the session boundary of the orchestration loop: it
validates the user message, resolves the session, runs one user turn to
completion and translates failures into HTTP errors. Internals of upstream
failures are logged, never returned to the caller.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from sse_starlette.sse import EventSourceResponse

from mcp_host.core.errors import (
    InvalidUserInput,
    LoopExceeded,
    MalformedResponse,
    McpHostError,
    TransportFailure,
    validate_user_message,
)
from mcp_host.core.loop import FinalAnswer, ToolCallsStarted, ToolResultReady
from mcp_host.core.types import Role
from mcp_host.dependencies import get_session_store, get_tool_host
from mcp_host.host import ToolHost
from mcp_host.models.chat import (
    ChatRequest,
    ChatResponse,
    DoneEvent,
    ErrorEvent,
    ExecutedToolCall,
    MessageCompleteEvent,
    ToolCallInfo,
    ToolCallsEvent,
    ToolResultEvent,
)
from mcp_host.sessions import ChatSession, SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/chat", tags=["chat"])


def _error_detail(code: str, message: str, details: dict[str, Any] | None = None) -> dict:
    return {"error": {"code": code, "message": message, "details": details or {}}}


def _failure_response(error: McpHostError) -> tuple[int, str, str]:
    """Map a loop failure to (status, code, public message)."""
    if isinstance(error, LoopExceeded):
        return 502, "tool_round_limit", "The assistant requested too many tool rounds"
    if isinstance(error, (TransportFailure, MalformedResponse)):
        return 502, "completion_failed", "Failed to get a reply from the completion service"
    return 500, "internal_error", "Failed to process the message"


def _resolve_session(
    request_body: ChatRequest, session_store: SessionStore
) -> ChatSession:
    """Validate the message and look up (or create) the session.

    Raises:
        HTTPException: 400 for a blank message, 404 for an unknown session
    """
    try:
        validate_user_message(request_body.message)
    except InvalidUserInput as e:
        raise HTTPException(
            status_code=400,
            detail=_error_detail("invalid_user_input", str(e)),
        )

    if request_body.session_id is None:
        return session_store.create()

    session = session_store.get(request_body.session_id)
    if session is None:
        raise HTTPException(
            status_code=404,
            detail=_error_detail(
                "session_not_found",
                f"Session {request_body.session_id} not found",
                {"session_id": request_body.session_id},
            ),
        )
    return session


def _discard_if_interrupted(session: ChatSession, session_store: SessionStore) -> None:
    # A run that stopped mid-round leaves calls without results; the
    # conversation can no longer be continued.
    if session.conversation.pending_tool_calls:
        logger.warning(
            f"Discarding session {session.session_id} with unanswered tool calls"
        )
        session_store.delete(session.session_id)


@router.post("", response_model=ChatResponse)
async def chat(
    request_body: ChatRequest,
    tool_host: ToolHost = Depends(get_tool_host),
    session_store: SessionStore = Depends(get_session_store),
) -> ChatResponse:
    """Send a message and receive the assistant's final answer.

    Args:
        request_body: Chat request containing the message and optional session id
        tool_host: Injected tool host
        session_store: Injected session store

    Returns:
        ChatResponse with the reply and the tool calls executed for it

    Raises:
        HTTPException: 400 for a blank message, 404 if the session is unknown,
            502 if the completion service fails, 500 for other failures
    """
    session = _resolve_session(request_body, session_store)

    async with session.lock:
        start = len(session.conversation)
        try:
            reply = await tool_host.orchestrator.run_to_completion(
                session.conversation, request_body.message
            )
        except McpHostError as e:
            logger.error(f"Chat failed for session {session.session_id}: {e}")
            status, code, message = _failure_response(e)
            raise HTTPException(
                status_code=status,
                detail=_error_detail(code, message, {"session_id": session.session_id}),
            )
        finally:
            session.touch()
            _discard_if_interrupted(session, session_store)

    executed = [
        ExecutedToolCall(
            id=message.tool_call_id,
            name=message.name or "",
            is_error=message.is_error,
        )
        for message in session.conversation.messages[start:]
        if message.role is Role.TOOL
    ]

    logger.info(
        f"Session {session.session_id}: replied after {len(executed)} tool call(s)"
    )
    return ChatResponse(
        session_id=session.session_id,
        reply=reply,
        tool_calls_executed=executed,
    )


@router.post("/stream")
async def chat_streaming(
    request_body: ChatRequest,
    request: Request,
    tool_host: ToolHost = Depends(get_tool_host),
    session_store: SessionStore = Depends(get_session_store),
) -> EventSourceResponse:
    """Run one user turn and report its progress via Server-Sent Events (SSE).

    SSE Events:
        - tool_calls: The assistant requested a round of tool calls
        - tool_result: A tool call was answered
        - message_complete: The final answer
        - error: The run failed
        - done: Stream is complete

    Raises:
        HTTPException: 400 for a blank message, 404 if the session is unknown
    """
    session = _resolve_session(request_body, session_store)

    async def event_generator():
        """Translate loop events into SSE events."""
        async with session.lock:
            try:
                events = tool_host.orchestrator.iterate(
                    session.conversation, request_body.message
                )
                async for event in events:
                    if await request.is_disconnected():
                        logger.warning(
                            f"Client disconnected during run for session {session.session_id}"
                        )
                        await events.aclose()
                        return

                    if isinstance(event, ToolCallsStarted):
                        payload = ToolCallsEvent(
                            round=event.round,
                            tool_calls=[
                                ToolCallInfo(
                                    id=call.id,
                                    name=call.name,
                                    arguments=call.raw_arguments,
                                )
                                for call in event.message.tool_calls
                            ],
                        )
                        yield {"event": "tool_calls", "data": payload.model_dump_json()}
                    elif isinstance(event, ToolResultReady):
                        payload = ToolResultEvent(
                            tool_call_id=event.request.id,
                            name=event.request.name,
                            content=event.message.content or "",
                            is_error=event.message.is_error,
                        )
                        yield {"event": "tool_result", "data": payload.model_dump_json()}
                    elif isinstance(event, FinalAnswer):
                        payload = MessageCompleteEvent(reply=event.text)
                        yield {
                            "event": "message_complete",
                            "data": payload.model_dump_json(),
                        }

                done_event = DoneEvent(session_id=session.session_id)
                yield {"event": "done", "data": done_event.model_dump_json()}

            except McpHostError as e:
                logger.error(f"Streaming run failed for session {session.session_id}: {e}")
                _, code, message = _failure_response(e)
                error_event = ErrorEvent(
                    code=code,
                    message=message,
                    details={"session_id": session.session_id},
                )
                yield {"event": "error", "data": error_event.model_dump_json()}
            finally:
                session.touch()
                _discard_if_interrupted(session, session_store)

    return EventSourceResponse(event_generator())
