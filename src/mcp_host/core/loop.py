"""Orchestration loop for tool-calling conversations.

The loop alternates between asking the completion service for its next move
and executing the tools it requests, until the service produces a final
answer:

    user message -> Awaiting Completion -> Final            -> Done
                                        -> ToolCallsRequested -> Executing Tools
    Executing Tools -> (every call answered, in order)       -> Awaiting Completion

Tool calls of one round run sequentially in the order they were emitted.
"""

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass

from mcp_host.completion.types import CompletionClient, Final
from mcp_host.core.catalog import Catalog
from mcp_host.core.errors import LoopExceeded, MalformedMessage, MalformedResponse
from mcp_host.core.executor import ToolExecutor
from mcp_host.core.types import Conversation, Message, ToolCallRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolCallsStarted:
    """An assistant turn requesting tools was appended."""

    message: Message
    round: int


@dataclass(frozen=True)
class ToolResultReady:
    """A tool message answering `request` was appended."""

    request: ToolCallRequest
    message: Message


@dataclass(frozen=True)
class FinalAnswer:
    """The final assistant message was appended."""

    text: str


LoopEvent = ToolCallsStarted | ToolResultReady | FinalAnswer


class Orchestrator:
    """Drives one user turn of a conversation to a final answer.

    The orchestrator holds only shared, read-only collaborators and can serve
    many conversations concurrently; each run owns its conversation.

    Attributes:
        completion_client: Client for the completion service
        executor: Executor running requested tool calls
        catalog: Tool catalog offered on every completion call
        max_tool_rounds: Number of tool rounds allowed per user turn
    """

    def __init__(
        self,
        completion_client: CompletionClient,
        executor: ToolExecutor,
        catalog: Catalog,
        max_tool_rounds: int = 10,
    ) -> None:
        self.completion_client = completion_client
        self.executor = executor
        self.catalog = catalog
        self.max_tool_rounds = max_tool_rounds

    async def iterate(
        self, conversation: Conversation, user_text: str
    ) -> AsyncIterator[LoopEvent]:
        """Run one user turn, yielding an event after every append.

        Closing the iterator early abandons the run; nothing is appended for
        the interrupted step.

        Args:
            conversation: Conversation owned by this run
            user_text: The user's message

        Yields:
            ToolCallsStarted, ToolResultReady and finally FinalAnswer

        Raises:
            TransportFailure: If the completion service cannot be reached
            MalformedResponse: If a completion reply cannot be parsed or reuses
                a tool call id
            LoopExceeded: If tools are requested after max_tool_rounds rounds
        """
        conversation.append(Message.user(user_text))
        rounds = 0

        while True:
            outcome = await self.completion_client.complete(conversation, self.catalog)

            if isinstance(outcome, Final):
                conversation.append(Message.assistant(outcome.text))
                logger.info(f"Final answer after {rounds} tool round(s)")
                yield FinalAnswer(text=outcome.text)
                return

            if rounds >= self.max_tool_rounds:
                logger.warning(f"Tool round limit of {self.max_tool_rounds} reached")
                raise LoopExceeded(self.max_tool_rounds)

            rounds += 1
            assistant = Message.assistant(outcome.content, outcome.tool_calls)
            try:
                conversation.append(assistant)
            except MalformedMessage as e:
                raise MalformedResponse(f"Completion reply reuses a tool call id: {e}")
            logger.info(
                f"Round {rounds}: executing {len(outcome.tool_calls)} tool call(s)"
            )
            yield ToolCallsStarted(message=assistant, round=rounds)

            for request in outcome.tool_calls:
                result = await self.executor.execute(request)
                conversation.append(result)
                yield ToolResultReady(request=request, message=result)

    async def run_to_completion(self, conversation: Conversation, user_text: str) -> str:
        """Run one user turn and return the final answer text."""
        final_text = ""
        async for event in self.iterate(conversation, user_text):
            if isinstance(event, FinalAnswer):
                final_text = event.text
        return final_text
