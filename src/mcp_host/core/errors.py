"""Exception hierarchy for mcp-host.

Every error raised by the orchestration core derives from McpHostError so
session boundaries can translate failures without inspecting internals.
"""


class McpHostError(Exception):
    """Base class for all mcp-host errors."""


class TransportFailure(McpHostError):
    """The completion service or tool provider could not be reached.

    Attributes:
        status_code: HTTP status returned by the remote side, if any.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponse(McpHostError):
    """A completion reply could not be parsed into the expected shape."""


class ToolExecutionFailure(McpHostError):
    """A tool could not be found, invoked, or signalled an error."""


class InvalidUserInput(McpHostError):
    """The user message is empty or blank."""


class MalformedMessage(McpHostError):
    """A message or conversation append violates the message invariants."""


class LoopExceeded(McpHostError):
    """The completion service kept requesting tools past the round limit.

    Attributes:
        max_rounds: The configured round limit that was exceeded.
    """

    def __init__(self, max_rounds: int) -> None:
        super().__init__(
            f"Completion service requested more than {max_rounds} tool rounds"
        )
        self.max_rounds = max_rounds


def validate_user_message(text: str | None) -> str:
    """Reject empty or blank user input before a loop run starts.

    Args:
        text: Raw user input

    Returns:
        The input unchanged

    Raises:
        InvalidUserInput: If the text is None, empty or whitespace only
    """
    if text is None or not text.strip():
        raise InvalidUserInput("Message must not be empty")
    return text
