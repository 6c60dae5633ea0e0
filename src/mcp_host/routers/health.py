"""Health check endpoint router."""

import logging

from fastapi import APIRouter, Request

from mcp_host import __version__
from mcp_host.models.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint.

    Reports whether the tool host started and how many tools it offers.

    Args:
        request: The FastAPI request object.

    Returns:
        HealthResponse: Health status and version information.
    """
    settings = request.app.state.settings
    tool_host = getattr(request.app.state, "tool_host", None)

    return HealthResponse(
        status="ok" if tool_host is not None else "degraded",
        version=__version__,
        tool_provider_connected=tool_host is not None,
        tool_count=len(tool_host.catalog) if tool_host is not None else 0,
        completion_backend=settings.completion_backend,
    )
