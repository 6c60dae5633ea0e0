"""Health check response model."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for the health check endpoint.

    Attributes:
        status: "ok" when the tool host is ready, "degraded" otherwise.
        version: The version of mcp-host.
        tool_provider_connected: Whether the tool provider connected at startup.
        tool_count: Number of tools in the catalog.
        completion_backend: Configured completion backend.
    """

    status: str = Field(..., description="Health status of the service")
    version: str = Field(..., description="Version of mcp-host")
    tool_provider_connected: bool = Field(
        default=False, description="Whether the tool provider is connected"
    )
    tool_count: int = Field(default=0, description="Number of tools in the catalog")
    completion_backend: str | None = Field(
        default=None, description="Configured completion backend"
    )
