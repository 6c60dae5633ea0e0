"""Tool catalog endpoint."""

from fastapi import APIRouter, Depends

from mcp_host.dependencies import get_tool_host
from mcp_host.host import ToolHost
from mcp_host.models.tools import ToolInfo, ToolListResponse

router = APIRouter(prefix="/api/v1/tools", tags=["tools"])


@router.get("", response_model=ToolListResponse)
async def list_tools(tool_host: ToolHost = Depends(get_tool_host)) -> ToolListResponse:
    """List the tools offered to the completion service."""
    return ToolListResponse(
        tools=[
            ToolInfo(
                name=entry.name,
                description=entry.description,
                parameters=entry.parameters,
            )
            for entry in tool_host.catalog
        ]
    )
