from __future__ import annotations

from fastapi import APIRouter, Depends
from starlette.types import Receive, Scope, Send

from figma_mcp.api.deps import get_mcp_server, get_session_manager
from figma_mcp.services.mcp_server import McpServer

router = APIRouter(tags=["mcp"])


class StreamableHTTPEndpoint:
    """Raw ASGI endpoint handing `/mcp` to the SDK's streamable HTTP transport."""

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        session_manager = get_session_manager(scope["app"])
        await session_manager.handle_request(scope, receive, send)


router.add_route("/mcp", StreamableHTTPEndpoint(), name="mcp")


@router.get("/mcp/tools")
def list_tools(server: McpServer = Depends(get_mcp_server)) -> dict:
    return {"tools": server.registry.describe()}
