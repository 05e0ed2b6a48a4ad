from fastapi import FastAPI, HTTPException, Request, status
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager

from figma_mcp.services.mcp_server import McpServer


def get_mcp_server(request: Request) -> McpServer:
    server = getattr(request.app.state, "mcp_server", None)
    if server is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="MCP server not initialised")
    return server


def get_session_manager(app: FastAPI) -> StreamableHTTPSessionManager:
    session_manager = getattr(app.state, "mcp_session_manager", None)
    if session_manager is None:
        raise RuntimeError("MCP session manager not initialised")
    return session_manager
