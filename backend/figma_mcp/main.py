from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from figma_mcp.api.routes import api_router
from figma_mcp.core.config import ServerConfig, Settings, get_settings, resolve_server_config
from figma_mcp.core.logging import init_logging
from figma_mcp.services.mcp_server import McpServer, build_mcp_server


def create_app(
    server_config: ServerConfig | None = None,
    settings: Settings | None = None,
    mcp_server: McpServer | None = None,
) -> FastAPI:
    """Build the HTTP app. Run it with `uvicorn --factory figma_mcp.main:create_app`."""
    settings = settings or get_settings()
    server_config = server_config or resolve_server_config(settings)
    init_logging(settings.log_level)

    mcp_server = mcp_server or build_mcp_server(settings, server_config)
    session_manager = mcp_server.session_manager()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with session_manager.run():
            yield

    app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Mcp-Session-Id"],
    )
    app.state.mcp_server = mcp_server
    app.state.mcp_session_manager = session_manager

    app.include_router(api_router)

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    return app
