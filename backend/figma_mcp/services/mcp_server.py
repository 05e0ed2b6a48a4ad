"""Registers the Figma tools on an MCP SDK server and serves it over stdio or HTTP."""

from __future__ import annotations

from typing import Any

import mcp.types as types
from loguru import logger
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager

from figma_mcp.core.config import ServerConfig, Settings
from figma_mcp.core.errors import ToolError
from figma_mcp.core.logging import LogContext
from figma_mcp.schemas.common import ToolResult
from figma_mcp.tools import ToolContext, ToolRegistry, build_registry
from figma_mcp.tools.registry import FigmaFactory


class McpServer:
    """Wraps an SDK `Server` whose tool handlers dispatch into a `ToolRegistry`.

    Tool failures are raised out of the call handler so the SDK reports them as a
    result with `isError: true` instead of a protocol error.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        settings: Settings,
        config: ServerConfig,
        figma_factory: FigmaFactory | None = None,
    ) -> None:
        self.registry = registry
        self.settings = settings
        self.config = config
        self.figma_factory = figma_factory
        self.server: Server = Server(settings.app_name, version=settings.version)
        self._register_handlers()

    def make_context(self, tool_name: str) -> ToolContext:
        log = LogContext.for_tool(
            tool_name,
            write_artifacts=self.settings.write_debug_logs,
            artifact_dir=self.settings.log_dir,
        )
        return ToolContext(
            settings=self.settings,
            output_format=self.config.output_format,
            log=log,
            figma_factory=self.figma_factory,
        )

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> ToolResult:
        if not self.registry.has(name):
            available = ", ".join(self.registry.list_names())
            raise ToolError(f"Unknown tool: {name}. Available tools: {available}")
        tool = self.registry.get(name)
        return await tool.invoke(arguments, self.make_context(name))

    def _register_handlers(self) -> None:
        @self.server.list_tools()
        async def list_tools() -> list[types.Tool]:
            return [types.Tool(**description) for description in self.registry.describe()]

        # Arguments are validated by the tool itself so error text keeps the tool prefix.
        @self.server.call_tool(validate_input=False)
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
            logger.info("MCP tools/call: {}", name)
            result = await self.call_tool(name, arguments)
            if result.is_error:
                raise ToolError(result.joined_text())
            return result.content

    def session_manager(self) -> StreamableHTTPSessionManager:
        return StreamableHTTPSessionManager(app=self.server, json_response=True, stateless=True)


def build_mcp_server(
    settings: Settings, config: ServerConfig, figma_factory: FigmaFactory | None = None
) -> McpServer:
    registry = build_registry(skip_image_downloads=config.skip_image_downloads)
    return McpServer(registry, settings, config, figma_factory=figma_factory)


async def serve_stdio(server: McpServer) -> None:
    """Serve MCP over this process's stdin/stdout until the client disconnects."""
    logger.info("Serving MCP over stdio")
    async with stdio_server() as (read_stream, write_stream):
        await server.server.run(read_stream, write_stream, server.server.create_initialization_options())
