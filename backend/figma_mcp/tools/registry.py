from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable

from pydantic import BaseModel

from figma_mcp.core.config import OutputFormat, S3Config, Settings
from figma_mcp.core.errors import ToolError
from figma_mcp.core.logging import LogContext
from figma_mcp.schemas.common import ToolResult
from figma_mcp.services.figma import FigmaService
from figma_mcp.services.validation import validate_arguments
from figma_mcp.storage.s3 import S3UploadResult, upload_file

FigmaFactory = Callable[[str], FigmaService]
S3Upload = Callable[[Path, S3Config], Awaitable[S3UploadResult]]


@dataclass
class ToolContext:
    settings: Settings
    output_format: OutputFormat
    log: LogContext
    figma_factory: FigmaFactory | None = None
    upload: S3Upload = upload_file

    def figma_service(self, oauth_token: str) -> FigmaService:
        if self.figma_factory is not None:
            return self.figma_factory(oauth_token)
        return FigmaService(
            oauth_token,
            base_url=self.settings.figma_api_base_url,
            timeout=self.settings.figma_request_timeout,
        )


ToolHandler = Callable[[Any, ToolContext], Awaitable[ToolResult]]


@dataclass
class ToolDefinition:
    name: str
    description: str
    request_model: type[BaseModel]
    handler: ToolHandler
    error_prefix: str

    def describe(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.request_model.model_json_schema(by_alias=True),
        }

    async def invoke(self, arguments: dict[str, Any] | None, context: ToolContext) -> ToolResult:
        validated = validate_arguments(self.request_model, arguments)
        if not validated.ok:
            context.log.warning("Rejected {} call: {}", self.name, validated.error)
            return ToolResult.error(f"{self.error_prefix}: Invalid arguments: {validated.error}")

        try:
            return await self.handler(validated.unwrap(), context)
        except ToolError as exc:
            context.log.error("{} failed: {}", self.name, exc)
            return ToolResult.error(f"{self.error_prefix}: {exc}")
        except Exception as exc:
            context.log.exception("{} failed unexpectedly", self.name)
            return ToolResult.error(f"{self.error_prefix}: {exc}")


class ToolRegistry:
    def __init__(self) -> None:
        self._tools: dict[str, ToolDefinition] = {}

    def register(self, tool: ToolDefinition) -> None:
        self._tools[tool.name] = tool

    def get(self, name: str) -> ToolDefinition:
        tool = self._tools.get(name)
        if tool is None:
            available = ", ".join(self.list_names())
            raise KeyError(f"Unknown tool '{name}'. Available: {available}")
        return tool

    def has(self, name: str) -> bool:
        return name in self._tools

    def list_names(self) -> list[str]:
        return list(self._tools.keys())

    def describe(self) -> list[dict[str, Any]]:
        return [tool.describe() for tool in self._tools.values()]
