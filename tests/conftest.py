"""Shared fixtures: settings, a fake Figma API and sample design payloads."""

from __future__ import annotations

import io
from typing import Any

import httpx
import pytest
from PIL import Image

from figma_mcp.core.config import Settings
from figma_mcp.core.logging import LogContext
from figma_mcp.services.figma import FigmaService
from figma_mcp.storage.s3 import S3UploadResult
from figma_mcp.tools.registry import ToolContext

CDN_HOST = "cdn.figma.test"


def make_png(width: int, height: int, color: tuple[int, int, int] = (200, 30, 30)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


SVG_ICON = b'<svg xmlns="http://www.w3.org/2000/svg" width="24" height="16" viewBox="0 0 24 16"><path d="M0 0h24v16H0z"/></svg>'


class FakeFigmaAPI:
    """Routes Figma REST calls to canned payloads and records every request."""

    def __init__(
        self,
        file_response: dict[str, Any] | None = None,
        node_response: dict[str, Any] | None = None,
        fill_urls: dict[str, str] | None = None,
        render_urls: dict[str, str] | None = None,
        assets: dict[str, bytes] | None = None,
        status_code: int = 200,
    ) -> None:
        self.file_response = file_response or {}
        self.node_response = node_response or {}
        self.fill_urls = fill_urls or {}
        self.render_urls = render_urls or {}
        self.assets = assets or {}
        self.status_code = status_code
        self.requests: list[httpx.Request] = []
        self.tokens: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.url.host == CDN_HOST:
            if path not in self.assets:
                return httpx.Response(404)
            return httpx.Response(200, content=self.assets[path])

        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"status": self.status_code, "err": "Not found"})

        if path.startswith("/v1/images/"):
            ids = request.url.params["ids"].split(",")
            return httpx.Response(200, json={"err": None, "images": {i: self.render_urls.get(i) for i in ids}})
        if path.endswith("/images"):
            return httpx.Response(200, json={"error": False, "meta": {"images": self.fill_urls}})
        if path.endswith("/nodes"):
            return httpx.Response(200, json=self.node_response)
        return httpx.Response(200, json=self.file_response)

    def factory(self, oauth_token: str) -> FigmaService:
        self.tokens.append(oauth_token)
        return FigmaService(oauth_token, transport=httpx.MockTransport(self.handler))

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


class FakeUploader:
    def __init__(self) -> None:
        self.uploaded: list[str] = []

    async def __call__(self, path, config) -> S3UploadResult:
        self.uploaded.append(path.name)
        key = f"key-{len(self.uploaded)}"
        return S3UploadResult(url=f"https://{config.bucket_name}.s3.{config.region}.amazonaws.com/{key}", key=key)


def _solid(r: float, g: float, b: float) -> dict[str, Any]:
    return {"type": "SOLID", "color": {"r": r, "g": g, "b": b, "a": 1}}


def sample_document() -> dict[str, Any]:
    return {
        "id": "1:2",
        "name": "Hero",
        "type": "FRAME",
        "layoutMode": "VERTICAL",
        "itemSpacing": 16,
        "paddingTop": 24,
        "paddingRight": 24,
        "paddingBottom": 24,
        "paddingLeft": 24,
        "fills": [_solid(1, 1, 1)],
        "children": [
            {
                "id": "1:3",
                "name": "Title",
                "type": "TEXT",
                "characters": "Welcome",
                "style": {"fontFamily": "Inter", "fontWeight": 700, "fontSize": 32, "lineHeightPx": 40},
                "fills": [_solid(0, 0, 0)],
            },
            {
                "id": "1:4",
                "name": "Photo",
                "type": "RECTANGLE",
                "fills": [{"type": "IMAGE", "imageRef": "img-abc", "scaleMode": "FILL"}],
            },
            {
                "id": "1:5",
                "name": "Icon",
                "type": "GROUP",
                "children": [
                    {"id": "1:6", "name": "Stroke", "type": "VECTOR"},
                    {"id": "1:7", "name": "Dot", "type": "ELLIPSE"},
                ],
            },
            {
                "id": "1:8",
                "name": "Hidden note",
                "type": "TEXT",
                "visible": False,
                "characters": "draft",
            },
            {
                "id": "1:9",
                "name": "Card",
                "type": "FRAME",
                "fills": [_solid(1, 1, 1)],
                "children": [
                    {"id": "1:10", "name": "Caption", "type": "TEXT", "characters": "Hello"},
                ],
            },
        ],
    }


@pytest.fixture
def node_response() -> dict[str, Any]:
    return {
        "name": "Landing Page",
        "lastModified": "2024-05-01T10:00:00Z",
        "thumbnailUrl": "https://example.com/thumb.png",
        "nodes": {
            "1:2": {
                "document": sample_document(),
                "components": {},
                "componentSets": {},
                "styles": {},
            }
        },
    }


@pytest.fixture
def file_response() -> dict[str, Any]:
    return {
        "name": "Landing Page",
        "lastModified": "2024-05-01T10:00:00Z",
        "thumbnailUrl": "https://example.com/thumb.png",
        "document": {
            "id": "0:0",
            "name": "Document",
            "type": "DOCUMENT",
            "children": [
                {"id": "0:1", "name": "Page 1", "type": "CANVAS", "children": [sample_document()]},
            ],
        },
        "components": {
            "5:1": {"key": "abc123", "name": "Button", "componentSetId": "5:0", "description": ""},
        },
        "componentSets": {
            "5:0": {"key": "set123", "name": "Buttons", "description": "All buttons"},
        },
        "styles": {},
    }


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        aws_region="us-east-1",
        aws_bucket_name="design-assets",
        aws_access_key_id="AKIATEST",
        aws_secret_access_key="secret",
        image_temp_dir=str(tmp_path / "images"),
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture
def settings_without_s3(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        aws_region=None,
        aws_bucket_name=None,
        aws_access_key_id=None,
        aws_secret_access_key=None,
        image_temp_dir=str(tmp_path / "images"),
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture
def uploader() -> FakeUploader:
    return FakeUploader()


@pytest.fixture
def make_context(uploader):
    def _make(settings: Settings, api: FakeFigmaAPI, output_format: str = "json") -> ToolContext:
        return ToolContext(
            settings=settings,
            output_format=output_format,
            log=LogContext.for_tool("test"),
            figma_factory=api.factory,
            upload=uploader,
        )

    return _make
