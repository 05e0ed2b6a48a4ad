from __future__ import annotations

from pathlib import Path
from typing import Any, Awaitable, Callable

import httpx
from loguru import logger

from figma_mcp.core.errors import UpstreamAPIError
from figma_mcp.services.image_plan import DownloadRecord, DownloadResult
from figma_mcp.services.image_processing import process_downloaded_image
from figma_mcp.storage.local import save_download
from figma_mcp.storage.s3 import S3UploadResult

Uploader = Callable[[Path], Awaitable[S3UploadResult]]

SVG_EXPORT_OPTIONS = {
    "svg_outline_text": "true",
    "svg_include_id": "false",
    "svg_simplify_stroke": "true",
}


class FigmaService:
    """Thin async client over the Figma REST endpoints the tools need."""

    def __init__(
        self,
        oauth_token: str,
        base_url: str = "https://api.figma.com/v1",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._headers = {"Authorization": f"Bearer {oauth_token}"}
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def __aenter__(self) -> "FigmaService":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, endpoint: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        url = f"{self.base_url}{endpoint}"
        logger.debug("Calling {}", url)
        try:
            response = await self._client.get(url, params=params, headers=self._headers)
        except httpx.HTTPError as exc:
            raise UpstreamAPIError(f"Failed to make request to Figma API: {exc}") from exc

        if not response.is_success:
            detail = response.reason_phrase
            try:
                body = response.json()
                detail = body.get("err") or body.get("message") or detail
            except ValueError:
                pass
            raise UpstreamAPIError(
                f"Failed to make request to Figma API: {response.status_code} {detail}",
                status_code=response.status_code,
            )
        return response.json()

    async def get_raw_file(self, file_key: str, depth: int | None = None) -> dict[str, Any]:
        params = {"depth": depth} if depth else None
        return await self._request(f"/files/{file_key}", params)

    async def get_raw_node(self, file_key: str, node_id: str, depth: int | None = None) -> dict[str, Any]:
        params: dict[str, Any] = {"ids": node_id}
        if depth:
            params["depth"] = depth
        return await self._request(f"/files/{file_key}/nodes", params)

    async def get_image_fill_urls(self, file_key: str) -> dict[str, str]:
        data = await self._request(f"/files/{file_key}/images")
        return (data.get("meta") or {}).get("images") or {}

    async def get_node_render_urls(
        self, file_key: str, node_ids: list[str], image_format: str, scale: float = 2
    ) -> dict[str, str]:
        if not node_ids:
            return {}
        params: dict[str, Any] = {"ids": ",".join(node_ids), "format": image_format}
        if image_format == "png":
            params["scale"] = scale
        else:
            params.update(SVG_EXPORT_OPTIONS)
        data = await self._request(f"/images/{file_key}", params)
        return {node_id: url for node_id, url in (data.get("images") or {}).items() if url}

    async def fetch_bytes(self, url: str) -> bytes:
        try:
            response = await self._client.get(url, follow_redirects=True)
        except httpx.HTTPError as exc:
            raise UpstreamAPIError(f"Failed to download image: {exc}") from exc
        if not response.is_success:
            raise UpstreamAPIError(
                f"Failed to download image: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )
        return response.content

    async def _resolve_urls(
        self, file_key: str, records: list[DownloadRecord], png_scale: float
    ) -> dict[int, str | None]:
        fill_urls: dict[str, str] = {}
        if any(record.image_ref for record in records):
            fill_urls = await self.get_image_fill_urls(file_key)

        render = [record for record in records if record.node_id and not record.image_ref]
        png_urls = await self.get_node_render_urls(
            file_key, [r.node_id for r in render if not r.is_svg], "png", png_scale
        )
        svg_urls = await self.get_node_render_urls(
            file_key, [r.node_id for r in render if r.is_svg], "svg"
        )

        resolved: dict[int, str | None] = {}
        for index, record in enumerate(records):
            if record.image_ref:
                resolved[index] = fill_urls.get(record.image_ref)
            elif record.is_svg:
                resolved[index] = svg_urls.get(record.node_id)
            else:
                resolved[index] = png_urls.get(record.node_id)
        return resolved

    async def download_images(
        self,
        file_key: str,
        local_dir: str | Path,
        records: list[DownloadRecord],
        png_scale: float = 2,
        upload: Uploader | None = None,
    ) -> list[DownloadResult]:
        """Fetch, post-process and optionally upload each record in order.

        Any record that cannot be resolved or uploaded fails the whole batch.
        """
        if not records:
            return []

        urls = await self._resolve_urls(file_key, records, png_scale)
        results: list[DownloadResult] = []
        for index, record in enumerate(records):
            url = urls.get(index)
            if not url:
                target = record.image_ref or record.node_id
                raise UpstreamAPIError(f"Figma returned no image URL for {target}")

            path = save_download(local_dir, record.file_name, await self.fetch_bytes(url))
            processed = process_downloaded_image(
                path,
                needs_cropping=record.needs_cropping,
                crop_transform=record.crop_transform,
                requires_image_dimensions=record.requires_image_dimensions,
            )
            result = DownloadResult(
                file_path=str(path),
                width=processed.final_dimensions.width,
                height=processed.final_dimensions.height,
                was_cropped=processed.was_cropped,
                css_variables=processed.css_variables,
            )
            if upload is not None:
                uploaded = await upload(path)
                result.storage_url = uploaded.url
            results.append(result)
        return results
