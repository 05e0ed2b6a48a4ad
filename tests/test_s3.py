"""Tests for the S3 uploader -- boto3 presigning is mocked, PUTs go to a MockTransport."""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock, patch

import httpx
import pytest

from figma_mcp.core.config import S3Config
from figma_mcp.core.errors import UpstreamAPIError
from figma_mcp.storage.s3 import content_type_for, presign_upload, public_url, upload_file


@pytest.fixture
def s3_config() -> S3Config:
    return S3Config(
        region="eu-west-1",
        bucket_name="design-assets",
        access_key_id="AKIATEST",
        secret_access_key="secret",
    )


# =====================================================================
# Helpers
# =====================================================================


class TestContentTypes:
    def test_known_extensions(self):
        assert content_type_for("a.png") == "image/png"
        assert content_type_for("a.SVG") == "image/svg+xml"
        assert content_type_for("a.jpeg") == "image/jpeg"

    def test_unknown_extension(self):
        assert content_type_for("a.bin") == "application/octet-stream"


class TestPublicUrl:
    def test_regional_url(self, s3_config):
        assert public_url(s3_config, "k") == "https://design-assets.s3.eu-west-1.amazonaws.com/k"

    def test_accelerated_url(self, s3_config):
        s3_config.transfer_acceleration = True
        assert public_url(s3_config, "k") == "https://design-assets.s3-accelerate.amazonaws.com/k"


def test_presign_requests_public_read_put(s3_config):
    client = MagicMock()
    client.generate_presigned_url.return_value = "https://signed.test/put"

    with patch("figma_mcp.storage.s3.get_s3_client", return_value=client):
        url = presign_upload(s3_config, "key-1", "image/png")

    assert url == "https://signed.test/put"
    kwargs = client.generate_presigned_url.call_args.kwargs
    assert kwargs["ClientMethod"] == "put_object"
    assert kwargs["ExpiresIn"] == 3600
    assert kwargs["Params"] == {
        "Bucket": "design-assets",
        "Key": "key-1",
        "ACL": "public-read",
        "ContentType": "image/png",
    }


# =====================================================================
# Upload
# =====================================================================


class TestUploadFile:
    def _run(self, path, config, handler):
        async def go():
            async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
                return await upload_file(path, config, http_client=client)

        return asyncio.run(go())

    def test_successful_upload(self, tmp_path, s3_config):
        path = tmp_path / "icon.svg"
        path.write_bytes(b"<svg/>")
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        with patch("figma_mcp.storage.s3.presign_upload", return_value="https://signed.test/put") as presign:
            result = self._run(path, s3_config, handler)

        assert presign.call_args.args[2] == "image/svg+xml"
        assert seen[0].method == "PUT"
        assert seen[0].headers["Content-Type"] == "image/svg+xml"
        assert seen[0].content == b"<svg/>"
        assert result.url == f"https://design-assets.s3.eu-west-1.amazonaws.com/{result.key}"

    def test_non_success_is_fatal(self, tmp_path, s3_config):
        path = tmp_path / "a.png"
        path.write_bytes(b"png")

        with patch("figma_mcp.storage.s3.presign_upload", return_value="https://signed.test/put"):
            with pytest.raises(UpstreamAPIError, match="S3 upload failed: 403"):
                self._run(path, s3_config, lambda request: httpx.Response(403))

    def test_missing_file(self, tmp_path, s3_config):
        with pytest.raises(FileNotFoundError):
            asyncio.run(upload_file(tmp_path / "missing.png", s3_config))
