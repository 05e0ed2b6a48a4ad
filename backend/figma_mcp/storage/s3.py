from __future__ import annotations

import uuid
from dataclasses import dataclass
from pathlib import Path

import boto3
import httpx
from loguru import logger

from figma_mcp.core.config import S3Config
from figma_mcp.core.errors import UpstreamAPIError

CONTENT_TYPES = {
    ".png": "image/png",
    ".svg": "image/svg+xml",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
}


@dataclass
class S3UploadResult:
    url: str
    key: str


def content_type_for(path: str | Path) -> str:
    return CONTENT_TYPES.get(Path(path).suffix.lower(), "application/octet-stream")


def get_s3_client(config: S3Config):
    session = boto3.session.Session()
    return session.client(
        "s3",
        aws_access_key_id=config.access_key_id,
        aws_secret_access_key=config.secret_access_key,
        region_name=config.region,
    )


def public_url(config: S3Config, key: str) -> str:
    if config.transfer_acceleration:
        return f"https://{config.bucket_name}.s3-accelerate.amazonaws.com/{key}"
    return f"https://{config.bucket_name}.s3.{config.region}.amazonaws.com/{key}"


def presign_upload(config: S3Config, key: str, content_type: str) -> str:
    s3 = get_s3_client(config)
    return s3.generate_presigned_url(
        ClientMethod="put_object",
        Params={
            "Bucket": config.bucket_name,
            "Key": key,
            "ACL": "public-read",
            "ContentType": content_type,
        },
        ExpiresIn=config.presign_expires_in,
    )


async def upload_file(
    file_path: str | Path,
    config: S3Config,
    http_client: httpx.AsyncClient | None = None,
) -> S3UploadResult:
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    data = path.read_bytes()
    content_type = content_type_for(path)
    key = str(uuid.uuid4())
    presigned_url = presign_upload(config, key, content_type)

    logger.info("Uploading {} to S3 ({} bytes)", path, len(data))
    client = http_client or httpx.AsyncClient()
    try:
        response = await client.put(
            presigned_url,
            content=data,
            headers={"Content-Type": content_type},
        )
    finally:
        if http_client is None:
            await client.aclose()

    if not response.is_success:
        raise UpstreamAPIError(
            f"S3 upload failed: {response.status_code} {response.reason_phrase}",
            status_code=response.status_code,
        )

    url = public_url(config, key)
    logger.info("Uploaded {} to {}", path.name, url)
    return S3UploadResult(url=url, key=key)
