from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Literal

from loguru import logger
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

OutputFormat = Literal["json", "yaml"]
ConfigSource = Literal["cli", "env", "default"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "Figma MCP Server"
    version: str = "0.1.0"

    host: str = "0.0.0.0"
    port: int = 3333
    output_format: OutputFormat = "json"
    skip_image_downloads: bool = False

    figma_api_base_url: str = "https://api.figma.com/v1"
    figma_request_timeout: float = 30.0
    image_temp_dir: str = "./temp-figma-images"

    aws_region: str | None = None
    aws_bucket_name: str | None = None
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_transfer_acceleration: bool = False
    s3_presign_expires_in: int = 3600

    log_level: str = "INFO"
    write_debug_logs: bool = False
    log_dir: str = "logs"

    cors_origins: str = "*"

    @field_validator("output_format", mode="before")
    @classmethod
    def normalize_output_format(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@dataclass
class S3Config:
    region: str
    bucket_name: str
    access_key_id: str
    secret_access_key: str
    transfer_acceleration: bool = False
    presign_expires_in: int = 3600


@dataclass
class ServerConfig:
    port: int
    output_format: OutputFormat
    skip_image_downloads: bool
    env_file: str
    sources: dict[str, ConfigSource] = field(default_factory=dict)


@lru_cache
def get_settings() -> Settings:
    return Settings()


def load_settings(env_file: str | None = None) -> Settings:
    """Build settings from the process environment and an optional .env file.

    A custom file replaces the default ``.env`` lookup entirely.
    """
    if env_file is None:
        return get_settings()
    return Settings(_env_file=env_file)


def get_s3_config(settings: Settings) -> S3Config | None:
    if not (
        settings.aws_region
        and settings.aws_bucket_name
        and settings.aws_access_key_id
        and settings.aws_secret_access_key
    ):
        return None
    return S3Config(
        region=settings.aws_region,
        bucket_name=settings.aws_bucket_name,
        access_key_id=settings.aws_access_key_id,
        secret_access_key=settings.aws_secret_access_key,
        transfer_acceleration=settings.aws_transfer_acceleration,
        presign_expires_in=settings.s3_presign_expires_in,
    )


def resolve_server_config(
    settings: Settings,
    *,
    port: int | None = None,
    json_output: bool = False,
    skip_image_downloads: bool = False,
    env_file: str | None = None,
) -> ServerConfig:
    """Apply command-line flags over settings, recording where each value came from.

    Precedence is flag, then environment (including the .env file), then default.
    """
    explicit = settings.model_fields_set

    def _source(name: str, flag_set: bool) -> ConfigSource:
        if flag_set:
            return "cli"
        return "env" if name in explicit else "default"

    sources: dict[str, ConfigSource] = {
        "port": _source("port", port is not None),
        "output_format": _source("output_format", json_output),
        "skip_image_downloads": _source("skip_image_downloads", skip_image_downloads),
        "env_file": "cli" if env_file else "default",
    }
    env_path = Path(env_file).resolve() if env_file else Path.cwd() / ".env"

    return ServerConfig(
        port=port if port is not None else settings.port,
        output_format="json" if json_output else settings.output_format,
        skip_image_downloads=skip_image_downloads or settings.skip_image_downloads,
        env_file=str(env_path),
        sources=sources,
    )


def log_server_config(config: ServerConfig) -> None:
    logger.info("Figma MCP Server configuration:")
    logger.info("- ENV_FILE: {} (source: {})", config.env_file, config.sources.get("env_file"))
    logger.info("- PORT: {} (source: {})", config.port, config.sources.get("port"))
    logger.info("- OUTPUT_FORMAT: {} (source: {})", config.output_format, config.sources.get("output_format"))
    logger.info(
        "- SKIP_IMAGE_DOWNLOADS: {} (source: {})",
        config.skip_image_downloads,
        config.sources.get("skip_image_downloads"),
    )
    logger.info("Authentication: every tool call must include the figmaOAuthToken argument")
