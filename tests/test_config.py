"""Tests for settings loading, server config precedence and S3 config."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from figma_mcp.core.config import Settings, get_s3_config, resolve_server_config


# =====================================================================
# Precedence
# =====================================================================


class TestResolveServerConfig:
    def test_defaults_when_nothing_set(self, monkeypatch):
        monkeypatch.delenv("PORT", raising=False)
        monkeypatch.delenv("OUTPUT_FORMAT", raising=False)
        monkeypatch.delenv("SKIP_IMAGE_DOWNLOADS", raising=False)

        config = resolve_server_config(Settings(_env_file=None))

        assert config.port == 3333
        assert config.output_format == "json"
        assert config.skip_image_downloads is False
        assert config.sources["port"] == "default"
        assert config.sources["output_format"] == "default"

    def test_environment_beats_default(self, monkeypatch):
        monkeypatch.setenv("PORT", "4100")
        monkeypatch.setenv("OUTPUT_FORMAT", "yaml")

        config = resolve_server_config(Settings(_env_file=None))

        assert config.port == 4100
        assert config.output_format == "yaml"
        assert config.sources["port"] == "env"
        assert config.sources["output_format"] == "env"

    def test_flag_beats_environment(self, monkeypatch):
        monkeypatch.setenv("PORT", "4100")
        monkeypatch.setenv("OUTPUT_FORMAT", "yaml")

        config = resolve_server_config(Settings(_env_file=None), port=5000, json_output=True)

        assert config.port == 5000
        assert config.output_format == "json"
        assert config.sources["port"] == "cli"
        assert config.sources["output_format"] == "cli"

    def test_skip_flag_and_env_file_source(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SKIP_IMAGE_DOWNLOADS", raising=False)
        env_file = tmp_path / "custom.env"
        env_file.write_text("PORT=4200\n")

        settings = Settings(_env_file=str(env_file))
        config = resolve_server_config(settings, skip_image_downloads=True, env_file=str(env_file))

        assert config.port == 4200
        assert config.sources["port"] == "env"
        assert config.skip_image_downloads is True
        assert config.sources["skip_image_downloads"] == "cli"
        assert config.sources["env_file"] == "cli"
        assert config.env_file == str(env_file.resolve())


# =====================================================================
# S3
# =====================================================================


class TestS3Config:
    def test_complete_credentials(self, settings):
        config = get_s3_config(settings)

        assert config is not None
        assert config.bucket_name == "design-assets"
        assert config.region == "us-east-1"
        assert config.presign_expires_in == 3600

    def test_any_missing_value_disables_s3(self, settings_without_s3):
        assert get_s3_config(settings_without_s3) is None

        partial = settings_without_s3.model_copy(update={"aws_region": "eu-west-1", "aws_bucket_name": "b"})
        assert get_s3_config(partial) is None


def test_cors_origin_list_splits_and_strips():
    settings = Settings(_env_file=None, cors_origins="http://a.test, http://b.test ,")
    assert settings.cors_origin_list == ["http://a.test", "http://b.test"]


class TestOutputFormat:
    def test_unset_format_is_json_from_default(self, monkeypatch):
        monkeypatch.delenv("OUTPUT_FORMAT", raising=False)

        config = resolve_server_config(Settings(_env_file=None))

        assert config.output_format == "json"
        assert config.sources["output_format"] == "default"

    @pytest.mark.parametrize("raw, expected", [("JSON", "json"), (" Yaml ", "yaml")])
    def test_format_is_case_insensitive(self, monkeypatch, raw, expected):
        monkeypatch.setenv("OUTPUT_FORMAT", raw)

        assert Settings(_env_file=None).output_format == expected

    def test_unknown_format_rejected(self, monkeypatch):
        monkeypatch.setenv("OUTPUT_FORMAT", "xml")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)
