"""figma-mcp CLI: serve the Figma tools over HTTP or stdio."""

from __future__ import annotations

import asyncio

import click
import uvicorn

from figma_mcp.core.config import load_settings, log_server_config, resolve_server_config
from figma_mcp.core.logging import init_logging
from figma_mcp.main import create_app
from figma_mcp.services.mcp_server import build_mcp_server, serve_stdio

VERSION = "0.1.0"


@click.command()
@click.version_option(version=VERSION, prog_name="figma-mcp")
@click.option(
    "--env",
    "env_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to a custom .env file (default: ./.env).",
)
@click.option("--port", type=int, default=None, help="Port for the HTTP server (or set PORT).")
@click.option("--json", "json_output", is_flag=True, default=False, help="Force JSON output (overrides OUTPUT_FORMAT).")
@click.option(
    "--skip-image-downloads",
    is_flag=True,
    default=False,
    help="Do not register the download_figma_images tool.",
)
@click.option("--stdio", is_flag=True, default=False, help="Speak MCP over stdin/stdout instead of HTTP.")
def main(env_file, port, json_output, skip_image_downloads, stdio):
    """Run the Figma MCP server."""
    settings = load_settings(env_file)
    config = resolve_server_config(
        settings,
        port=port,
        json_output=json_output,
        skip_image_downloads=skip_image_downloads,
        env_file=env_file,
    )
    init_logging(settings.log_level, stdio=stdio)

    if stdio:
        server = build_mcp_server(settings, config)
        asyncio.run(serve_stdio(server))
        return

    log_server_config(config)
    app = create_app(server_config=config, settings=settings)
    uvicorn.run(app, host=settings.host, port=config.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
