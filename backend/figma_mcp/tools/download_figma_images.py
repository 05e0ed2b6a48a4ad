from __future__ import annotations

from pathlib import Path

from figma_mcp.core.config import get_s3_config
from figma_mcp.core.errors import ConfigurationMissingError
from figma_mcp.schemas.common import ToolResult
from figma_mcp.schemas.figma import DownloadImagesRequest
from figma_mcp.services.formatting import format_download_report
from figma_mcp.services.image_plan import plan_downloads
from figma_mcp.storage.local import remove_dir_if_empty, remove_file
from figma_mcp.storage.s3 import S3UploadResult
from figma_mcp.tools.registry import ToolContext, ToolDefinition

DESCRIPTION = (
    "Download Figma images and upload them to S3 in bulk, returning public URLs. Call this "
    "AFTER get_figma_data. Handles two image types: (1) IMAGE-SVG nodes (vector graphics, no "
    "imageRef needed), (2) IMAGE nodes with imageRef (raster images, imageRef REQUIRED). "
    "Applies cropping when requested, uploads with public access and returns the URLs. Use the "
    "imageDownloadArguments from get_figma_data output to fill needsCropping, cropTransform, "
    "requiresImageDimensions and filenameSuffix. Temporary files are cleaned up automatically."
)

MISSING_S3_MESSAGE = (
    "S3 configuration not found. Required environment variables: "
    "AWS_REGION, AWS_BUCKET_NAME, AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY"
)


async def download_figma_images(request: DownloadImagesRequest, context: ToolContext) -> ToolResult:
    s3_config = get_s3_config(context.settings)
    if s3_config is None:
        raise ConfigurationMissingError(MISSING_S3_MESSAGE)

    plan = plan_downloads(request.nodes)
    context.log.info(
        "Planned {} downloads for {} requested images from file {}",
        len(plan.records),
        len(request.nodes),
        request.file_key,
    )

    async def upload(path: Path) -> S3UploadResult:
        return await context.upload(path, s3_config)

    temp_dir = Path(context.settings.image_temp_dir)
    try:
        async with context.figma_service(request.figma_oauth_token) as figma:
            results = await figma.download_images(
                request.file_key,
                temp_dir,
                plan.records,
                png_scale=request.png_scale,
                upload=upload,
            )
    finally:
        for record in plan.records:
            remove_file(temp_dir / record.file_name)
        remove_dir_if_empty(temp_dir)

    return ToolResult.text(format_download_report(plan, results))


download_figma_images_tool = ToolDefinition(
    name="download_figma_images",
    description=DESCRIPTION,
    request_model=DownloadImagesRequest,
    handler=download_figma_images,
    error_prefix="Failed to download images",
)
