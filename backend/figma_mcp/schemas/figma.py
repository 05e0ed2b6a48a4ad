from __future__ import annotations

import re

from pydantic import Field, field_validator, model_validator

from figma_mcp.schemas.common import BaseSchema

FILE_KEY_PATTERN = re.compile(r"^[a-zA-Z0-9]+$")
NODE_ID_PATTERN = re.compile(r"^I?\d+[:|-]\d+(?:;\d+[:|-]\d+)*$")
FILE_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_.-]+\.(png|svg)$")


def normalize_node_id(node_id: str | None) -> str | None:
    """Figma URLs use `1-2`; the API expects `1:2`."""
    return node_id.replace("-", ":") if node_id else node_id


def _check_file_key(value: str) -> str:
    if not FILE_KEY_PATTERN.match(value):
        raise ValueError("File key must be alphanumeric")
    return value


def _check_node_id(value: str | None) -> str | None:
    if value is not None and not NODE_ID_PATTERN.match(value):
        raise ValueError("Node ID must be like '1234:5678' or 'I5666:180910;1:10515;1:10336'")
    return value


class GetFigmaDataRequest(BaseSchema):
    file_key: str = Field(
        description=(
            "The key of the Figma file to fetch, often found in a provided URL like "
            "figma.com/(file|design)/<fileKey>/..."
        )
    )
    node_id: str | None = Field(
        default=None,
        description=(
            "The ID of the node to fetch, often found as URL parameter node-id=<nodeId>, "
            "always use if provided. Use format '1234:5678' or 'I5666:180910;1:10515;1:10336'."
        ),
    )
    depth: int | None = Field(
        default=None,
        ge=1,
        description=(
            "OPTIONAL. Do NOT use unless explicitly requested by the user. "
            "Controls how many levels deep to traverse the node tree."
        ),
    )
    figma_oauth_token: str = Field(
        alias="figmaOAuthToken",
        min_length=1,
        description="User's Figma OAuth access token. Required for all requests.",
    )

    @field_validator("file_key")
    @classmethod
    def validate_file_key(cls, value: str) -> str:
        return _check_file_key(value)

    @field_validator("node_id")
    @classmethod
    def validate_node_id(cls, value: str | None) -> str | None:
        return _check_node_id(value)


class ImageNodeRequest(BaseSchema):
    node_id: str | None = Field(
        default=None,
        description=(
            "The ID of the Figma image node from get_figma_data output (node.id). "
            "Format: '1234:5678' or with hyphens '1234-5678'."
        ),
    )
    image_ref: str | None = Field(
        default=None,
        description=(
            "REQUIRED for raster images (type='IMAGE'): the imageRef from the node's fills. "
            "OMIT for vector images (type='IMAGE-SVG')."
        ),
    )
    file_name: str = Field(
        description=(
            "Desired filename for the uploaded file. Use .svg for IMAGE-SVG nodes, "
            ".png for IMAGE nodes, e.g. 'svg-195-3012.svg' or 'image-195-3184.png'."
        )
    )
    needs_cropping: bool = Field(
        default=False,
        description="From node.imageDownloadArguments.needsCropping. Default: false.",
    )
    crop_transform: list[list[float]] | None = Field(
        default=None,
        description=(
            "From node.imageDownloadArguments.cropTransform. Only needed if needsCropping=true. "
            "Format: [[a,b,c],[d,e,f]]."
        ),
    )
    requires_image_dimensions: bool = Field(
        default=False,
        description="From node.imageDownloadArguments.requiresImageDimensions. Default: false.",
    )
    filename_suffix: str | None = Field(
        default=None,
        description=(
            "From node.imageDownloadArguments.filenameSuffix. Distinguishes crops of the "
            "same imageRef. Format: 6-char hex string (e.g. '157bc8')."
        ),
    )

    @field_validator("node_id")
    @classmethod
    def validate_node_id(cls, value: str | None) -> str | None:
        return _check_node_id(value)

    @field_validator("file_name")
    @classmethod
    def validate_file_name(cls, value: str) -> str:
        if not FILE_NAME_PATTERN.match(value):
            raise ValueError(
                "File names must contain only letters, numbers, underscores, dots, "
                "or hyphens, and end with .png or .svg."
            )
        return value

    @field_validator("crop_transform")
    @classmethod
    def validate_crop_transform(cls, value: list[list[float]] | None) -> list[list[float]] | None:
        if value is not None and (len(value) != 2 or any(len(row) != 3 for row in value)):
            raise ValueError("Crop transform must be a 2x3 matrix [[a,b,c],[d,e,f]]")
        return value

    @model_validator(mode="after")
    def require_identifier(self) -> "ImageNodeRequest":
        if not self.node_id and not self.image_ref:
            raise ValueError("Each image request needs a nodeId or an imageRef")
        return self


class DownloadImagesRequest(BaseSchema):
    file_key: str = Field(description="The key of the Figma file containing the images")
    nodes: list[ImageNodeRequest] = Field(
        min_length=1,
        description=(
            "Image nodes to download and upload. Take them from get_figma_data output: "
            "nodes with type='IMAGE-SVG' (vector) or type='IMAGE' (raster, imageRef required). "
            "Include imageDownloadArguments properties when present."
        ),
    )
    png_scale: float = Field(
        default=2,
        gt=0,
        le=4,
        description="Export scale for PNG images. Defaults to 2. Affects PNG images only.",
    )
    figma_oauth_token: str = Field(
        alias="figmaOAuthToken",
        min_length=1,
        description="User's Figma OAuth access token. Required for all requests.",
    )

    @field_validator("file_key")
    @classmethod
    def validate_file_key(cls, value: str) -> str:
        return _check_file_key(value)
