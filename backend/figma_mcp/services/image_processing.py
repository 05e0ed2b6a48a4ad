from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path

from loguru import logger
from PIL import Image

_SVG_LENGTH = re.compile(r"^\s*([0-9]*\.?[0-9]+)")


@dataclass
class ImageDimensions:
    width: int
    height: int


@dataclass
class ProcessedImage:
    file_path: Path
    final_dimensions: ImageDimensions
    was_cropped: bool
    css_variables: str | None = None


def _parse_svg_length(value: str | None) -> int | None:
    if not value:
        return None
    match = _SVG_LENGTH.match(value)
    return round(float(match.group(1))) if match else None


def _svg_dimensions(path: Path) -> ImageDimensions:
    root = ET.parse(path).getroot()
    width = _parse_svg_length(root.get("width"))
    height = _parse_svg_length(root.get("height"))
    if width is None or height is None:
        view_box = (root.get("viewBox") or "").replace(",", " ").split()
        if len(view_box) == 4:
            width = width or round(float(view_box[2]))
            height = height or round(float(view_box[3]))
    return ImageDimensions(width=width or 0, height=height or 0)


def get_image_dimensions(path: Path) -> ImageDimensions:
    if path.suffix.lower() == ".svg":
        return _svg_dimensions(path)
    with Image.open(path) as image:
        width, height = image.size
    return ImageDimensions(width=width, height=height)


def crop_box_for_transform(
    width: int, height: int, transform: list[list[float]]
) -> tuple[int, int, int, int] | None:
    """Translate a Figma imageTransform into a pixel crop box.

    The transform is ``[[scaleX, skewX, translateX], [skewY, scaleY, translateY]]``
    in normalised image coordinates. Returns ``None`` when the crop is empty.
    """
    scale_x, _, translate_x = transform[0]
    _, scale_y, translate_y = transform[1]

    left = max(0, round(translate_x * width))
    top = max(0, round(translate_y * height))
    crop_width = min(width - left, round(scale_x * width))
    crop_height = min(height - top, round(scale_y * height))
    if crop_width <= 0 or crop_height <= 0:
        return None
    return left, top, left + crop_width, top + crop_height


def apply_crop_transform(path: Path, transform: list[list[float]]) -> bool:
    with Image.open(path) as image:
        image.load()
        box = crop_box_for_transform(image.width, image.height, transform)
        if box is None:
            logger.warning("Skipping crop of {}: transform yields an empty region", path)
            return False
        if box == (0, 0, image.width, image.height):
            return False
        cropped = image.crop(box)
    cropped.save(path)
    return True


def process_downloaded_image(
    path: Path,
    needs_cropping: bool = False,
    crop_transform: list[list[float]] | None = None,
    requires_image_dimensions: bool = False,
) -> ProcessedImage:
    was_cropped = False
    if needs_cropping and crop_transform and path.suffix.lower() != ".svg":
        was_cropped = apply_crop_transform(path, crop_transform)

    final = get_image_dimensions(path)
    css_variables = None
    if requires_image_dimensions:
        css_variables = f"--original-width: {final.width}px; --original-height: {final.height}px;"

    return ProcessedImage(
        file_path=path,
        final_dimensions=final,
        was_cropped=was_cropped,
        css_variables=css_variables,
    )
