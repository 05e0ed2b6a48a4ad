"""Collapse image export requests into the downloads that satisfy them.

Raster fills that share an ``imageRef`` (and no crop suffix) are downloaded
once and reported under every filename that asked for them. Rendered nodes
are never merged, since two node ids may render different content.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Iterable

from figma_mcp.core.errors import ValidationFailure
from figma_mcp.schemas.figma import ImageNodeRequest, normalize_node_id


@dataclass
class DownloadRecord:
    file_name: str
    image_ref: str | None = None
    node_id: str | None = None
    needs_cropping: bool = False
    crop_transform: list[list[float]] | None = None
    requires_image_dimensions: bool = False

    @property
    def is_svg(self) -> bool:
        return self.file_name.lower().endswith(".svg")


@dataclass
class DownloadResult:
    file_path: str
    width: int
    height: int
    was_cropped: bool = False
    css_variables: str | None = None
    storage_url: str | None = None

    @property
    def dimensions(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass
class DownloadPlan:
    records: list[DownloadRecord] = field(default_factory=list)
    requested_names: dict[int, list[str]] = field(default_factory=dict)

    def aliases(self, index: int) -> list[str]:
        primary = self.records[index].file_name
        return [name for name in self.requested_names.get(index, []) if name != primary]


def apply_filename_suffix(file_name: str, suffix: str | None) -> str:
    if not suffix or suffix in file_name:
        return file_name
    path = PurePosixPath(file_name)
    return f"{path.stem}-{suffix}{path.suffix}"


def plan_downloads(requests: Iterable[ImageNodeRequest]) -> DownloadPlan:
    plan = DownloadPlan()
    seen: dict[tuple[str, str], int] = {}

    for request in requests:
        file_name = apply_filename_suffix(request.file_name, request.filename_suffix)
        record = DownloadRecord(
            file_name=file_name,
            needs_cropping=request.needs_cropping,
            crop_transform=request.crop_transform,
            requires_image_dimensions=request.requires_image_dimensions,
        )

        if request.image_ref:
            key = (request.image_ref, request.filename_suffix or "none")
            if not request.filename_suffix and key in seen:
                index = seen[key]
                names = plan.requested_names[index]
                if file_name not in names:
                    names.append(file_name)
                if record.requires_image_dimensions:
                    plan.records[index].requires_image_dimensions = True
                continue
            record.image_ref = request.image_ref
            seen[key] = len(plan.records)
        else:
            node_id = normalize_node_id(request.node_id)
            if not node_id:
                raise ValidationFailure(f"Image request '{request.file_name}' has neither imageRef nor nodeId")
            record.node_id = node_id

        plan.requested_names[len(plan.records)] = [file_name]
        plan.records.append(record)

    return plan
