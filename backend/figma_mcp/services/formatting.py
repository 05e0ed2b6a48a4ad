from __future__ import annotations

import json
from typing import Any

import yaml

from figma_mcp.core.config import OutputFormat
from figma_mcp.services.image_plan import DownloadPlan, DownloadResult


def format_result(data: Any, output_format: OutputFormat) -> str:
    if output_format == "json":
        return json.dumps(data, indent=2, ensure_ascii=False)
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)


def format_download_report(plan: DownloadPlan, results: list[DownloadResult]) -> str:
    lines = [f"Uploaded {len(results)} images to S3:"]
    for index, result in enumerate(results):
        file_name = plan.records[index].file_name
        dimension_info = result.dimensions
        if result.css_variables:
            dimension_info = f"{dimension_info} | {result.css_variables}"
        line = f"- {file_name}: {dimension_info}"
        if result.was_cropped:
            line += " (cropped)"
        aliases = plan.aliases(index)
        if aliases:
            line += f" (also requested as: {', '.join(aliases)})"
        lines.append(line)
        if result.storage_url:
            lines.append(f"  S3 URL: {result.storage_url}")
    return "\n".join(lines)
