from figma_mcp.tools.download_figma_images import download_figma_images_tool
from figma_mcp.tools.get_figma_data import get_figma_data_tool
from figma_mcp.tools.registry import ToolContext, ToolDefinition, ToolRegistry


def build_registry(skip_image_downloads: bool = False) -> ToolRegistry:
    registry = ToolRegistry()
    registry.register(get_figma_data_tool)
    if not skip_image_downloads:
        registry.register(download_figma_images_tool)
    return registry


__all__ = ["ToolContext", "ToolDefinition", "ToolRegistry", "build_registry"]
