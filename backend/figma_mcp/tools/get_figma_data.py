from __future__ import annotations

from figma_mcp.extractors.built_in import ALL_EXTRACTORS, collapse_svg_containers
from figma_mcp.extractors.design import simplify_raw_figma_object
from figma_mcp.schemas.common import ToolResult
from figma_mcp.schemas.figma import GetFigmaDataRequest, normalize_node_id
from figma_mcp.services.formatting import format_result
from figma_mcp.tools.registry import ToolContext, ToolDefinition

DESCRIPTION = (
    "Fetch Figma design data in a condensed structured format. Returns the node tree "
    "(frames, text, images, etc.) with layout, colors, fonts and dimensions. Output includes: "
    "(1) 'nodes' with the design hierarchy, (2) 'globalVars' holding reusable styles, colors "
    "and layouts, (3) 'metadata' with file info. Use this as the FIRST step before downloading "
    "images: IMAGE-SVG nodes (vector graphics) and IMAGE nodes with 'imageRef' (raster images) "
    "can be passed to download_figma_images."
)


async def get_figma_data(request: GetFigmaDataRequest, context: ToolContext) -> ToolResult:
    node_id = normalize_node_id(request.node_id)
    depth = request.depth
    context.log.info(
        "Fetching {} of {} {}",
        f"{depth} layers deep" if depth else "all layers",
        f"node {node_id} from file" if node_id else "full file",
        request.file_key,
    )

    async with context.figma_service(request.figma_oauth_token) as figma:
        if node_id:
            raw = await figma.get_raw_node(request.file_key, node_id, depth)
        else:
            raw = await figma.get_raw_file(request.file_key, depth)
    context.log.write_artifact("figma-raw.json", raw)

    design = simplify_raw_figma_object(
        raw,
        ALL_EXTRACTORS,
        max_depth=depth,
        after_children=collapse_svg_containers,
    )
    result = design.to_result()
    context.log.write_artifact("figma-simplified.json", result)
    context.log.info(
        "Extracted {} top-level nodes and {} styles",
        len(design.nodes),
        len(design.global_vars.styles),
    )

    context.log.info("Generating {} result", context.output_format.upper())
    return ToolResult.text(format_result(result, context.output_format))


get_figma_data_tool = ToolDefinition(
    name="get_figma_data",
    description=DESCRIPTION,
    request_model=GetFigmaDataRequest,
    handler=get_figma_data,
    error_prefix="Error fetching file",
)
