"""Per-node extraction rules.

Each extractor reads the raw node and writes the fields it owns onto the
simplified node. Style-like values go through the shared style table so
identical values are emitted once.
"""

from __future__ import annotations

from typing import Any, Callable

from figma_mcp.extractors.layout import build_simplified_layout
from figma_mcp.extractors.styles import TraversalContext, find_or_create_var, store_style
from figma_mcp.extractors.visuals import (
    border_radius,
    build_effects,
    build_strokes,
    is_visible,
    parse_paint,
)

Extractor = Callable[[dict[str, Any], dict[str, Any], TraversalContext], None]

SVG_ELIGIBLE_TYPES = frozenset({"IMAGE-SVG", "STAR", "LINE", "ELLIPSE", "REGULAR_POLYGON", "RECTANGLE"})
SVG_CONTAINER_TYPES = frozenset({"FRAME", "GROUP", "INSTANCE"})
IMAGE_SHAPE_TYPES = frozenset({"RECTANGLE", "ELLIPSE", "REGULAR_POLYGON", "STAR", "VECTOR"})


def _has_children(node: dict[str, Any]) -> bool:
    return bool(node.get("children"))


def layout_extractor(node: dict[str, Any], result: dict[str, Any], context: TraversalContext) -> None:
    layout = build_simplified_layout(node, context.parent)
    if layout != {"mode": "none"}:
        result["layout"] = find_or_create_var(context.global_vars, layout, "layout")


def extract_text_style(node: dict[str, Any]) -> dict[str, Any]:
    style = node.get("style") or {}
    font_size = style.get("fontSize")
    text_style: dict[str, Any] = {
        "fontFamily": style.get("fontFamily"),
        "fontWeight": style.get("fontWeight"),
        "fontSize": font_size,
        "textCase": style.get("textCase"),
        "textAlignHorizontal": style.get("textAlignHorizontal"),
        "textAlignVertical": style.get("textAlignVertical"),
    }
    line_height = style.get("lineHeightPx")
    if line_height and font_size:
        text_style["lineHeight"] = f"{round(line_height / font_size, 3)}em"
    letter_spacing = style.get("letterSpacing")
    if letter_spacing and font_size:
        text_style["letterSpacing"] = f"{round(letter_spacing / font_size * 100, 2)}%"
    return {key: value for key, value in text_style.items() if value is not None}


def text_extractor(node: dict[str, Any], result: dict[str, Any], context: TraversalContext) -> None:
    if node.get("type") == "TEXT" and "characters" in node:
        result["text"] = node["characters"]
    if node.get("style"):
        text_style = extract_text_style(node)
        if text_style:
            result["textStyle"] = store_style(node, context, text_style, "style", ["text", "typography"])


def visuals_extractor(node: dict[str, Any], result: dict[str, Any], context: TraversalContext) -> None:
    has_children = _has_children(node)

    raw_fills = [f for f in node.get("fills") or [] if is_visible(f)]
    if raw_fills:
        fills = [parse_paint(f, has_children) for f in raw_fills]
        result["fills"] = store_style(node, context, fills, "fill", ["fill", "fills"])
        image_fill = next((f for f in fills if isinstance(f, dict) and f.get("type") == "IMAGE"), None)
        if image_fill and image_fill.get("imageRef"):
            result["imageRef"] = image_fill["imageRef"]
            result["imageDownloadArguments"] = image_fill["imageDownloadArguments"]
            if not has_children and node.get("type") in IMAGE_SHAPE_TYPES:
                result["type"] = "IMAGE"

    strokes = build_strokes(node, has_children)
    if strokes["colors"]:
        result["strokes"] = store_style(node, context, strokes["colors"], "stroke", ["stroke", "strokes"])
        if "strokeWeight" in strokes:
            result["strokeWeight"] = strokes["strokeWeight"]
        if "strokeDashes" in strokes:
            result["strokeDashes"] = strokes["strokeDashes"]

    effects = build_effects(node)
    if effects:
        result["effects"] = store_style(node, context, effects, "effect", ["effect", "effects"])

    opacity = node.get("opacity")
    if isinstance(opacity, (int, float)) and opacity != 1:
        result["opacity"] = opacity

    radius = border_radius(node)
    if radius:
        result["borderRadius"] = radius


def component_extractor(node: dict[str, Any], result: dict[str, Any], context: TraversalContext) -> None:
    if node.get("type") != "INSTANCE":
        return
    if node.get("componentId"):
        result["componentId"] = node["componentId"]
    properties = node.get("componentProperties") or {}
    if properties:
        result["componentProperties"] = [
            {"name": name, "value": str(prop.get("value")), "type": prop.get("type")}
            for name, prop in properties.items()
        ]


def collapse_svg_containers(
    node: dict[str, Any], result: dict[str, Any], children: list[dict[str, Any]]
) -> list[dict[str, Any]]:
    """Fold containers made only of vector geometry into one exportable SVG."""
    node_type = node.get("type")
    if node_type == "BOOLEAN_OPERATION":
        result["type"] = "IMAGE-SVG"
        return []
    if (
        node_type in SVG_CONTAINER_TYPES
        and children
        and all(child.get("type") in SVG_ELIGIBLE_TYPES for child in children)
    ):
        result["type"] = "IMAGE-SVG"
        return []
    return children


LAYOUT_ONLY: list[Extractor] = [layout_extractor]
CONTENT_ONLY: list[Extractor] = [text_extractor]
VISUALS_ONLY: list[Extractor] = [visuals_extractor]
LAYOUT_AND_TEXT: list[Extractor] = [layout_extractor, text_extractor]
ALL_EXTRACTORS: list[Extractor] = [layout_extractor, text_extractor, visuals_extractor, component_extractor]
