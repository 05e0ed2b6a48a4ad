from __future__ import annotations

from typing import Any

from figma_mcp.extractors.visuals import css_shorthand, is_visible

_JUSTIFY = {
    "MAX": "flex-end",
    "CENTER": "center",
    "SPACE_BETWEEN": "space-between",
    "BASELINE": "baseline",
}
_SELF_ALIGN = {
    "MIN": "flex-start",
    "MAX": "flex-end",
    "CENTER": "center",
    "STRETCH": "stretch",
}
_SIZING = {"FIXED": "fixed", "FILL": "fill", "HUG": "hug"}


def layout_mode(node: dict[str, Any] | None) -> str:
    mode = (node or {}).get("layoutMode")
    if not mode or mode == "NONE":
        return "none"
    return "row" if mode == "HORIZONTAL" else "column"


def _counter_axis_stretches(node: dict[str, Any], mode: str) -> bool:
    children = [
        c for c in node.get("children") or []
        if is_visible(c) and c.get("layoutPositioning") != "ABSOLUTE"
    ]
    if not children:
        return False
    sizing_key = "layoutSizingVertical" if mode == "row" else "layoutSizingHorizontal"
    return all(c.get(sizing_key) == "FILL" or c.get("layoutAlign") == "STRETCH" for c in children)


def _frame_values(node: dict[str, Any]) -> dict[str, Any]:
    mode = layout_mode(node)
    values: dict[str, Any] = {"mode": mode}

    overflow = node.get("overflowDirection") or ""
    scroll = [axis for axis, flag in (("x", "HORIZONTAL"), ("y", "VERTICAL")) if flag in overflow]
    if scroll:
        values["overflowScroll"] = scroll
    if mode == "none":
        return values

    justify = _JUSTIFY.get(node.get("primaryAxisAlignItems") or "MIN")
    if justify:
        values["justifyContent"] = justify
    if _counter_axis_stretches(node, mode):
        values["alignItems"] = "stretch"
    else:
        align = _JUSTIFY.get(node.get("counterAxisAlignItems") or "MIN")
        if align:
            values["alignItems"] = align
    if node.get("layoutWrap") == "WRAP":
        values["wrap"] = True
    if node.get("itemSpacing"):
        values["gap"] = f"{node['itemSpacing']}px"
    padding = css_shorthand(
        node.get("paddingTop", 0), node.get("paddingRight", 0),
        node.get("paddingBottom", 0), node.get("paddingLeft", 0),
    )
    if padding:
        values["padding"] = padding
    return values


def _in_auto_layout_flow(node: dict[str, Any], parent: dict[str, Any] | None) -> bool:
    return layout_mode(parent) != "none" and node.get("layoutPositioning") != "ABSOLUTE"


def _dimensions(node: dict[str, Any], parent_mode: str) -> dict[str, Any]:
    box = node.get("absoluteBoundingBox") or {}
    if "width" not in box or "height" not in box:
        return {}
    horizontal = node.get("layoutSizingHorizontal")
    vertical = node.get("layoutSizingVertical")
    stretches = node.get("layoutAlign") == "STRETCH"
    grows = bool(node.get("layoutGrow"))

    dims: dict[str, Any] = {}
    if parent_mode == "row":
        if not grows and horizontal == "FIXED":
            dims["width"] = box["width"]
        if not stretches and vertical == "FIXED":
            dims["height"] = box["height"]
    elif parent_mode == "column":
        if not stretches and horizontal == "FIXED":
            dims["width"] = box["width"]
        if not grows and vertical == "FIXED":
            dims["height"] = box["height"]
    else:
        if horizontal in (None, "FIXED"):
            dims["width"] = box["width"]
        if vertical in (None, "FIXED"):
            dims["height"] = box["height"]

    if node.get("preserveRatio") and box.get("height"):
        dims["aspectRatio"] = round(box["width"] / box["height"], 2)
    return {key: round(value, 2) if isinstance(value, float) else value for key, value in dims.items()}


def build_simplified_layout(node: dict[str, Any], parent: dict[str, Any] | None = None) -> dict[str, Any]:
    layout = _frame_values(node)
    if layout_mode(parent) != "none":
        align_self = _SELF_ALIGN.get(node.get("layoutAlign") or "")
        if align_self and align_self != "flex-start":
            layout["alignSelf"] = align_self

    sizing = {
        axis: _SIZING[value]
        for axis, value in (
            ("horizontal", node.get("layoutSizingHorizontal")),
            ("vertical", node.get("layoutSizingVertical")),
        )
        if value in _SIZING
    }
    if sizing:
        layout["sizing"] = sizing

    if parent is not None and not _in_auto_layout_flow(node, parent):
        if node.get("layoutPositioning") == "ABSOLUTE":
            layout["position"] = "absolute"
        box = node.get("absoluteBoundingBox")
        parent_box = parent.get("absoluteBoundingBox")
        if box and parent_box:
            layout["locationRelativeToParent"] = {
                "x": round(box["x"] - parent_box["x"], 2),
                "y": round(box["y"] - parent_box["y"], 2),
            }

    dimensions = _dimensions(node, layout_mode(parent))
    if dimensions:
        layout["dimensions"] = dimensions
    return layout
