from __future__ import annotations

import hashlib
import json
from typing import Any


def is_visible(item: dict[str, Any]) -> bool:
    return item.get("visible", True) is not False


def _channel(value: float) -> int:
    return max(0, min(255, round(value * 255)))


def _round(value: float, digits: int = 2) -> float:
    rounded = round(value, digits)
    return int(rounded) if rounded == int(rounded) else rounded


def convert_color(color: dict[str, float], opacity: float = 1.0) -> tuple[str, float]:
    r, g, b = _channel(color.get("r", 0)), _channel(color.get("g", 0)), _channel(color.get("b", 0))
    alpha = _round(opacity * color.get("a", 1.0))
    return f"#{r:02X}{g:02X}{b:02X}", alpha


def format_rgba(color: dict[str, float], opacity: float = 1.0) -> str:
    r, g, b = _channel(color.get("r", 0)), _channel(color.get("g", 0)), _channel(color.get("b", 0))
    alpha = _round(opacity * color.get("a", 1.0))
    return f"rgba({r}, {g}, {b}, {alpha})"


def color_string(color: dict[str, float], opacity: float = 1.0) -> str:
    hex_value, alpha = convert_color(color, opacity)
    return hex_value if alpha == 1 else format_rgba(color, opacity)


def transform_hash(transform: list[list[float]]) -> str:
    canonical = json.dumps(transform, separators=(",", ":"))
    return hashlib.sha1(canonical.encode("utf-8")).hexdigest()[:6]


def _scale_mode_css(scale_mode: str | None, is_background: bool, scaling_factor: float | None) -> dict[str, Any]:
    if scale_mode == "TILE":
        size = f"{_round(scaling_factor * 100)}%" if scaling_factor else "auto"
        return {"isBackground": True, "backgroundRepeat": "repeat", "backgroundSize": size}
    if scale_mode == "FIT":
        if is_background:
            return {"isBackground": True, "backgroundSize": "contain", "backgroundRepeat": "no-repeat", "backgroundPosition": "center"}
        return {"isBackground": False, "objectFit": "contain"}
    if scale_mode == "STRETCH":
        if is_background:
            return {"isBackground": True, "backgroundSize": "100% 100%", "backgroundRepeat": "no-repeat", "backgroundPosition": "center"}
        return {"isBackground": False, "objectFit": "fill"}
    if is_background:
        return {"isBackground": True, "backgroundSize": "cover", "backgroundRepeat": "no-repeat", "backgroundPosition": "center"}
    return {"isBackground": False, "objectFit": "cover"}


def image_download_arguments(paint: dict[str, Any]) -> dict[str, Any]:
    """Describe the post-processing a downloaded image fill needs.

    Tiled images need their pixel size for CSS; cropped or stretched images
    carry their transform, plus a suffix so each crop gets its own file.
    """
    scale_mode = paint.get("scaleMode")
    args: dict[str, Any] = {
        "needsCropping": False,
        "requiresImageDimensions": scale_mode == "TILE",
    }
    transform = paint.get("imageTransform")
    if scale_mode in ("CROP", "STRETCH") and transform:
        args["needsCropping"] = True
        args["cropTransform"] = transform
        args["filenameSuffix"] = transform_hash(transform)
    return args


def parse_paint(paint: dict[str, Any], has_children: bool = False) -> Any:
    paint_type = paint.get("type")
    if paint_type == "IMAGE":
        scale_mode = paint.get("scaleMode")
        is_background = has_children or scale_mode == "TILE"
        fill: dict[str, Any] = {
            "type": "IMAGE",
            "imageRef": paint.get("imageRef"),
            "scaleMode": scale_mode,
        }
        if paint.get("scalingFactor"):
            fill["scalingFactor"] = paint["scalingFactor"]
        fill.update(_scale_mode_css(scale_mode, is_background, paint.get("scalingFactor")))
        fill["imageDownloadArguments"] = image_download_arguments(paint)
        return fill

    if paint_type == "SOLID":
        return color_string(paint.get("color", {}), paint.get("opacity", 1.0))

    if paint_type and paint_type.startswith("GRADIENT_"):
        opacity = paint.get("opacity", 1.0)
        return {
            "type": paint_type,
            "gradientHandlePositions": paint.get("gradientHandlePositions", []),
            "gradientStops": [
                {
                    "position": _round(stop.get("position", 0), 4),
                    "color": color_string(stop.get("color", {}), opacity),
                }
                for stop in paint.get("gradientStops", [])
            ],
        }

    return {"type": paint_type}


def _px(value: float) -> str:
    return f"{_round(value)}px"


def css_shorthand(top: float, right: float, bottom: float, left: float) -> str | None:
    if not any((top, right, bottom, left)):
        return None
    if top == right == bottom == left:
        return _px(top)
    if top == bottom and right == left:
        return f"{_px(top)} {_px(right)}"
    return f"{_px(top)} {_px(right)} {_px(bottom)} {_px(left)}"


def build_strokes(node: dict[str, Any], has_children: bool) -> dict[str, Any]:
    strokes: dict[str, Any] = {
        "colors": [parse_paint(s, has_children) for s in node.get("strokes") or [] if is_visible(s)]
    }
    weight = node.get("strokeWeight")
    if isinstance(weight, (int, float)) and weight > 0:
        strokes["strokeWeight"] = _px(weight)
    individual = node.get("individualStrokeWeights")
    if individual:
        shorthand = css_shorthand(
            individual.get("top", 0), individual.get("right", 0),
            individual.get("bottom", 0), individual.get("left", 0),
        )
        if shorthand:
            strokes["strokeWeight"] = shorthand
    if node.get("strokeDashes"):
        strokes["strokeDashes"] = node["strokeDashes"]
    return strokes


def _shadow(effect: dict[str, Any]) -> str:
    offset = effect.get("offset") or {}
    color = color_string(effect.get("color") or {})
    shadow = f"{_px(offset.get('x', 0))} {_px(offset.get('y', 0))} {_px(effect.get('radius', 0))} {_px(effect.get('spread', 0))} {color}"
    return f"inset {shadow}" if effect.get("type") == "INNER_SHADOW" else shadow


def build_effects(node: dict[str, Any]) -> dict[str, str]:
    effects = [e for e in node.get("effects") or [] if is_visible(e)]
    shadows = [_shadow(e) for e in effects if e.get("type") in ("DROP_SHADOW", "INNER_SHADOW")]
    blurs = [f"blur({_px(e.get('radius', 0))})" for e in effects if e.get("type") == "LAYER_BLUR"]
    backdrop = [f"blur({_px(e.get('radius', 0))})" for e in effects if e.get("type") == "BACKGROUND_BLUR"]

    result: dict[str, str] = {}
    if shadows:
        # inner shadows have no text equivalent
        if node.get("type") == "TEXT":
            text_shadows = [s for s in shadows if not s.startswith("inset")]
            if text_shadows:
                result["textShadow"] = ", ".join(text_shadows)
        else:
            result["boxShadow"] = ", ".join(shadows)
    if blurs:
        result["filter"] = " ".join(blurs)
    if backdrop:
        result["backdropFilter"] = " ".join(backdrop)
    return result


def border_radius(node: dict[str, Any]) -> str | None:
    radii = node.get("rectangleCornerRadii")
    if isinstance(radii, list) and len(radii) == 4 and any(radii):
        return " ".join(_px(r) for r in radii)
    radius = node.get("cornerRadius")
    if isinstance(radius, (int, float)) and radius > 0:
        return _px(radius)
    return None
