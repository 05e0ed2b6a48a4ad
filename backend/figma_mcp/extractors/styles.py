from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from typing import Any


@dataclass
class GlobalVars:
    styles: dict[str, Any] = field(default_factory=dict)


@dataclass
class TraversalContext:
    global_vars: GlobalVars
    named_styles: dict[str, dict[str, Any]] = field(default_factory=dict)
    parent: dict[str, Any] | None = None
    depth: int = 0

    def child(self, parent: dict[str, Any]) -> "TraversalContext":
        return TraversalContext(
            global_vars=self.global_vars,
            named_styles=self.named_styles,
            parent=parent,
            depth=self.depth + 1,
        )


def _canonical(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"))


def find_or_create_var(global_vars: GlobalVars, value: Any, prefix: str) -> str:
    """Return the style-table key for ``value``, adding it if unseen.

    Keys are derived from a hash of the value, so equal values always share
    one entry and repeated runs over the same file produce the same keys.
    """
    canonical = _canonical(value)
    digest = hashlib.sha1(canonical.encode("utf-8")).hexdigest().upper()
    length = 6
    while True:
        key = f"{prefix}_{digest[:length]}"
        existing = global_vars.styles.get(key)
        if existing is None:
            global_vars.styles[key] = value
            return key
        if _canonical(existing) == canonical:
            return key
        length += 2


def get_style_name(node: dict[str, Any], context: TraversalContext, keys: list[str]) -> str | None:
    """Resolve a published style name (e.g. "Heading/H1") referenced by the node."""
    style_refs = node.get("styles") or {}
    for key in keys:
        style_id = style_refs.get(key)
        if not style_id:
            continue
        style = context.named_styles.get(style_id)
        if style and style.get("name"):
            return style["name"]
    return None


def store_style(
    node: dict[str, Any], context: TraversalContext, value: Any, prefix: str, keys: list[str]
) -> str:
    name = get_style_name(node, context, keys)
    if name:
        context.global_vars.styles[name] = value
        return name
    return find_or_create_var(context.global_vars, value, prefix)
