from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from figma_mcp.extractors.built_in import ALL_EXTRACTORS, Extractor, collapse_svg_containers
from figma_mcp.extractors.styles import GlobalVars, TraversalContext
from figma_mcp.extractors.visuals import is_visible

AfterChildren = Callable[[dict[str, Any], dict[str, Any], list[dict[str, Any]]], list[dict[str, Any]]]


@dataclass
class SimplifiedDesign:
    name: str
    last_modified: str | None = None
    thumbnail_url: str | None = None
    nodes: list[dict[str, Any]] = field(default_factory=list)
    components: dict[str, Any] = field(default_factory=dict)
    component_sets: dict[str, Any] = field(default_factory=dict)
    global_vars: GlobalVars = field(default_factory=GlobalVars)

    def metadata(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "lastModified": self.last_modified,
            "thumbnailUrl": self.thumbnail_url,
            "components": self.components,
            "componentSets": self.component_sets,
        }

    def to_result(self) -> dict[str, Any]:
        return {
            "metadata": self.metadata(),
            "nodes": self.nodes,
            "globalVars": {"styles": self.global_vars.styles},
        }


def _simplify_components(components: dict[str, Any]) -> dict[str, Any]:
    return {
        component_id: {
            "id": component_id,
            "key": component.get("key"),
            "name": component.get("name"),
            "componentSetId": component.get("componentSetId"),
        }
        for component_id, component in components.items()
    }


def _simplify_component_sets(component_sets: dict[str, Any]) -> dict[str, Any]:
    return {
        set_id: {
            "id": set_id,
            "key": component_set.get("key"),
            "name": component_set.get("name"),
            "description": component_set.get("description"),
        }
        for set_id, component_set in component_sets.items()
    }


def _parse_response(response: dict[str, Any]) -> tuple[list[dict[str, Any]], int, dict, dict, dict]:
    """Split a response into roots, the depth of those roots, and file metadata.

    Requested nodes sit at depth 0. In a whole-file response the document is
    depth 0, so its pages start at depth 1.
    """
    if "nodes" in response:
        roots: list[dict[str, Any]] = []
        components: dict[str, Any] = {}
        component_sets: dict[str, Any] = {}
        styles: dict[str, Any] = {}
        for entry in response["nodes"].values():
            if not entry:
                continue
            if entry.get("document"):
                roots.append(entry["document"])
            components.update(entry.get("components") or {})
            component_sets.update(entry.get("componentSets") or {})
            styles.update(entry.get("styles") or {})
        return roots, 0, components, component_sets, styles

    document = response.get("document") or {}
    return (
        list(document.get("children") or []),
        1,
        response.get("components") or {},
        response.get("componentSets") or {},
        response.get("styles") or {},
    )


def extract_node(
    node: dict[str, Any],
    extractors: Iterable[Extractor],
    context: TraversalContext,
    max_depth: int | None = None,
    after_children: AfterChildren | None = None,
) -> dict[str, Any] | None:
    if not is_visible(node):
        return None

    node_type = node.get("type", "")
    result: dict[str, Any] = {
        "id": node.get("id"),
        "name": node.get("name", ""),
        "type": "IMAGE-SVG" if node_type == "VECTOR" else node_type,
    }
    extractors = list(extractors)
    for extractor in extractors:
        extractor(node, result, context)

    children: list[dict[str, Any]] = []
    if max_depth is None or context.depth < max_depth:
        child_context = context.child(node)
        for child in node.get("children") or []:
            simplified = extract_node(child, extractors, child_context, max_depth, after_children)
            if simplified is not None:
                children.append(simplified)

    if after_children is not None:
        children = after_children(node, result, children)
    if children:
        result["children"] = children
    return result


def simplify_raw_figma_object(
    response: dict[str, Any],
    extractors: Iterable[Extractor] = ALL_EXTRACTORS,
    max_depth: int | None = None,
    after_children: AfterChildren | None = collapse_svg_containers,
) -> SimplifiedDesign:
    """Walk a raw file or nodes response and produce the condensed design.

    ``max_depth`` has the meaning of the Figma API ``depth`` parameter: a
    requested node keeps ``max_depth`` levels of descendants, and a file keeps
    ``max_depth`` levels below the document.
    """
    roots, root_depth, components, component_sets, styles = _parse_response(response)
    global_vars = GlobalVars()
    context = TraversalContext(global_vars=global_vars, named_styles=styles, depth=root_depth)
    extractors = list(extractors)

    nodes = []
    for root in roots:
        simplified = extract_node(root, extractors, context, max_depth, after_children)
        if simplified is not None:
            nodes.append(simplified)

    return SimplifiedDesign(
        name=response.get("name", ""),
        last_modified=response.get("lastModified"),
        thumbnail_url=response.get("thumbnailUrl"),
        nodes=nodes,
        components=_simplify_components(components),
        component_sets=_simplify_component_sets(component_sets),
        global_vars=global_vars,
    )
