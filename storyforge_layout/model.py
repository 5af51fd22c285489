"""
Graph model shared by every layout strategy.

Nodes and edges are plain dataclasses. Strategies never mutate them in
place; positioned output is produced with ``dataclasses.replace`` so
callers can diff or memoise on identity.

Position convention: ``Node.position`` is the CENTER of the node box.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union


# =========================================================================== #
# Node types
# =========================================================================== #

class NodeType(str, Enum):
    CHARACTER = "Character"
    PUZZLE = "Puzzle"
    ELEMENT = "Element"
    TIMELINE = "Timeline"
    UNKNOWN = "Unknown"

    @classmethod
    def coerce(cls, value: Any) -> "NodeType":
        """Map any upstream type label onto the closed set (default Unknown)."""
        if isinstance(value, NodeType):
            return value
        if value is None:
            return cls.UNKNOWN
        key = str(value).strip().lower()
        return _TYPE_ALIASES.get(key, cls.UNKNOWN)


_TYPE_ALIASES: Dict[str, NodeType] = {
    "character": NodeType.CHARACTER,
    "puzzle": NodeType.PUZZLE,
    "element": NodeType.ELEMENT,
    "memory": NodeType.ELEMENT,
    "timeline": NodeType.TIMELINE,
    "timeline_event": NodeType.TIMELINE,
    "timelineevent": NodeType.TIMELINE,
    "unknown": NodeType.UNKNOWN,
}


# =========================================================================== #
# Geometry value types
# =========================================================================== #

@dataclass
class Position:
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": float(self.x), "y": float(self.y)}


@dataclass
class Size:
    width: float
    height: float

    def to_dict(self) -> Dict[str, float]:
        return {"width": float(self.width), "height": float(self.height)}


# =========================================================================== #
# Nodes / edges
# =========================================================================== #

@dataclass
class Node:
    id: str
    type: NodeType = NodeType.UNKNOWN
    is_center: bool = False
    parent_id: Optional[str] = None
    label: str = ""
    data: Dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = None
    visual_size: Optional[Size] = None

    def placed(self, x: float, y: float, size: Optional[Size] = None) -> "Node":
        """Return a copy positioned at (x, y), optionally with a resolved size."""
        return replace(
            self,
            data=dict(self.data),
            position=Position(float(x), float(y)),
            visual_size=size if size is not None else self.visual_size,
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "isCenter": self.is_center,
            "parentId": self.parent_id,
            "label": self.label,
            "data": self.data,
        }
        if self.position is not None:
            out["position"] = self.position.to_dict()
        if self.visual_size is not None:
            out["visualSize"] = self.visual_size.to_dict()
        return out


@dataclass
class Edge:
    id: str
    source: str
    target: str
    type: str = ""
    label: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "type": self.type,
            "label": self.label,
        }


@dataclass
class LayoutResult:
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    fallback: bool = False
    kind: Optional[str] = None

    def position_of(self, node_id: str) -> Optional[Position]:
        for n in self.nodes:
            if n.id == node_id:
                return n.position
        return None

    def positions(self) -> Dict[str, Tuple[float, float]]:
        return {
            n.id: (n.position.x, n.position.y)
            for n in self.nodes
            if n.position is not None
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "fallback": self.fallback,
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
            "warnings": list(self.warnings),
        }


@dataclass
class ValidationResult:
    nodes: List[Node]
    edges: List[Edge]
    warnings: List[str] = field(default_factory=list)


# =========================================================================== #
# Dict conversion
# =========================================================================== #

def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _opt_id(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


def _pick(d: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for k in keys:
        if k in d and d[k] is not None:
            return d[k]
    return default


def _finite(v: Any) -> Optional[float]:
    try:
        f = float(v)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


def _size_from(value: Any) -> Optional[Size]:
    if isinstance(value, Size):
        w, h = _finite(value.width), _finite(value.height)
    elif isinstance(value, dict):
        w, h = _finite(value.get("width")), _finite(value.get("height"))
    else:
        return None
    if w is None or h is None or w <= 0 or h <= 0:
        return None
    return Size(w, h)


def node_from_dict(d: Dict[str, Any]) -> Node:
    """
    Build a Node from a renderer-style dict.

    Accepts camelCase (``isCenter``, ``parentId``, ``visualSize``) or
    snake_case keys, and a nested ``data`` block carrying any of them.
    """
    inner = d.get("data") if isinstance(d.get("data"), dict) else {}
    node_id = _pick(d, "id", default=_pick(inner, "id"))
    return Node(
        id=str(node_id) if node_id is not None else "",
        type=NodeType.coerce(_pick(d, "type", default=_pick(inner, "type"))),
        is_center=_flag(_pick(d, "isCenter", "is_center", default=_pick(inner, "isCenter", "is_center", default=False))),
        parent_id=_opt_id(_pick(d, "parentId", "parent_id", default=_pick(inner, "parentId", "parent_id"))),
        label=str(_pick(d, "label", default=_pick(inner, "label", "name", default=""))),
        data=dict(inner),
        position=None,
        visual_size=_size_from(_pick(d, "visualSize", "visual_size")),
    )


def edge_from_dict(d: Dict[str, Any]) -> Edge:
    inner = d.get("data") if isinstance(d.get("data"), dict) else {}
    source = _pick(d, "source", default="")
    target = _pick(d, "target", default="")
    edge_id = _pick(d, "id", default=f"{source}->{target}")
    return Edge(
        id=str(edge_id),
        source=str(source),
        target=str(target),
        type=str(_pick(d, "type", default=_pick(inner, "type", default=""))),
        label=str(_pick(d, "label", default=_pick(inner, "shortLabel", "label", default=""))),
    )


def _as_node(obj: Union[Node, Dict[str, Any]]) -> Node:
    if isinstance(obj, Node):
        size = _size_from(obj.visual_size) if obj.visual_size is not None else None
        ntype = NodeType.coerce(obj.type)
        node_id = _opt_id(obj.id) or ""
        parent_id = _opt_id(obj.parent_id)
        if (
            size != obj.visual_size
            or ntype is not obj.type
            or node_id != obj.id
            or parent_id != obj.parent_id
        ):
            return replace(obj, id=node_id, type=ntype, parent_id=parent_id, visual_size=size)
        return obj
    return node_from_dict(obj)


def _as_edge(obj: Union[Edge, Dict[str, Any]]) -> Edge:
    if isinstance(obj, Edge):
        return obj
    return edge_from_dict(obj)


# =========================================================================== #
# Validation
# =========================================================================== #

def validate(
    nodes: Optional[Iterable[Union[Node, Dict[str, Any]]]],
    edges: Optional[Iterable[Union[Edge, Dict[str, Any]]]],
) -> ValidationResult:
    """
    Normalise and sanity-check a layout request.

    - nodes without an id are dropped (warning)
    - duplicate ids keep the first occurrence (warning)
    - edges referencing missing nodes are dropped (warning)
    Never raises for list-shaped input; inputs are not mutated.
    """
    warnings: List[str] = []
    out_nodes: List[Node] = []
    seen: Dict[str, int] = {}

    for raw in nodes or []:
        if raw is None:
            warnings.append("Dropped empty node entry")
            continue
        node = _as_node(raw)
        if not node.id:
            warnings.append("Dropped node without id")
            continue
        if node.id in seen:
            warnings.append(f"Duplicate node id '{node.id}' ignored")
            continue
        seen[node.id] = len(out_nodes)
        out_nodes.append(node)

    out_edges: List[Edge] = []
    for raw in edges or []:
        if raw is None:
            warnings.append("Dropped empty edge entry")
            continue
        edge = _as_edge(raw)
        if not edge.source or not edge.target:
            warnings.append(f"Dropped edge '{edge.id}' with empty endpoint")
            continue
        missing = [e for e in (edge.source, edge.target) if e not in seen]
        if missing:
            warnings.append(
                f"Dropped edge '{edge.id}' referencing missing node(s): {', '.join(missing)}"
            )
            continue
        out_edges.append(edge)

    return ValidationResult(nodes=out_nodes, edges=out_edges, warnings=warnings)


def find_center(nodes: List[Node]) -> Tuple[Optional[Node], List[str]]:
    """Return the first center node plus any warnings about extra centers."""
    centers = [n for n in nodes if n.is_center]
    if not centers:
        return None, []
    warnings: List[str] = []
    if len(centers) > 1:
        extra = ", ".join(n.id for n in centers[1:])
        warnings.append(f"Multiple center nodes; using '{centers[0].id}', ignoring {extra}")
    return centers[0], warnings


def resolve_size(node: Node, width: float, height: float, center_width: float, center_height: float) -> Size:
    """Visual size for rendering: explicit size, else the config default for its role."""
    if node.visual_size is not None:
        return node.visual_size
    if node.is_center:
        return Size(center_width, center_height)
    return Size(width, height)


__all__ = [
    "NodeType",
    "Position",
    "Size",
    "Node",
    "Edge",
    "LayoutResult",
    "ValidationResult",
    "node_from_dict",
    "edge_from_dict",
    "validate",
    "find_center",
    "resolve_size",
]
