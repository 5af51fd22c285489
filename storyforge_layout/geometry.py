"""
Box geometry on positioned nodes.

Positions are box centers; extents come from ``visual_size`` (a node
without a size is treated as a point).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .model import Node


@dataclass
class Bounds:
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def to_dict(self):
        return {"minX": self.min_x, "maxX": self.max_x, "minY": self.min_y, "maxY": self.max_y}


def node_box(node: Node) -> Optional[Tuple[float, float, float, float]]:
    """(left, top, right, bottom) or None for an unplaced node."""
    if node.position is None:
        return None
    w = node.visual_size.width if node.visual_size else 0.0
    h = node.visual_size.height if node.visual_size else 0.0
    x, y = node.position.x, node.position.y
    return x - w / 2.0, y - h / 2.0, x + w / 2.0, y + h / 2.0


def bounding_box(nodes: Iterable[Node]) -> Optional[Bounds]:
    boxes = [b for b in (node_box(n) for n in nodes) if b is not None]
    if not boxes:
        return None
    return Bounds(
        min_x=min(b[0] for b in boxes),
        max_x=max(b[2] for b in boxes),
        min_y=min(b[1] for b in boxes),
        max_y=max(b[3] for b in boxes),
    )


def boxes_overlap(a: Node, b: Node) -> bool:
    """True when the two rendered boxes share interior area."""
    ba, bb = node_box(a), node_box(b)
    if ba is None or bb is None:
        return False
    return ba[0] < bb[2] and bb[0] < ba[2] and ba[1] < bb[3] and bb[1] < ba[3]


def viewport_bounds(width: float, height: float, padding: float = 50.0) -> Bounds:
    return Bounds(min_x=padding, max_x=width - padding, min_y=padding, max_y=height - padding)


def constrain_to_viewport(nodes: Sequence[Node], bounds: Bounds) -> List[Node]:
    """Clamp every node center into ``bounds``; returns new node objects."""
    out: List[Node] = []
    for n in nodes:
        if n.position is None:
            out.append(n)
            continue
        x = max(bounds.min_x, min(bounds.max_x, n.position.x))
        y = max(bounds.min_y, min(bounds.max_y, n.position.y))
        out.append(n.placed(x, y))
    return out


__all__ = [
    "Bounds",
    "node_box",
    "bounding_box",
    "boxes_overlap",
    "viewport_bounds",
    "constrain_to_viewport",
]
