"""
Deterministic grid placement.

This is the floor every strategy falls back to: row-major, fixed cell
size, no dependence on edges. It cannot fail for any node list.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from ..model import Edge, LayoutResult, Node, Size
from ..presets import GridConfig


SizeFn = Callable[[Node], Size]


def grid_layout(
    nodes: Sequence[Node],
    config: Optional[GridConfig] = None,
    *,
    size_for: Optional[SizeFn] = None,
) -> List[Node]:
    """Node i -> ((i % columns) * cell_width, (i // columns) * cell_height)."""
    cfg = config or GridConfig()
    out: List[Node] = []
    for i, node in enumerate(nodes):
        col = i % cfg.columns
        row = i // cfg.columns
        size = size_for(node) if size_for else node.visual_size
        out.append(node.placed(col * cfg.cell_width, row * cfg.cell_height, size))
    return out


def fallback_result(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    *,
    config: Optional[GridConfig],
    warnings: List[str],
    kind: str,
    size_for: Optional[SizeFn] = None,
) -> LayoutResult:
    return LayoutResult(
        nodes=grid_layout(nodes, config, size_for=size_for),
        edges=list(edges),
        warnings=list(warnings),
        fallback=True,
        kind=kind,
    )


__all__ = ["grid_layout", "fallback_result"]
