"""
Shared plumbing for the layout strategies.

Every strategy follows the same shape:

    prepared = prepare(...)        # validate, pick center, report anomalies
    try:
        ...algorithm...
        check_finite(positioned)
    except Exception:
        ...grid fallback...
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from ..diagnostics import Diagnostics, Emit
from ..model import Edge, LayoutResult, Node, Size, find_center, resolve_size, validate
from .grid import SizeFn


@dataclass
class Prepared:
    nodes: List[Node]
    edges: List[Edge]
    center: Optional[Node]
    diag: Diagnostics

    @property
    def empty(self) -> bool:
        return not self.nodes

    def empty_result(self, kind: str) -> LayoutResult:
        return LayoutResult(nodes=[], edges=[], warnings=list(self.diag.warnings), kind=kind)


def prepare(
    scope: str,
    nodes: Optional[Sequence[Any]],
    edges: Optional[Sequence[Any]],
    *,
    adjustments: Sequence[str] = (),
    emit: Optional[Emit] = None,
    debug: bool = False,
) -> Prepared:
    diag = Diagnostics(emit, debug=debug, scope=scope)
    checked = validate(nodes, edges)
    diag.extend(checked.warnings)
    diag.extend(list(adjustments))
    center, center_warnings = find_center(checked.nodes)
    diag.extend(center_warnings)
    diag.debug(
        "prepared input",
        n_nodes=len(checked.nodes),
        n_edges=len(checked.edges),
        center=center.id if center else None,
    )
    return Prepared(nodes=checked.nodes, edges=checked.edges, center=center, diag=diag)


def size_resolver(cfg: Any) -> SizeFn:
    """Map a node to its rendered size using the config's role defaults."""

    def _size(node: Node) -> Size:
        return resolve_size(
            node,
            cfg.node_width,
            cfg.node_height,
            cfg.center_node_width,
            cfg.center_node_height,
        )

    return _size


def check_finite(nodes: Sequence[Node]) -> None:
    for n in nodes:
        if n.position is None:
            raise ValueError(f"node '{n.id}' left without a position")
        if not (math.isfinite(n.position.x) and math.isfinite(n.position.y)):
            raise FloatingPointError(f"non-finite position for node '{n.id}'")


__all__ = ["Prepared", "prepare", "size_resolver", "check_finite"]
