"""
Radial sector layout ("what is immediately related to X").

  - the center node sits at the origin
  - every other node is grouped by type into an angular sector
  - a sector holds up to ``max_nodes_per_ring`` nodes per ring; overflow
    wraps onto concentric rings further out
  - groups are placed in a fixed type priority, so output does not depend
    on input ordering across groups

Angles are in degrees in screen space (y grows downward): 0 is right,
90 is below, 270 is above.
"""

from __future__ import annotations

import math
from collections import defaultdict
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..diagnostics import Emit
from ..model import LayoutResult, Node, NodeType
from ..presets import GridConfig, RadialConfig
from .base import check_finite, prepare, size_resolver
from .grid import fallback_result


KIND = "radial"

# Sector base angle per type (the four cardinal directions + a diagonal)
SECTOR_ANGLES: Dict[NodeType, float] = {
    NodeType.CHARACTER: 270.0,
    NodeType.PUZZLE: 0.0,
    NodeType.ELEMENT: 90.0,
    NodeType.TIMELINE: 180.0,
    NodeType.UNKNOWN: 45.0,
}

# Multiplier on base_radius for the first ring of each sector
RADIUS_FACTORS: Dict[NodeType, float] = {
    NodeType.CHARACTER: 1.0,
    NodeType.PUZZLE: 1.15,
    NodeType.ELEMENT: 1.3,
    NodeType.TIMELINE: 1.45,
    NodeType.UNKNOWN: 1.6,
}

TYPE_PRIORITY: List[NodeType] = [
    NodeType.CHARACTER,
    NodeType.PUZZLE,
    NodeType.ELEMENT,
    NodeType.TIMELINE,
    NodeType.UNKNOWN,
]


# ============================================================================ #
# Geometry helpers
# ============================================================================ #

def sector_angles(
    count: int,
    base_angle: float,
    ring_radius: float,
    node_width: float,
    max_spread: float,
) -> List[float]:
    """
    Evenly spread ``count`` angles around ``base_angle``.

    The total spread is the angle one node width subtends at this radius
    times the number of gaps, capped at ``max_spread``.
    """
    if count <= 0:
        return []
    if count == 1:
        return [base_angle]
    per_node = math.degrees(math.atan2(node_width, ring_radius))
    spread = min(max_spread, per_node * (count - 1))
    start = base_angle - spread / 2.0
    return [start + spread * i / (count - 1) for i in range(count)]


def sector_slots(
    members: Sequence[Node],
    node_type: NodeType,
    cfg: RadialConfig,
) -> List[Tuple[Node, float, float]]:
    """Assign (angle_deg, radius) to every member of one type group."""
    base_angle = SECTOR_ANGLES.get(node_type, SECTOR_ANGLES[NodeType.UNKNOWN])
    first_radius = cfg.base_radius * RADIUS_FACTORS.get(node_type, RADIUS_FACTORS[NodeType.UNKNOWN])
    per_ring = cfg.max_nodes_per_ring

    slots: List[Tuple[Node, float, float]] = []
    for ring_idx, start in enumerate(range(0, len(members), per_ring)):
        batch = members[start:start + per_ring]
        radius = first_radius + ring_idx * cfg.min_radius_between_rings
        angles = sector_angles(len(batch), base_angle, radius, cfg.node_width, cfg.max_spread_degrees)
        slots.extend((node, angle, radius) for node, angle in zip(batch, angles))
    return slots


def _polar(angle_deg: float, radius: float) -> Tuple[float, float]:
    a = math.radians(angle_deg)
    return radius * math.cos(a), radius * math.sin(a)


# ============================================================================ #
# Strategy
# ============================================================================ #

def compute_layout_radial(
    nodes: Sequence[Any],
    edges: Sequence[Any],
    config: Optional[RadialConfig] = None,
    *,
    grid: Optional[GridConfig] = None,
    emit: Optional[Emit] = None,
    debug: bool = False,
) -> LayoutResult:
    """
    Sector layout around the center node.

    Without a center node every node is placed on the grid instead; this
    is an expected input shape, not a failure, so ``fallback`` is set but
    nothing is logged at error level.
    """
    cfg = config or RadialConfig()
    grid_cfg = grid or GridConfig()
    prepared = prepare(
        KIND, nodes, edges,
        adjustments=cfg.adjustments + grid_cfg.adjustments,
        emit=emit, debug=debug,
    )
    if prepared.empty:
        return prepared.empty_result(KIND)

    diag = prepared.diag
    size_for = size_resolver(cfg)

    if prepared.center is None:
        diag.info("no center node; using grid placement")
        return fallback_result(
            prepared.nodes, prepared.edges,
            config=grid_cfg, warnings=diag.warnings, kind=KIND, size_for=size_for,
        )

    try:
        center = prepared.center
        groups: Dict[NodeType, List[Node]] = defaultdict(list)
        for node in prepared.nodes:
            if node.id == center.id:
                continue
            groups[node.type].append(node)

        placed: Dict[str, Node] = {center.id: center.placed(0.0, 0.0, size_for(center))}
        for node_type in TYPE_PRIORITY:
            members = groups.get(node_type)
            if not members:
                continue
            for node, angle, radius in sector_slots(members, node_type, cfg):
                x, y = _polar(angle, radius)
                placed[node.id] = node.placed(x, y, size_for(node))

        positioned = [placed[n.id] for n in prepared.nodes]
        check_finite(positioned)
    except Exception as exc:
        diag.error(f"radial layout failed, using grid placement: {exc}")
        return fallback_result(
            prepared.nodes, prepared.edges,
            config=grid_cfg, warnings=diag.warnings, kind=KIND, size_for=size_for,
        )

    diag.debug("radial layout complete", groups=len(groups), ms=diag.elapsed_ms)
    return LayoutResult(
        nodes=positioned,
        edges=prepared.edges,
        warnings=diag.warnings,
        kind=KIND,
    )


__all__ = [
    "compute_layout_radial",
    "sector_angles",
    "sector_slots",
    "SECTOR_ANGLES",
    "RADIUS_FACTORS",
    "TYPE_PRIORITY",
]
