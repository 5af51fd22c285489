"""
Hierarchical orbit layout.

Two passes:

  1. Backbone: every node goes through the layered drawing. Hubs that own
     satellites are handed an inflated square footprint so the ranks
     leave room for their orbit.
  2. Orbit: satellites are pulled off the backbone and placed on a circle
     around their hub's final position.

Hub types are fixed (Puzzle, Element). A node is a satellite when its
``parent_id`` names an existing hub-type node. Satellites may be hubs in
turn; those are orbited once their own hub has been placed.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Sequence, Tuple

import networkx as nx

from ..diagnostics import Diagnostics, Emit
from ..model import LayoutResult, Node, NodeType, Size
from ..presets import GridConfig, HierarchicalConfig
from .base import check_finite, prepare, size_resolver
from .grid import fallback_result
from .layered import layered_layout


KIND = "hierarchical"

HUB_TYPES = frozenset({NodeType.PUZZLE, NodeType.ELEMENT})

# Starting angle (degrees, y down) by satellite count; 5+ uses the default
ORBIT_START_ANGLES: Dict[int, float] = {1: 90.0, 2: 45.0, 3: 90.0, 4: 45.0}
DEFAULT_START_ANGLE = -90.0
# Angular step overrides; everything else is 360 / k
ORBIT_STEP_OVERRIDES: Dict[int, float] = {2: 90.0}


# ============================================================================ #
# Satellite discovery
# ============================================================================ #

def find_satellites(
    nodes: Sequence[Node],
    diag: Optional[Diagnostics] = None,
) -> Dict[str, List[str]]:
    """
    Map hub id -> satellite ids (input order).

    Parent links that point nowhere, at a non-hub, or around a cycle are
    ignored; the child stays on the backbone.
    """
    by_id = {n.id: n for n in nodes}
    links = nx.DiGraph()

    for n in nodes:
        if not n.parent_id:
            continue
        parent = by_id.get(n.parent_id)
        if parent is None:
            if diag:
                diag.warn(f"Node '{n.id}' has unknown parent '{n.parent_id}'; kept on backbone")
            continue
        if parent.type not in HUB_TYPES:
            if diag:
                diag.warn(
                    f"Node '{n.id}' parent '{parent.id}' is not a hub type ({parent.type.value}); kept on backbone"
                )
            continue
        links.add_edge(n.id, parent.id)

    for cycle in list(nx.simple_cycles(links)):
        if diag:
            diag.warn(f"Parent cycle ignored: {' -> '.join(cycle)}")
        for child in cycle:
            if links.has_node(child):
                links.remove_edges_from(list(links.out_edges(child)))

    satellites: Dict[str, List[str]] = {}
    for n in nodes:
        if not links.has_node(n.id):
            continue
        for _, hub in links.out_edges(n.id):
            satellites.setdefault(hub, []).append(n.id)
    return satellites


def hub_order(satellites: Dict[str, List[str]], nodes: Sequence[Node]) -> List[str]:
    """Hubs sorted so a hub is orbited only after its own hub (if any)."""
    parent_of = {s: hub for hub, sats in satellites.items() for s in sats}
    index = {n.id: i for i, n in enumerate(nodes)}

    def _depth(hub: str) -> int:
        d = 0
        while hub in parent_of:
            hub = parent_of[hub]
            d += 1
        return d

    return sorted(satellites, key=lambda h: (_depth(h), index[h]))


# ============================================================================ #
# Orbit geometry
# ============================================================================ #

def orbit_radius(hub_width: float, satellite_count: int, cfg: HierarchicalConfig) -> float:
    return (
        hub_width / 2.0
        + cfg.node_width / 2.0
        + cfg.orbit_gap
        + cfg.per_child_orbit_growth_factor * max(satellite_count - 1, 0)
    )


def orbit_footprint(hub_width: float, satellite_count: int, cfg: HierarchicalConfig) -> Size:
    """Square reserved for a hub and its orbit during the backbone pass."""
    capped = min(satellite_count, cfg.satellite_estimate_cap)
    estimate = orbit_radius(hub_width, capped, cfg)
    side = 2.0 * (estimate + cfg.node_width / 2.0)
    return Size(side, side)


def orbit_angles(count: int) -> List[float]:
    if count <= 0:
        return []
    start = ORBIT_START_ANGLES.get(count, DEFAULT_START_ANGLE)
    step = ORBIT_STEP_OVERRIDES.get(count, 360.0 / count)
    return [start + i * step for i in range(count)]


# ============================================================================ #
# Strategy
# ============================================================================ #

def compute_layout_hierarchical(
    nodes: Sequence[Any],
    edges: Sequence[Any],
    config: Optional[HierarchicalConfig] = None,
    *,
    grid: Optional[GridConfig] = None,
    emit: Optional[Emit] = None,
    debug: bool = False,
) -> LayoutResult:
    cfg = config or HierarchicalConfig()
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
    satellites = find_satellites(prepared.nodes, diag)

    try:
        visual: Dict[str, Size] = {n.id: size_for(n) for n in prepared.nodes}

        footprint: Dict[str, Tuple[float, float]] = {}
        for n in prepared.nodes:
            size = visual[n.id]
            if n.id in satellites:
                size = orbit_footprint(size.width, len(satellites[n.id]), cfg)
            footprint[n.id] = (size.width, size.height)

        G = nx.DiGraph()
        G.add_nodes_from(n.id for n in prepared.nodes)
        G.add_edges_from((e.source, e.target) for e in prepared.edges)

        drawing = layered_layout(
            G,
            footprint,
            direction=cfg.direction,
            node_separation=cfg.node_separation,
            rank_separation=cfg.rank_separation,
            margin_x=cfg.margin_x,
            margin_y=cfg.margin_y,
            crossing_passes=cfg.crossing_passes,
        )
        centers: Dict[str, Tuple[float, float]] = {
            nid: (cx, cy) for nid, (cx, cy, _, _) in drawing.boxes.items()
        }

        for hub in hub_order(satellites, prepared.nodes):
            hx, hy = centers[hub]
            sats = satellites[hub]
            radius = orbit_radius(visual[hub].width, len(sats), cfg)
            for sat, angle in zip(sats, orbit_angles(len(sats))):
                a = math.radians(angle)
                centers[sat] = (hx + radius * math.cos(a), hy + radius * math.sin(a))

        if cfg.anchor_center and prepared.center is not None:
            ox, oy = centers[prepared.center.id]
            centers = {nid: (x - ox, y - oy) for nid, (x, y) in centers.items()}

        positioned = [
            n.placed(centers[n.id][0], centers[n.id][1], visual[n.id])
            for n in prepared.nodes
        ]
        check_finite(positioned)
    except Exception as exc:
        diag.error(f"hierarchical layout failed, using grid placement: {exc}")
        return fallback_result(
            prepared.nodes, prepared.edges,
            config=grid_cfg, warnings=diag.warnings, kind=KIND, size_for=size_for,
        )

    diag.debug(
        "hierarchical layout complete",
        hubs=len(satellites),
        crossings=drawing.crossings,
        reversed_edges=len(drawing.reversed_edges),
        ms=diag.elapsed_ms,
    )
    return LayoutResult(
        nodes=positioned,
        edges=prepared.edges,
        warnings=diag.warnings,
        kind=KIND,
    )


__all__ = [
    "compute_layout_hierarchical",
    "find_satellites",
    "hub_order",
    "orbit_radius",
    "orbit_footprint",
    "orbit_angles",
    "HUB_TYPES",
]
