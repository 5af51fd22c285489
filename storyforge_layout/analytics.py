"""
Quality numbers for a finished layout.

Used by the CLI ``--stats`` flag and by tests to check structural
properties (no overlaps, sensible edge lengths) without pinning exact
coordinates.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

import networkx as nx
import numpy as np

from .geometry import bounding_box
from .model import LayoutResult


# =========================================================================== #
# Data classes
# =========================================================================== #

@dataclass
class LayoutStats:
    n_nodes: int
    n_edges: int
    n_components: int
    width: float
    height: float
    overlap_count: int
    min_center_distance: float
    mean_edge_length: float
    fallback: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# =========================================================================== #
# Stats
# =========================================================================== #

def _positions_and_boxes(result: LayoutResult):
    placed = [n for n in result.nodes if n.position is not None]
    xy = np.array([(n.position.x, n.position.y) for n in placed], dtype=float).reshape(-1, 2)
    wh = np.array(
        [
            (n.visual_size.width, n.visual_size.height) if n.visual_size else (0.0, 0.0)
            for n in placed
        ],
        dtype=float,
    ).reshape(-1, 2)
    return placed, xy, wh


def count_overlaps(xy: np.ndarray, wh: np.ndarray) -> int:
    """Number of unordered node pairs whose boxes share interior area."""
    n = len(xy)
    if n < 2:
        return 0
    gap = np.abs(xy[:, None, :] - xy[None, :, :])
    reach = (wh[:, None, :] + wh[None, :, :]) / 2.0
    hit = np.all(gap < reach, axis=-1)
    return int(np.triu(hit, k=1).sum())


def compute_layout_stats(result: LayoutResult) -> LayoutStats:
    placed, xy, wh = _positions_and_boxes(result)
    fallback = bool(result.fallback)

    if not placed:
        return LayoutStats(0, 0, 0, 0.0, 0.0, 0, 0.0, 0.0, fallback)

    G = nx.Graph()
    G.add_nodes_from(n.id for n in placed)
    index = {n.id: i for i, n in enumerate(placed)}
    lengths = []
    for e in result.edges:
        if e.source in index and e.target in index:
            G.add_edge(e.source, e.target)
            lengths.append(float(np.linalg.norm(xy[index[e.source]] - xy[index[e.target]])))

    if len(xy) > 1:
        d = np.sqrt(((xy[:, None, :] - xy[None, :, :]) ** 2).sum(-1))
        min_dist = float(d[np.triu_indices(len(xy), k=1)].min())
    else:
        min_dist = 0.0

    box = bounding_box(placed)

    return LayoutStats(
        n_nodes=len(placed),
        n_edges=len(result.edges),
        n_components=nx.number_connected_components(G),
        width=float(box.width) if box else 0.0,
        height=float(box.height) if box else 0.0,
        overlap_count=count_overlaps(xy, wh),
        min_center_distance=min_dist,
        mean_edge_length=float(np.mean(lengths)) if lengths else 0.0,
        fallback=fallback,
    )


__all__ = ["LayoutStats", "compute_layout_stats", "count_overlaps"]
