"""
Layered (Sugiyama-style) drawing of a directed graph.

Phases:
  1. Cycle removal (greedy feedback-arc-set ordering)
  2. Rank assignment (longest path)
  3. Dummy node insertion for edges spanning several ranks
  4. Crossing reduction (barycenter sweeps, best ordering kept)
  5. Size-aware coordinate assignment
  6. Direction (TB / LR) and margins

The networkx graph built here is private to this module; callers hand in
a DiGraph plus a size per node and get back one box per node.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Hashable, Iterable, List, Set, Tuple

import networkx as nx


Box = Tuple[float, float, float, float]     # (cx, cy, width, height)


@dataclass
class LayeredDrawing:
    boxes: Dict[str, Box] = field(default_factory=dict)
    ranks: Dict[str, int] = field(default_factory=dict)
    order: List[List[Hashable]] = field(default_factory=list)
    reversed_edges: List[Tuple[str, str]] = field(default_factory=list)
    crossings: int = 0
    width: float = 0.0
    height: float = 0.0


# ============================================================================ #
# Cycle removal
# ============================================================================ #

def greedy_fas_ordering(graph: nx.DiGraph) -> List[Hashable]:
    """
    Node ordering from the Eades-Lin-Smyth heuristic. Edges pointing
    backwards in this ordering form a small feedback arc set.

    Ties are broken by graph insertion order, so the result is stable.
    """
    nodes = list(graph.nodes)
    alive: Set[Hashable] = set(nodes)
    out_deg = {n: sum(1 for m in graph.successors(n) if m != n) for n in nodes}
    in_deg = {n: sum(1 for m in graph.predecessors(n) if m != n) for n in nodes}

    head: List[Hashable] = []
    tail: List[Hashable] = []

    def _drop(n: Hashable) -> None:
        alive.discard(n)
        for m in graph.successors(n):
            if m in alive:
                in_deg[m] -= 1
        for m in graph.predecessors(n):
            if m in alive:
                out_deg[m] -= 1

    while alive:
        changed = True
        while changed:
            changed = False
            for n in [n for n in nodes if n in alive and out_deg[n] == 0]:
                _drop(n)
                tail.append(n)
                changed = True
            for n in [n for n in nodes if n in alive and in_deg[n] == 0]:
                _drop(n)
                head.append(n)
                changed = True

        if alive:
            best = max((n for n in nodes if n in alive), key=lambda n: out_deg[n] - in_deg[n])
            _drop(best)
            head.append(best)

    tail.reverse()
    return head + tail


def remove_cycles(graph: nx.DiGraph) -> Tuple[nx.DiGraph, List[Tuple[str, str]]]:
    """Return (dag, reversed_edges). Self-loops are dropped."""
    position = {n: i for i, n in enumerate(greedy_fas_ordering(graph))}

    dag = nx.DiGraph()
    dag.add_nodes_from(graph.nodes)
    reversed_edges: List[Tuple[str, str]] = []
    for u, v in graph.edges():
        if u == v:
            continue
        if position[u] > position[v]:
            reversed_edges.append((u, v))
            dag.add_edge(v, u)
        else:
            dag.add_edge(u, v)
    return dag, reversed_edges


# ============================================================================ #
# Ranks and dummy nodes
# ============================================================================ #

def assign_ranks(dag: nx.DiGraph) -> Dict[Hashable, int]:
    """Longest-path ranking: sources on rank 0, every edge points down."""
    ranks: Dict[Hashable, int] = {}
    for n in nx.topological_sort(dag):
        ranks[n] = max((ranks[p] + 1 for p in dag.predecessors(n)), default=0)
    return ranks


def insert_dummies(
    dag: nx.DiGraph,
    ranks: Dict[Hashable, int],
) -> Tuple[nx.DiGraph, Dict[Hashable, int], Set[Hashable]]:
    """Split every edge spanning k > 1 ranks into k unit edges."""
    g = nx.DiGraph()
    g.add_nodes_from(dag.nodes)
    ranks = dict(ranks)
    dummies: Set[Hashable] = set()

    for k, (u, v) in enumerate(dag.edges()):
        span = ranks[v] - ranks[u]
        if span <= 1:
            g.add_edge(u, v)
            continue
        prev = u
        for i in range(1, span):
            d = ("__dummy__", k, i)
            g.add_node(d)
            ranks[d] = ranks[u] + i
            dummies.add(d)
            g.add_edge(prev, d)
            prev = d
        g.add_edge(prev, v)

    return g, ranks, dummies


# ============================================================================ #
# Crossing reduction
# ============================================================================ #

def _inversions(seq: List[int], size: int) -> int:
    tree = [0] * (size + 1)
    count = 0
    for seen, v in enumerate(seq):
        i, not_above = v + 1, 0
        while i > 0:
            not_above += tree[i]
            i -= i & -i
        count += seen - not_above
        i = v + 1
        while i <= size:
            tree[i] += 1
            i += i & -i
    return count


def count_crossings(order: List[List[Hashable]], g: nx.DiGraph) -> int:
    total = 0
    for upper, lower in zip(order, order[1:]):
        lower_pos = {n: i for i, n in enumerate(lower)}
        pairs = sorted(
            (i, lower_pos[m])
            for i, n in enumerate(upper)
            for m in g.successors(n)
            if m in lower_pos
        )
        total += _inversions([t for _, t in pairs], len(lower))
    return total


def _sort_by_barycenter(
    layer: List[Hashable],
    fixed: List[Hashable],
    neighbors: Callable[[Hashable], Iterable[Hashable]],
) -> None:
    pos = {n: float(i) for i, n in enumerate(fixed)}
    keys: Dict[Hashable, Tuple[float, int]] = {}
    for i, n in enumerate(layer):
        nb = [pos[m] for m in neighbors(n) if m in pos]
        keys[n] = (sum(nb) / len(nb) if nb else float(i), i)
    layer.sort(key=keys.__getitem__)


def order_ranks(
    g: nx.DiGraph,
    ranks: Dict[Hashable, int],
    passes: int = 24,
) -> Tuple[List[List[Hashable]], int]:
    n_ranks = max(ranks.values()) + 1 if ranks else 0
    order: List[List[Hashable]] = [[] for _ in range(n_ranks)]
    for n in g.nodes:
        order[ranks[n]].append(n)

    best = [list(layer) for layer in order]
    best_crossings = count_crossings(order, g)

    for _ in range(passes):
        if best_crossings == 0:
            break
        for r in range(1, n_ranks):
            _sort_by_barycenter(order[r], order[r - 1], g.predecessors)
        for r in range(n_ranks - 2, -1, -1):
            _sort_by_barycenter(order[r], order[r + 1], g.successors)
        crossings = count_crossings(order, g)
        if crossings < best_crossings:
            best = [list(layer) for layer in order]
            best_crossings = crossings

    return best, best_crossings


# ============================================================================ #
# Coordinates
# ============================================================================ #

def assign_coordinates(
    order: List[List[Hashable]],
    g: nx.DiGraph,
    sizes: Dict[Hashable, Tuple[float, float]],
    node_separation: float,
    rank_separation: float,
    refine_passes: int = 4,
) -> Dict[Hashable, Tuple[float, float]]:
    """
    Rank axis: each rank is as tall as its tallest member.
    Cross axis: pack, then pull each node toward the mean of its
    neighbors in the adjacent rank without breaking the ordering.
    """
    width = {n: sizes[n][0] for layer in order for n in layer}

    ys: List[float] = []
    cursor = 0.0
    for layer in order:
        h = max((sizes[n][1] for n in layer), default=0.0)
        ys.append(cursor + h / 2.0)
        cursor += h + rank_separation

    x: Dict[Hashable, float] = {}
    spans: List[float] = []
    for layer in order:
        left = 0.0
        for n in layer:
            x[n] = left + width[n] / 2.0
            left += width[n] + node_separation
        spans.append(max(left - node_separation, 0.0))

    widest = max(spans, default=0.0)
    for layer, span in zip(order, spans):
        offset = (widest - span) / 2.0
        for n in layer:
            x[n] += offset

    def _refine(layer: List[Hashable], neighbors: Callable[[Hashable], Iterable[Hashable]]) -> None:
        if not layer:
            return
        desired = []
        for n in layer:
            nb = [x[m] for m in neighbors(n)]
            desired.append(sum(nb) / len(nb) if nb else x[n])
        placed: List[float] = []
        for i, n in enumerate(layer):
            v = desired[i]
            if i:
                v = max(v, placed[-1] + (width[layer[i - 1]] + width[n]) / 2.0 + node_separation)
            placed.append(v)
        shift = (sum(desired) - sum(placed)) / len(layer)
        for n, v in zip(layer, placed):
            x[n] = v + shift

    for _ in range(refine_passes):
        for r in range(1, len(order)):
            _refine(order[r], g.predecessors)
        for r in range(len(order) - 2, -1, -1):
            _refine(order[r], g.successors)

    return {n: (x[n], ys[r]) for r, layer in enumerate(order) for n in layer}


# ============================================================================ #
# Entry point
# ============================================================================ #

def layered_layout(
    graph: nx.DiGraph,
    sizes: Dict[str, Tuple[float, float]],
    *,
    direction: str = "TB",
    node_separation: float = 90.0,
    rank_separation: float = 120.0,
    margin_x: float = 30.0,
    margin_y: float = 30.0,
    crossing_passes: int = 24,
) -> LayeredDrawing:
    """
    Lay out ``graph`` in ranks.

    ``sizes`` maps every node to its (width, height) footprint. Returned
    boxes are centered coordinates with the drawing's top-left at
    (margin_x, margin_y).
    """
    if graph.number_of_nodes() == 0:
        return LayeredDrawing(width=2 * margin_x, height=2 * margin_y)

    horizontal = direction == "LR"

    dag, reversed_edges = remove_cycles(graph)
    ranks = assign_ranks(dag)
    g, ranks, dummies = insert_dummies(dag, ranks)
    order, crossings = order_ranks(g, ranks, crossing_passes)

    # Rank axis runs along y; for LR swap footprints and transpose afterwards
    local_sizes: Dict[Hashable, Tuple[float, float]] = {}
    for n in g.nodes:
        if n in dummies:
            local_sizes[n] = (0.0, 0.0)
        else:
            w, h = sizes[n]
            local_sizes[n] = (h, w) if horizontal else (w, h)

    coords = assign_coordinates(order, g, local_sizes, node_separation, rank_separation)

    boxes: Dict[str, Box] = {}
    for n in graph.nodes:
        a, b = coords[n]
        w, h = sizes[n]
        cx, cy = (b, a) if horizontal else (a, b)
        boxes[n] = (cx, cy, w, h)

    left = min(cx - w / 2.0 for cx, _, w, _ in boxes.values())
    top = min(cy - h / 2.0 for _, cy, _, h in boxes.values())
    dx, dy = margin_x - left, margin_y - top
    boxes = {n: (cx + dx, cy + dy, w, h) for n, (cx, cy, w, h) in boxes.items()}

    right = max(cx + w / 2.0 for cx, _, w, _ in boxes.values())
    bottom = max(cy + h / 2.0 for _, cy, _, h in boxes.values())

    return LayeredDrawing(
        boxes=boxes,
        ranks={n: ranks[n] for n in graph.nodes},
        order=order,
        reversed_edges=reversed_edges,
        crossings=crossings,
        width=right + margin_x,
        height=bottom + margin_y,
    )


__all__ = [
    "LayeredDrawing",
    "greedy_fas_ordering",
    "remove_cycles",
    "assign_ranks",
    "insert_dummies",
    "count_crossings",
    "order_ranks",
    "assign_coordinates",
    "layered_layout",
]
