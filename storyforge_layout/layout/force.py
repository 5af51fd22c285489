"""
Force-directed layout (spring embedder).

A fixed-step simulation in the style of d3-force, written against numpy:

  - many-body repulsion (negative charge, ``distance_max`` cutoff)
  - link springs toward ``link_distance`` with degree-based bias
  - link springs lengthened for Character-to-Character pairs
  - positional centering pull
  - pairwise collision on per-type radii (larger for the center node),
    relaxed ``collision_iterations`` times per tick
  - alpha cooling from 1 to ``alpha_min`` over exactly ``iterations`` ticks

The center node, if any, is pinned at the origin for the whole run.
Initial placement is deterministic (phyllotaxis spiral or type rings) and
the only random source, used to separate coincident points, is seeded.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import networkx as nx

from ..diagnostics import Emit
from ..model import LayoutResult, Node, NodeType
from ..presets import ForceConfig, GridConfig
from .base import check_finite, prepare, size_resolver
from .grid import fallback_result


KIND = "force"

INITIAL_RADIUS = 10.0
GOLDEN_ANGLE = math.pi * (3.0 - math.sqrt(5.0))

# Type rings for the "typed" seed: characters innermost
_OUTER_TYPE_ORDER = [NodeType.ELEMENT, NodeType.PUZZLE, NodeType.TIMELINE, NodeType.UNKNOWN]


# ============================================================================ #
# Initial placement
# ============================================================================ #

def _phyllotaxis_seed(count: int, cx: float, cy: float) -> np.ndarray:
    idx = np.arange(count, dtype=float)
    r = INITIAL_RADIUS * np.sqrt(0.5 + idx)
    theta = idx * GOLDEN_ANGLE
    return np.column_stack([cx + r * np.cos(theta), cy + r * np.sin(theta)])


def _typed_seed(nodes: Sequence[Node], cfg: ForceConfig, cx: float, cy: float) -> np.ndarray:
    """
    Characters on an inner ring, other types on successive outer rings;
    groups larger than 20 are laid on a spiral (8 per revolution).
    """
    span = min(cfg.width, cfg.height)
    out = np.zeros((len(nodes), 2), dtype=float)

    groups: Dict[NodeType, List[int]] = {}
    for i, n in enumerate(nodes):
        groups.setdefault(n.type, []).append(i)

    chars = groups.get(NodeType.CHARACTER, [])
    if chars:
        radius = span * 0.3
        step = 2 * math.pi / len(chars)
        for k, i in enumerate(chars):
            a = k * step - math.pi / 2
            out[i] = (cx + radius * math.cos(a), cy + radius * math.sin(a))

    current = span * 0.45
    for node_type in _OUTER_TYPE_ORDER:
        members = groups.get(node_type, [])
        if not members:
            continue
        if len(members) > 20:
            inc = 2 * math.pi / 8
            for k, i in enumerate(members):
                r = current + (k / 8.0) * 50.0
                out[i] = (cx + r * math.cos(k * inc), cy + r * math.sin(k * inc))
            current += math.ceil(len(members) / 8.0) * 50.0 + 100.0
        else:
            step = 2 * math.pi / len(members)
            for k, i in enumerate(members):
                a = k * step - math.pi / 2
                out[i] = (cx + current * math.cos(a), cy + current * math.sin(a))
            current += 150.0
    return out


# ============================================================================ #
# Forces
# ============================================================================ #

def _jiggle(rng: np.random.Generator, size=None):
    return (rng.random(size) - 0.5) * 1e-6


def _apply_links(pos, vel, sources, targets, distances, bias, alpha, cfg: ForceConfig, rng) -> None:
    for k in range(len(sources)):
        s, t = sources[k], targets[k]
        dx = pos[t, 0] + vel[t, 0] - pos[s, 0] - vel[s, 0]
        dy = pos[t, 1] + vel[t, 1] - pos[s, 1] - vel[s, 1]
        if dx == 0.0 and dy == 0.0:
            dx, dy = _jiggle(rng), _jiggle(rng)
        dist = math.hypot(dx, dy)
        f = (dist - distances[k]) / dist * alpha * cfg.link_strength
        dx *= f
        dy *= f
        b = bias[k]
        vel[t, 0] -= dx * b
        vel[t, 1] -= dy * b
        vel[s, 0] += dx * (1.0 - b)
        vel[s, 1] += dy * (1.0 - b)


def _apply_charge(pos, vel, alpha, cfg: ForceConfig) -> None:
    n = len(pos)
    if n < 2 or cfg.charge_strength == 0.0:
        return
    diff = pos[None, :, :] - pos[:, None, :]          # diff[i, j] = p_j - p_i
    d2 = np.einsum("ijk,ijk->ij", diff, diff)
    within = d2 < cfg.distance_max ** 2
    np.fill_diagonal(within, False)
    w = np.where(within, cfg.charge_strength * alpha / np.maximum(d2, 1.0), 0.0)
    vel += np.einsum("ijk,ij->ik", diff, w)


def _apply_collision(pos, vel, radii, cfg: ForceConfig, rng) -> None:
    n = len(pos)
    if n < 2 or cfg.collision_strength == 0.0:
        return
    q = pos + vel
    diff = q[:, None, :] - q[None, :, :]              # diff[i, j] = q_i - q_j
    dist = np.sqrt(np.einsum("ijk,ijk->ij", diff, diff))
    reach = radii[:, None] + radii[None, :]
    hit = dist < reach
    np.fill_diagonal(hit, False)
    if not hit.any():
        return

    coincident = hit & (dist == 0.0)
    if coincident.any():
        diff[coincident] = _jiggle(rng, (int(coincident.sum()), 2))
        dist = np.sqrt(np.einsum("ijk,ijk->ij", diff, diff))

    safe = np.where(hit, dist, 1.0)
    push = np.where(hit, (reach - dist) / safe * cfg.collision_strength, 0.0)

    r2 = radii ** 2
    denom = r2[:, None] + r2[None, :]
    share = np.where(denom > 0, r2[None, :] / np.where(denom > 0, denom, 1.0), 0.5)
    vel += np.einsum("ijk,ij->ik", diff, push * share)


def _apply_centering(pos, vel, target, alpha, cfg: ForceConfig) -> None:
    if cfg.center_strength == 0.0:
        return
    vel += (target[None, :] - pos) * (cfg.center_strength * alpha)


def run_simulation(
    pos: np.ndarray,
    fixed: np.ndarray,
    sources: np.ndarray,
    targets: np.ndarray,
    radii: np.ndarray,
    target: np.ndarray,
    cfg: ForceConfig,
    distances: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Advance the simulation exactly ``cfg.iterations`` ticks and return positions."""
    rng = np.random.default_rng(cfg.seed)
    pos = pos.astype(float).copy()
    vel = np.zeros_like(pos)
    anchor = pos[fixed].copy()

    if distances is None:
        distances = np.full(len(sources), cfg.link_distance)

    n = len(pos)
    count = np.bincount(np.concatenate([sources, targets]), minlength=n).astype(float) if len(sources) else np.zeros(n)
    bias = count[sources] / (count[sources] + count[targets]) if len(sources) else np.zeros(0)

    alpha = 1.0
    alpha_decay = 1.0 - cfg.alpha_min ** (1.0 / max(cfg.iterations, 1))
    keep = 1.0 - cfg.velocity_decay

    for _ in range(cfg.iterations):
        alpha += (0.0 - alpha) * alpha_decay
        _apply_links(pos, vel, sources, targets, distances, bias, alpha, cfg, rng)
        _apply_charge(pos, vel, alpha, cfg)
        for _pass in range(cfg.collision_iterations):
            _apply_collision(pos, vel, radii, cfg, rng)
        _apply_centering(pos, vel, target, alpha, cfg)

        vel *= keep
        pos += vel
        pos[fixed] = anchor
        vel[fixed] = 0.0

    return pos


# ============================================================================ #
# Strategy
# ============================================================================ #

def compute_layout_force(
    nodes: Sequence[Any],
    edges: Sequence[Any],
    config: Optional[ForceConfig] = None,
    *,
    grid: Optional[GridConfig] = None,
    emit: Optional[Emit] = None,
    debug: bool = False,
) -> LayoutResult:
    """Relax node positions with the spring embedder; center pinned at (0, 0)."""
    cfg = config or ForceConfig()
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
    center = prepared.center

    try:
        # Working graph: the simulation never touches the caller's objects
        G = nx.MultiGraph()
        for i, n in enumerate(prepared.nodes):
            G.add_node(n.id, index=i)
        for e in prepared.edges:
            if e.source != e.target:
                G.add_edge(e.source, e.target)

        index = {nid: data["index"] for nid, data in G.nodes(data=True)}
        links = list(G.edges())
        sources = np.array([index[u] for u, _ in links], dtype=int)
        targets = np.array([index[v] for _, v in links], dtype=int)

        if center is not None:
            target = np.zeros(2)
        else:
            target = np.array([cfg.width / 2.0, cfg.height / 2.0])

        if cfg.initial_placement == "typed":
            pos = _typed_seed(prepared.nodes, cfg, float(target[0]), float(target[1]))
        else:
            pos = np.zeros((len(prepared.nodes), 2))
            free = [i for i, n in enumerate(prepared.nodes) if center is None or n.id != center.id]
            pos[free] = _phyllotaxis_seed(len(free), float(target[0]), float(target[1]))

        fixed = np.zeros(len(prepared.nodes), dtype=bool)
        if center is not None:
            ci = index[center.id]
            fixed[ci] = True
            pos[ci] = (0.0, 0.0)

        radii = np.array([cfg.collision_radius_for(n.type) for n in prepared.nodes], dtype=float)
        if center is not None:
            radii[ci] = max(radii[ci], cfg.center_collision_radius)

        is_char = np.array([n.type is NodeType.CHARACTER for n in prepared.nodes], dtype=bool)
        distances = np.full(len(links), cfg.link_distance, dtype=float)
        if len(links):
            distances[is_char[sources] & is_char[targets]] *= cfg.character_link_factor

        final = run_simulation(pos, fixed, sources, targets, radii, target, cfg, distances)

        positioned = [
            n.placed(float(final[i, 0]), float(final[i, 1]), size_for(n))
            for i, n in enumerate(prepared.nodes)
        ]
        check_finite(positioned)
    except Exception as exc:
        diag.error(f"force layout failed, using grid placement: {exc}")
        return fallback_result(
            prepared.nodes, prepared.edges,
            config=grid_cfg, warnings=diag.warnings, kind=KIND, size_for=size_for,
        )

    diag.debug("force layout complete", iterations=cfg.iterations, ms=diag.elapsed_ms)
    return LayoutResult(
        nodes=positioned,
        edges=prepared.edges,
        warnings=diag.warnings,
        kind=KIND,
    )


__all__ = ["compute_layout_force", "run_simulation"]
