# render2d.py

"""
2D debug preview for a LayoutResult.

Draws each node as a box at its ``visual_size``, straight edges between
box centers and short labels. Screen convention is kept: y grows
downward, so the axis is inverted.

This is a quick look at a layout, not the production renderer.
"""

from __future__ import annotations

from typing import Dict, Tuple

import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from .geometry import bounding_box
from .model import LayoutResult, NodeType


TYPE_COLORS: Dict[NodeType, str] = {
    NodeType.CHARACTER: "#4c78a8",
    NodeType.PUZZLE: "#f58518",
    NodeType.ELEMENT: "#54a24b",
    NodeType.TIMELINE: "#b279a2",
    NodeType.UNKNOWN: "#9d9d9d",
}

BACKGROUND = "#101218"
EDGE_COLOR = (0.75, 0.78, 0.85, 0.55)
LABEL_COLOR = "#f0f2f6"


# =============================================================================
# Utilities
# =============================================================================

def _frame(result: LayoutResult, margin: float = 0.06) -> Tuple[float, float, float, float]:
    """Padded axis limits from the node boxes."""
    box = bounding_box(result.nodes)
    span = max(box.width, box.height, 1.0)
    pad = span * margin
    return box.min_x - pad, box.max_x + pad, box.min_y - pad, box.max_y + pad


def _short(text: str, limit: int = 18) -> str:
    return text if len(text) <= limit else text[: limit - 1] + "…"


# =============================================================================
# Main entry point
# =============================================================================

def draw_layout_preview(
    result: LayoutResult,
    outfile: str,
    *,
    title: str = "",
    dpi: int = 120,
    show_labels: bool = True,
) -> bool:
    """
    Render ``result`` to a PNG at ``outfile``.

    Returns False (and writes nothing) when there is nothing to draw.
    """
    placed = [n for n in result.nodes if n.position is not None]
    if not placed:
        return False

    pos = {n.id: (n.position.x, n.position.y) for n in placed}
    x_min, x_max, y_min, y_max = _frame(result)

    aspect = (y_max - y_min) / max(x_max - x_min, 1e-9)
    width_in = 12.0
    fig, ax = plt.subplots(
        figsize=(width_in, max(4.0, min(width_in * aspect, 24.0))),
        facecolor=BACKGROUND,
    )
    ax.set_facecolor(BACKGROUND)
    ax.set_xlim(x_min, x_max)
    ax.set_ylim(y_min, y_max)
    ax.invert_yaxis()
    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_aspect("equal", "box")

    # ----------------------------------------------------------
    # Edges
    # ----------------------------------------------------------
    for e in result.edges:
        if e.source not in pos or e.target not in pos:
            continue
        (x0, y0), (x1, y1) = pos[e.source], pos[e.target]
        ax.plot([x0, x1], [y0, y1], color=EDGE_COLOR, linewidth=1.0, zorder=1)

    # ----------------------------------------------------------
    # Nodes
    # ----------------------------------------------------------
    for n in placed:
        w = n.visual_size.width if n.visual_size else 10.0
        h = n.visual_size.height if n.visual_size else 10.0
        x, y = pos[n.id]
        ax.add_patch(
            Rectangle(
                (x - w / 2.0, y - h / 2.0),
                w,
                h,
                facecolor=TYPE_COLORS.get(n.type, TYPE_COLORS[NodeType.UNKNOWN]),
                edgecolor="white" if n.is_center else "none",
                linewidth=2.0 if n.is_center else 0.0,
                alpha=0.9,
                zorder=2,
            )
        )
        if show_labels:
            ax.text(
                x,
                y,
                _short(n.label or n.id),
                color=LABEL_COLOR,
                fontsize=7,
                ha="center",
                va="center",
                zorder=3,
            )

    if title:
        ax.set_title(title, fontsize=12, color=LABEL_COLOR, loc="left")

    plt.tight_layout(pad=0.5)
    plt.savefig(outfile, dpi=dpi, facecolor=BACKGROUND)
    plt.close(fig)
    return True


__all__ = ["draw_layout_preview", "TYPE_COLORS"]
