"""
StoryForge layout engine.

Pure (nodes, edges, config) -> positioned graph functions for the
relationship views: radial sectors, force-directed, and hierarchical
orbit, behind one selector.
"""

# ---------------------------------------------------------------------------
# Model and validation
# ---------------------------------------------------------------------------
from .model import (
    NodeType,
    Position,
    Size,
    Node,
    Edge,
    LayoutResult,
    ValidationResult,
    node_from_dict,
    edge_from_dict,
    validate,
)

# ---------------------------------------------------------------------------
# Configuration and presets
# ---------------------------------------------------------------------------
from .presets import (
    GridConfig,
    RadialConfig,
    ForceConfig,
    HierarchicalConfig,
    LayoutConfig,
    DEFAULT_CONFIG,
)
from .config import EngineSettings, load_settings

# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------
from .diagnostics import Diagnostics, DEFAULT_EMIT

# ---------------------------------------------------------------------------
# Layout engines
# ---------------------------------------------------------------------------
from .layout import (
    grid_layout,
    compute_layout_radial,
    compute_layout_force,
    compute_layout_hierarchical,
)
from .selector import LayoutKind, LAYOUTS, get_layout, compute_layout

# ---------------------------------------------------------------------------
# Analytics and geometry
# ---------------------------------------------------------------------------
from .analytics import LayoutStats, compute_layout_stats
from .geometry import (
    Bounds,
    bounding_box,
    boxes_overlap,
    viewport_bounds,
    constrain_to_viewport,
)

# ---------------------------------------------------------------------------
# I/O and rendering
# ---------------------------------------------------------------------------
from .io import GraphFileError, read_graph, write_result
from .render2d import draw_layout_preview

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
__all__ = [
    # Model
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

    # Config
    "GridConfig",
    "RadialConfig",
    "ForceConfig",
    "HierarchicalConfig",
    "LayoutConfig",
    "DEFAULT_CONFIG",
    "EngineSettings",
    "load_settings",

    # Diagnostics
    "Diagnostics",
    "DEFAULT_EMIT",

    # Layouts
    "grid_layout",
    "compute_layout_radial",
    "compute_layout_force",
    "compute_layout_hierarchical",
    "LayoutKind",
    "LAYOUTS",
    "get_layout",
    "compute_layout",

    # Analytics / geometry
    "LayoutStats",
    "compute_layout_stats",
    "Bounds",
    "bounding_box",
    "boxes_overlap",
    "viewport_bounds",
    "constrain_to_viewport",

    # I/O / rendering
    "GraphFileError",
    "read_graph",
    "write_result",
    "draw_layout_preview",
]
