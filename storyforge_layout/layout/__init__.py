# storyforge_layout/layout/__init__.py

"""
Layout subpackage.

Provides:
  - radial sector layout
  - force-directed (spring embedder) layout
  - hierarchical orbit layout (layered backbone + satellite orbits)
  - grid placement used as the common fallback
"""

from __future__ import annotations

from .grid import grid_layout
from .radial import compute_layout_radial
from .force import compute_layout_force
from .hierarchical import compute_layout_hierarchical
from .layered import layered_layout, LayeredDrawing

__all__ = [
    "grid_layout",
    "compute_layout_radial",
    "compute_layout_force",
    "compute_layout_hierarchical",
    "layered_layout",
    "LayeredDrawing",
]
