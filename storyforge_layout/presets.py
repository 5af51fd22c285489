"""
Preset configuration for the layout strategies.

Every value here is an empirically tuned default, not a derived constant:
gap sizes, orbit growth factors and angular spreads were chosen for a
renderer drawing ~170x60 px node cards. Re-tune freely for another scale.

Malformed values never raise. Each config clamps them in __post_init__
and records what it changed on ``adjustments`` so the strategy can
surface it as a warning.
"""

from __future__ import annotations

import math
import re
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, Dict, List, Optional

from .model import NodeType


# --------------------------------------------------------------------------- #
# Clamping helpers
# --------------------------------------------------------------------------- #

_CAMEL = re.compile(r"(?<!^)(?=[A-Z])")


def to_snake(key: str) -> str:
    return _CAMEL.sub("_", key).lower()


class _Clamped:
    """Mixin: numeric coercion with a paper trail."""

    adjustments: List[str]

    def _number(
        self,
        name: str,
        default: float,
        *,
        minimum: Optional[float] = None,
        maximum: Optional[float] = None,
        exclusive_min: bool = False,
        integer: bool = False,
    ) -> None:
        raw = getattr(self, name)
        try:
            if isinstance(raw, bool):
                raise TypeError(name)
            value = float(raw)
        except (TypeError, ValueError):
            self._adjust(name, raw, default)
            return
        if not math.isfinite(value):
            self._adjust(name, raw, default)
            return
        if minimum is not None:
            too_small = value <= minimum if exclusive_min else value < minimum
            if too_small:
                self._adjust(name, raw, default)
                return
        if maximum is not None and value > maximum:
            self._adjust(name, raw, maximum)
            return
        setattr(self, name, int(value) if integer else value)

    def _adjust(self, name: str, raw: Any, value: Any) -> None:
        self.adjustments.append(f"{type(self).__name__}.{name}={raw!r} clamped to {value!r}")
        setattr(self, name, value)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)  # type: ignore[call-overload]
        d.pop("adjustments", None)
        return d

    @classmethod
    def from_options(cls, base: Optional[Any] = None, **options: Any):
        """
        Build a config from camelCase or snake_case options, on top of
        ``base`` (or the defaults). Keys that do not belong to this config
        are ignored so one option bag can feed every strategy.
        """
        names = {f.name for f in fields(cls) if f.name != "adjustments"}  # type: ignore[arg-type]
        values = base.to_dict() if base is not None else {}
        for key, value in options.items():
            snake = to_snake(key)
            if snake in names:
                values[snake] = value
        cfg = cls(**values)
        if base is not None:
            cfg.adjustments[:0] = list(base.adjustments)
        return cfg


# --------------------------------------------------------------------------- #
# Grid fallback
# --------------------------------------------------------------------------- #

@dataclass
class GridConfig(_Clamped):
    columns: int = 6
    cell_width: float = 200.0
    cell_height: float = 150.0

    adjustments: List[str] = field(default_factory=list, repr=False, compare=False)

    def __post_init__(self):
        self._number("columns", 6, minimum=1, integer=True)
        self._number("cell_width", 200.0, minimum=0, exclusive_min=True)
        self._number("cell_height", 150.0, minimum=0, exclusive_min=True)


# --------------------------------------------------------------------------- #
# Radial sector layout
# --------------------------------------------------------------------------- #

@dataclass
class RadialConfig(_Clamped):
    base_radius: float = 250.0
    min_radius_between_rings: float = 120.0
    max_nodes_per_ring: int = 5
    max_spread_degrees: float = 60.0

    node_width: float = 170.0
    node_height: float = 60.0
    center_node_width: float = 190.0
    center_node_height: float = 70.0

    adjustments: List[str] = field(default_factory=list, repr=False, compare=False)

    def __post_init__(self):
        self._number("base_radius", 250.0, minimum=0, exclusive_min=True)
        self._number("min_radius_between_rings", 120.0, minimum=0, exclusive_min=True)
        self._number("max_nodes_per_ring", 5, minimum=1, integer=True)
        self._number("max_spread_degrees", 60.0, minimum=0, maximum=360.0)
        self._number("node_width", 170.0, minimum=0, exclusive_min=True)
        self._number("node_height", 60.0, minimum=0, exclusive_min=True)
        self._number("center_node_width", 190.0, minimum=0, exclusive_min=True)
        self._number("center_node_height", 70.0, minimum=0, exclusive_min=True)


# --------------------------------------------------------------------------- #
# Force-directed layout
# --------------------------------------------------------------------------- #

INITIAL_PLACEMENTS = ("phyllotaxis", "typed")

# Collision radius per node type label; about half the widest card of each type
DEFAULT_COLLISION_RADII: Dict[str, float] = {
    "Character": 90.0,
    "Puzzle": 75.0,
    "Element": 45.0,
    "Timeline": 65.0,
    "Unknown": 50.0,
}


@dataclass
class ForceConfig(_Clamped):
    width: float = 800.0
    height: float = 600.0

    charge_strength: float = -800.0
    distance_max: float = 400.0
    link_distance: float = 120.0
    link_strength: float = 0.4
    center_strength: float = 0.05
    character_link_factor: float = 1.5
    collision_radii: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_COLLISION_RADII))
    center_collision_radius: float = 60.0
    collision_strength: float = 0.9
    collision_iterations: int = 3

    iterations: int = 300
    velocity_decay: float = 0.4
    alpha_min: float = 0.001

    initial_placement: str = "phyllotaxis"
    seed: int = 42

    node_width: float = 170.0
    node_height: float = 60.0
    center_node_width: float = 190.0
    center_node_height: float = 70.0

    adjustments: List[str] = field(default_factory=list, repr=False, compare=False)

    def __post_init__(self):
        self._number("width", 800.0, minimum=0, exclusive_min=True)
        self._number("height", 600.0, minimum=0, exclusive_min=True)
        self._number("charge_strength", -800.0)
        if self.charge_strength > 0:
            self._adjust("charge_strength", self.charge_strength, -self.charge_strength)
        self._number("distance_max", 400.0, minimum=0, exclusive_min=True)
        self._number("link_distance", 120.0, minimum=0)
        self._number("link_strength", 0.4, minimum=0, maximum=1.0)
        self._number("center_strength", 0.05, minimum=0, maximum=1.0)
        self._number("character_link_factor", 1.5, minimum=0)
        self._collision_table()
        self._number("center_collision_radius", 60.0, minimum=0)
        self._number("collision_strength", 0.9, minimum=0, maximum=1.0)
        self._number("collision_iterations", 3, minimum=0, maximum=10, integer=True)
        self._number("iterations", 300, minimum=0, maximum=5000, integer=True)
        self._number("velocity_decay", 0.4, minimum=0, maximum=1.0)
        self._number("alpha_min", 0.001, minimum=0, exclusive_min=True, maximum=0.999)
        self._number("seed", 42, integer=True)
        self._number("node_width", 170.0, minimum=0, exclusive_min=True)
        self._number("node_height", 60.0, minimum=0, exclusive_min=True)
        self._number("center_node_width", 190.0, minimum=0, exclusive_min=True)
        self._number("center_node_height", 70.0, minimum=0, exclusive_min=True)
        if self.initial_placement not in INITIAL_PLACEMENTS:
            self._adjust("initial_placement", self.initial_placement, "phyllotaxis")

    def _collision_table(self) -> None:
        """Merge a partial ``collision_radii`` mapping onto the defaults."""
        raw = self.collision_radii
        table = dict(DEFAULT_COLLISION_RADII)
        if not isinstance(raw, dict):
            self._adjust("collision_radii", raw, table)
            return
        for key, value in raw.items():
            label = NodeType.coerce(key).value
            try:
                radius = float(value)
            except (TypeError, ValueError):
                radius = float("nan")
            if isinstance(value, bool) or not math.isfinite(radius) or radius < 0:
                self.adjustments.append(
                    f"{type(self).__name__}.collision_radii[{key!r}]={value!r} clamped to {table[label]!r}"
                )
                continue
            table[label] = radius
        self.collision_radii = table

    def collision_radius_for(self, node_type: Any) -> float:
        return self.collision_radii[NodeType.coerce(node_type).value]


# --------------------------------------------------------------------------- #
# Hierarchical orbit layout
# --------------------------------------------------------------------------- #

_DIRECTIONS = {
    "tb": "TB",
    "top-bottom": "TB",
    "top_bottom": "TB",
    "lr": "LR",
    "left-right": "LR",
    "left_right": "LR",
}


@dataclass
class HierarchicalConfig(_Clamped):
    direction: str = "TB"
    node_separation: float = 90.0
    rank_separation: float = 120.0
    margin_x: float = 30.0
    margin_y: float = 30.0

    node_width: float = 170.0
    node_height: float = 60.0
    center_node_width: float = 190.0
    center_node_height: float = 70.0

    # Orbit tuning
    orbit_gap: float = 40.0
    per_child_orbit_growth_factor: float = 15.0
    satellite_estimate_cap: int = 8

    crossing_passes: int = 24
    anchor_center: bool = True

    adjustments: List[str] = field(default_factory=list, repr=False, compare=False)

    def __post_init__(self):
        direction = _DIRECTIONS.get(str(self.direction).strip().lower())
        if direction is None:
            self._adjust("direction", self.direction, "TB")
        else:
            self.direction = direction
        self._number("node_separation", 90.0, minimum=0)
        self._number("rank_separation", 120.0, minimum=0)
        self._number("margin_x", 30.0, minimum=0)
        self._number("margin_y", 30.0, minimum=0)
        self._number("node_width", 170.0, minimum=0, exclusive_min=True)
        self._number("node_height", 60.0, minimum=0, exclusive_min=True)
        self._number("center_node_width", 190.0, minimum=0, exclusive_min=True)
        self._number("center_node_height", 70.0, minimum=0, exclusive_min=True)
        self._number("orbit_gap", 40.0, minimum=0)
        self._number("per_child_orbit_growth_factor", 15.0, minimum=0)
        self._number("satellite_estimate_cap", 8, minimum=1, integer=True)
        self._number("crossing_passes", 24, minimum=0, maximum=200, integer=True)
        self.anchor_center = bool(self.anchor_center)


# --------------------------------------------------------------------------- #
# Aggregate configuration
# --------------------------------------------------------------------------- #

@dataclass
class LayoutConfig:
    """
    One bag of per-strategy configs, written alongside results for
    reproducibility.
    """

    radial: RadialConfig = field(default_factory=RadialConfig)
    force: ForceConfig = field(default_factory=ForceConfig)
    hierarchical: HierarchicalConfig = field(default_factory=HierarchicalConfig)
    grid: GridConfig = field(default_factory=GridConfig)

    version: str = "storyforge.layout.v1"

    def __post_init__(self):
        # Callers sometimes pass None for a section; guard against that
        if self.radial is None:
            self.radial = RadialConfig()
        if self.force is None:
            self.force = ForceConfig()
        if self.hierarchical is None:
            self.hierarchical = HierarchicalConfig()
        if self.grid is None:
            self.grid = GridConfig()

    @property
    def adjustments(self) -> List[str]:
        return (
            self.radial.adjustments
            + self.force.adjustments
            + self.hierarchical.adjustments
            + self.grid.adjustments
        )

    def with_overrides(self, **options: Any) -> "LayoutConfig":
        """Apply a flat camelCase/snake_case option bag to every section."""
        if not options:
            return self
        return replace(
            self,
            radial=RadialConfig.from_options(self.radial, **options),
            force=ForceConfig.from_options(self.force, **options),
            hierarchical=HierarchicalConfig.from_options(self.hierarchical, **options),
            grid=GridConfig.from_options(self.grid, **options),
        )

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "LayoutConfig":
        d = d or {}
        return cls(
            radial=RadialConfig.from_options(**(d.get("radial") or {})),
            force=ForceConfig.from_options(**(d.get("force") or {})),
            hierarchical=HierarchicalConfig.from_options(**(d.get("hierarchical") or {})),
            grid=GridConfig.from_options(**(d.get("grid") or {})),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "radial": self.radial.to_dict(),
            "force": self.force.to_dict(),
            "hierarchical": self.hierarchical.to_dict(),
            "grid": self.grid.to_dict(),
            "version": self.version,
        }


# Singleton default config
DEFAULT_CONFIG = LayoutConfig()


__all__ = [
    "GridConfig",
    "RadialConfig",
    "ForceConfig",
    "HierarchicalConfig",
    "LayoutConfig",
    "DEFAULT_CONFIG",
    "INITIAL_PLACEMENTS",
    "DEFAULT_COLLISION_RADII",
    "to_snake",
]
