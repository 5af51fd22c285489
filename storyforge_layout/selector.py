"""
Layout selector: one entry point over the three strategies.

    compute_layout(nodes, edges, kind="radial", baseRadius=300)

``kind`` may be a LayoutKind or its string value. Flat keyword options
(camelCase or snake_case) are applied on top of ``config`` and routed to
whichever strategy section they belong to.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence, Union

from .config import load_settings
from .diagnostics import Emit
from .layout.force import compute_layout_force
from .layout.hierarchical import compute_layout_hierarchical
from .layout.radial import compute_layout_radial
from .model import LayoutResult
from .presets import DEFAULT_CONFIG, LayoutConfig


class LayoutKind(str, Enum):
    RADIAL = "radial"
    FORCE_DIRECTED = "force"
    HIERARCHICAL_ORBIT = "hierarchical"

    @classmethod
    def coerce(cls, value: Union["LayoutKind", str]) -> "LayoutKind":
        if isinstance(value, LayoutKind):
            return value
        kind = _KIND_ALIASES.get(str(value).strip().lower().replace("_", "-"))
        if kind is None:
            raise ValueError(
                f"Unknown layout kind: {value!r}. Available: {[k.value for k in cls]}"
            )
        return kind


_KIND_ALIASES: Dict[str, LayoutKind] = {
    "radial": LayoutKind.RADIAL,
    "force": LayoutKind.FORCE_DIRECTED,
    "force-directed": LayoutKind.FORCE_DIRECTED,
    "hierarchical": LayoutKind.HIERARCHICAL_ORBIT,
    "hierarchical-orbit": LayoutKind.HIERARCHICAL_ORBIT,
}


StrategyFn = Callable[..., LayoutResult]

# Strategy registry for lookup by kind
LAYOUTS: Dict[LayoutKind, StrategyFn] = {
    LayoutKind.RADIAL: compute_layout_radial,
    LayoutKind.FORCE_DIRECTED: compute_layout_force,
    LayoutKind.HIERARCHICAL_ORBIT: compute_layout_hierarchical,
}

_SECTIONS: Dict[LayoutKind, str] = {
    LayoutKind.RADIAL: "radial",
    LayoutKind.FORCE_DIRECTED: "force",
    LayoutKind.HIERARCHICAL_ORBIT: "hierarchical",
}


def get_layout(kind: Union[LayoutKind, str]) -> StrategyFn:
    """Get a strategy function by kind."""
    return LAYOUTS[LayoutKind.coerce(kind)]


def compute_layout(
    nodes: Sequence[Any],
    edges: Sequence[Any],
    kind: Optional[Union[LayoutKind, str]] = None,
    config: Optional[LayoutConfig] = None,
    emit: Optional[Emit] = None,
    *,
    debug: Optional[bool] = None,
    **options: Any,
) -> LayoutResult:
    """
    Run one layout strategy.

    Raises ValueError for an unknown ``kind``; every other problem is
    reported through ``emit`` and the result's ``warnings``.
    """
    settings = load_settings()
    layout_kind = LayoutKind.coerce(kind if kind is not None else settings.default_kind)

    if config is None and "seed" not in options:
        options["seed"] = settings.seed
    cfg = (config or DEFAULT_CONFIG).with_overrides(**options)

    strategy = LAYOUTS[layout_kind]
    return strategy(
        nodes,
        edges,
        getattr(cfg, _SECTIONS[layout_kind]),
        grid=cfg.grid,
        emit=emit,
        debug=settings.debug if debug is None else debug,
    )


__all__ = ["LayoutKind", "LAYOUTS", "get_layout", "compute_layout"]
