"""
Process-level settings for the layout engine.

This module centralizes the few knobs that are not per-request:

    - default layout kind used when a caller does not pick one
    - seed for the force simulation's jiggle source
    - debug flag enabling debug-level diagnostic events

It provides:
    EngineSettings  – structured settings object
    load_settings() – load from environment variables or defaults
"""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass
class EngineSettings:
    """
    Attributes
    ----------
    default_kind:
        "radial", "force" or "hierarchical".

    seed:
        Default seed handed to ForceConfig when the caller gives none.

    debug:
        Emit debug events (counts, timings) from every strategy.
    """

    default_kind: str = "hierarchical"
    seed: int = 42
    debug: bool = False


def load_settings() -> EngineSettings:
    """
    Load EngineSettings from environment variables, falling back to defaults.

    Recognized variables:
        STORYFORGE_LAYOUT_DEFAULT_KIND  (radial|force|hierarchical)
        STORYFORGE_LAYOUT_SEED          (integer)
        STORYFORGE_LAYOUT_DEBUG         ("true" / "false" / "1" / "0")
    """

    def _env_flag(name: str, default: bool) -> bool:
        val = os.getenv(name)
        if val is None:
            return default
        return val.strip().lower() in ("1", "true", "yes", "on")

    def _env_int(name: str, default: int) -> int:
        val = os.getenv(name)
        if val is None:
            return default
        try:
            return int(val.strip())
        except ValueError:
            return default

    return EngineSettings(
        default_kind=os.getenv("STORYFORGE_LAYOUT_DEFAULT_KIND", "hierarchical").strip().lower(),
        seed=_env_int("STORYFORGE_LAYOUT_SEED", 42),
        debug=_env_flag("STORYFORGE_LAYOUT_DEBUG", default=False),
    )


__all__ = ["EngineSettings", "load_settings"]
