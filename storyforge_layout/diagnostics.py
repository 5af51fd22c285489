"""
Diagnostics hook for the layout engine.

Layout code never prints. Every strategy accepts an optional emitter with
the signature::

    emit(kind: str, payload: dict) -> None

and reports through a small Diagnostics wrapper that:
  - forwards structured ``("log", {...})`` events to the emitter
  - mirrors the same message into the standard ``logging`` tree
  - swallows emitter failures so a broken hook can never break a layout
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger("storyforge_layout")

Emit = Callable[[str, Dict[str, Any]], None]

DEFAULT_EMIT: Emit = lambda *_: None


def _get_emit(emit: Optional[Emit]) -> Emit:
    if emit:
        return emit
    return DEFAULT_EMIT


class Diagnostics:
    """
    Thin reporter bound to one layout invocation.

    Warnings are also collected on ``self.warnings`` so they can be
    returned to the caller inside the LayoutResult.
    """

    def __init__(self, emit: Optional[Emit] = None, *, debug: bool = False, scope: str = "layout"):
        self.emit = _get_emit(emit)
        self.debug_enabled = debug
        self.scope = scope
        self.warnings: List[str] = []
        self._t0 = time.perf_counter()

    # ------------------------------------------------------------------ #
    def _send(self, level: str, message: str, fields: Dict[str, Any]) -> None:
        payload: Dict[str, Any] = {
            "level": level,
            "scope": self.scope,
            "message": message,
            "ts": time.time(),
        }
        payload.update(fields)
        try:
            self.emit("log", payload)
        except Exception:
            logger.debug("[%s] emitter raised; event dropped", self.scope)

    def debug(self, message: str, **fields: Any) -> None:
        if not self.debug_enabled:
            return
        logger.debug("[%s] %s", self.scope, message)
        self._send("debug", message, fields)

    def info(self, message: str, **fields: Any) -> None:
        logger.info("[%s] %s", self.scope, message)
        self._send("info", message, fields)

    def warn(self, message: str, **fields: Any) -> None:
        logger.warning("[%s] %s", self.scope, message)
        self.warnings.append(message)
        self._send("warning", message, fields)

    def error(self, message: str, **fields: Any) -> None:
        logger.error("[%s] %s", self.scope, message)
        self.warnings.append(message)
        self._send("error", message, fields)

    def extend(self, warnings: List[str]) -> None:
        """Re-emit warnings produced elsewhere (validation, config clamps)."""
        for w in warnings:
            self.warn(w)

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self._t0) * 1000.0


__all__ = ["Diagnostics", "DEFAULT_EMIT", "Emit", "logger"]
