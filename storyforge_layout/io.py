"""
JSON read/write for graph files and layout results.

Graph files look like::

    {"nodes": [{"id": "p1", "type": "Puzzle", "isCenter": true}, ...],
     "edges": [{"id": "e1", "source": "p1", "target": "c1"}, ...]}

Writes are UTF-8 with deterministic indentation; parent directories are
created as needed.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .model import Edge, LayoutResult, Node, edge_from_dict, node_from_dict
from .presets import LayoutConfig


class GraphFileError(ValueError):
    """A graph file is missing, unreadable or not shaped like a graph."""


PathLike = Union[str, Path]


def json_read(path: Path) -> Any:
    if not path.exists():
        raise GraphFileError(f"graph file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise GraphFileError(f"malformed JSON in {path}: {exc}") from exc
    except OSError as exc:
        raise GraphFileError(f"cannot read {path}: {exc}") from exc


def json_write(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")
    return path


def read_graph(path: PathLike) -> Tuple[List[Node], List[Edge]]:
    """
    Parse a graph file into model objects.

    Entries are converted as-is; validation (dangling edges, duplicate
    ids) happens inside the layout call, not here.
    """
    path = Path(path)
    data = json_read(path)
    if not isinstance(data, dict):
        raise GraphFileError(f"{path}: expected an object with 'nodes' and 'edges'")

    raw_nodes = data.get("nodes") or []
    raw_edges = data.get("edges") or []
    if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
        raise GraphFileError(f"{path}: 'nodes' and 'edges' must be lists")

    nodes = [node_from_dict(d) for d in raw_nodes if isinstance(d, dict)]
    edges = [edge_from_dict(d) for d in raw_edges if isinstance(d, dict)]
    return nodes, edges


def write_result(
    path: PathLike,
    result: LayoutResult,
    *,
    config: Optional[LayoutConfig] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> Path:
    """Write ``result`` (plus the config used, if given) as JSON."""
    payload = result.to_dict()
    if config is not None:
        payload["config"] = config.to_dict()
    if extra:
        payload.update(extra)
    return json_write(Path(path), payload)


__all__ = ["GraphFileError", "read_graph", "write_result", "json_read", "json_write"]
