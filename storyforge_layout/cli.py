"""
Command-line entry point.

    storyforge-layout graph.json --kind hierarchical --out layout.json \
        --preview layout.png --option direction=LR --stats
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, Optional, Sequence

from .analytics import compute_layout_stats
from .config import load_settings
from .io import GraphFileError, read_graph, write_result
from .presets import DEFAULT_CONFIG
from .selector import LayoutKind, compute_layout


def _parse_option(text: str) -> Dict[str, Any]:
    if "=" not in text:
        raise argparse.ArgumentTypeError(f"expected key=value, got {text!r}")
    key, raw = text.split("=", 1)
    try:
        value: Any = json.loads(raw)
    except json.JSONDecodeError:
        value = raw
    return {key.strip(): value}


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="storyforge-layout",
        description="Position the nodes of a StoryForge relationship graph",
    )
    ap.add_argument("graph", help="graph JSON file with 'nodes' and 'edges'")
    ap.add_argument(
        "--kind",
        choices=[k.value for k in LayoutKind],
        default=None,
        help="layout strategy (default: STORYFORGE_LAYOUT_DEFAULT_KIND or hierarchical)",
    )
    ap.add_argument("--out", required=True, help="where to write the positioned graph")
    ap.add_argument("--preview", default=None, help="optional PNG preview path")
    ap.add_argument(
        "--option",
        action="append",
        default=[],
        type=_parse_option,
        metavar="KEY=VALUE",
        help="strategy option, e.g. baseRadius=300 (repeatable)",
    )
    ap.add_argument("--stats", action="store_true", help="print layout quality numbers")
    ap.add_argument("--debug", action="store_true", help="emit debug diagnostics")
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        nodes, edges = read_graph(args.graph)
    except GraphFileError as exc:
        print(f"[layout] {exc}", file=sys.stderr)
        return 2

    # STORYFORGE_LAYOUT_SEED, unless --option seed=N overrides it
    options: Dict[str, Any] = {"seed": load_settings().seed}
    for opt in args.option:
        options.update(opt)

    config = DEFAULT_CONFIG.with_overrides(**options)
    result = compute_layout(
        nodes,
        edges,
        kind=args.kind,
        config=config,
        debug=args.debug or None,
    )

    extra: Dict[str, Any] = {}
    if args.stats:
        stats = compute_layout_stats(result)
        extra["stats"] = stats.to_dict()
        for key, value in stats.to_dict().items():
            print(f"{key:>20}: {value}")

    write_result(args.out, result, config=config, extra=extra)
    print(f"[layout] Saved {result.kind} layout ({len(result.nodes)} nodes) to {args.out}")

    if args.preview:
        from .render2d import draw_layout_preview

        if draw_layout_preview(result, args.preview, title=f"{result.kind} layout"):
            print(f"[layout] Saved preview to {args.preview}")

    for w in result.warnings:
        print(f"[layout] warning: {w}", file=sys.stderr)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
