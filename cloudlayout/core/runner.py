# cloudlayout/core/runner.py
"""
CLI entrypoint: load word records, run the layout, write layout.json, metadata and images.
Usage: python -m cloudlayout.core.runner --words words.json --spiral rectangular --svg
"""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from cloudlayout.core.config import (
    CELL_SIZE_PX,
    DEFAULT_FIDELITY,
    DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_WEIGHT,
    DEFAULT_HEIGHT,
    DEFAULT_MAX_SIZE,
    DEFAULT_MIN_SIZE,
    DEFAULT_PALETTE,
    DEFAULT_ROTATION_RANGE,
    DEFAULT_SIZE_SCALE,
    DEFAULT_SPIRAL,
    DEFAULT_WIDTH,
    MASK_FIDELITIES,
    REPORTS_DIR,
    SEED,
    SIZE_SCALES,
    SPIRAL_TYPES,
)
from cloudlayout.core.error_codes import PLACEMENT_FAILED, user_message
from cloudlayout.core.errors import ConfigurationError, ParseError
from cloudlayout.core.io import load_items, parse_items
from cloudlayout.core.layout import run_layout
from cloudlayout.core.render import render_debug, render_layout
from cloudlayout.core.render_svg import export_layout_svg
from cloudlayout.core.reporting import ensure_report_dir, write_layout_json, write_run_metadata_json
from cloudlayout.core.text_metrics import estimate_text_px, measure_text_px
from cloudlayout.core.types import Item, RunContext

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Word cloud layout.")
    src = p.add_mutually_exclusive_group()
    src.add_argument("--words", type=str, default=None, help="JSON file of {text, weight, color, rotate} records")
    src.add_argument("--text", type=str, default="cloud:5,layout:3,spiral:2,grid:1", help="'word:weight,word' list")
    p.add_argument("--width", type=float, default=DEFAULT_WIDTH, help="Surface width")
    p.add_argument("--height", type=float, default=DEFAULT_HEIGHT, help="Surface height")
    p.add_argument("--font-family", type=str, default=DEFAULT_FONT_FAMILY, dest="font_family", help="Font family")
    p.add_argument("--font-weight", type=str, default=DEFAULT_FONT_WEIGHT, dest="font_weight", help="Font weight")
    p.add_argument("--min-size", type=float, default=DEFAULT_MIN_SIZE, dest="min_size", help="Smallest font size")
    p.add_argument("--max-size", type=float, default=DEFAULT_MAX_SIZE, dest="max_size", help="Largest font size")
    p.add_argument("--rotation-range", type=float, default=DEFAULT_ROTATION_RANGE, dest="rotation_range",
                   help="Max |rotation| in degrees (0 = none)")
    p.add_argument("--spiral", choices=SPIRAL_TYPES, default=DEFAULT_SPIRAL, help="Candidate spiral")
    p.add_argument("--fidelity", choices=MASK_FIDELITIES, default=DEFAULT_FIDELITY, help="Mask fidelity")
    p.add_argument("--size-scale", choices=SIZE_SCALES, default=DEFAULT_SIZE_SCALE, dest="size_scale",
                   help="Weight to size mapping")
    p.add_argument("--cell-size", type=float, default=CELL_SIZE_PX, dest="cell_size", help="Occupancy cell size")
    p.add_argument("--seed", type=int, default=SEED, help="Random seed")
    p.add_argument("--metrics", choices=("pillow", "estimate"), default="pillow",
                   help="Text metrics: Pillow fonts or a font-free estimate")
    p.add_argument("--palette", action="store_true", help="Color records without a color from the default palette")
    p.add_argument("--run-name", type=str, default="run", dest="run_name", help="Reports subdir name")
    p.add_argument("--output-dir", type=str, default=REPORTS_DIR, dest="output_dir", help="Output directory")
    p.add_argument("--repo-root", type=str, default=None, dest="repo_root", help="Repo root (default: cwd)")
    p.add_argument("--svg", action="store_true", help="Also write cloud.svg")
    p.add_argument("--no-render", action="store_true", dest="no_render", help="Skip PNG rendering")
    return p.parse_args(argv)


def _items_from_text(text: str) -> list[dict]:
    """'cloud:5,layout' -> [{text: cloud, weight: 5}, {text: layout}]."""
    records: list[dict] = []
    for part in (text or "").split(","):
        part = part.strip()
        if not part:
            continue
        word, sep, weight = part.rpartition(":")
        if sep and word:
            try:
                records.append({"text": word.strip(), "weight": float(weight)})
                continue
            except ValueError:
                pass
        records.append({"text": part})
    return records


def _load(args: argparse.Namespace, repo_root: Path) -> tuple[list[Item], str]:
    palette = DEFAULT_PALETTE if args.palette else None
    if args.words:
        return load_items(args.words, repo_root=repo_root, palette=palette), args.words
    return parse_items(_items_from_text(args.text), palette=palette), "--text"


def main(argv: list[str] | None = None) -> int:
    log_level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=getattr(logging, log_level_name, logging.INFO))

    args = _parse_args(argv)
    repo_root = Path(args.repo_root).resolve() if args.repo_root else Path.cwd().resolve()

    try:
        ctx = RunContext(
            width=args.width,
            height=args.height,
            font_family=args.font_family,
            font_weight=args.font_weight,
            min_size=args.min_size,
            max_size=args.max_size,
            rotation_range=args.rotation_range,
            spiral=args.spiral,
            seed=args.seed,
            cell_size=args.cell_size,
            fidelity=args.fidelity,
            size_scale=args.size_scale,
        )
        items, source = _load(args, repo_root)
    except (ConfigurationError, ParseError) as e:
        logger.error("%s (%s)", user_message(e.error_key), e)
        return 2

    metrics = estimate_text_px if args.metrics == "estimate" else measure_text_px
    result = run_layout(ctx, items, metrics)

    report_dir = ensure_report_dir(repo_root, args.run_name, output_dir=args.output_dir)
    paths = [
        write_layout_json(report_dir, result),
        write_run_metadata_json(report_dir, args.run_name, ctx, source),
    ]
    if not args.no_render:
        render_layout(result, ctx, report_dir / "cloud.png")
        render_debug(result, ctx, metrics, report_dir / "debug.png")
        paths += [report_dir / "cloud.png", report_dir / "debug.png"]
    if args.svg:
        paths.append(export_layout_svg(result, ctx, report_dir / "cloud.svg"))

    for p in paths:
        print(p)
    print(f"Placed {result.success_count} of {result.n_items} words")
    if result.unplaced:
        logger.warning(
            "%s Unplaced: %s",
            user_message(PLACEMENT_FAILED),
            ", ".join(u.item.text for u in result.unplaced),
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
