# cloudlayout/core/reporting.py
"""
Create reports/<run_name>/ and write layout.json (placements, unplaced, summary) and run_metadata.json.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path

from cloudlayout.core.config import (
    ARCHIMEDEAN_A,
    ARCHIMEDEAN_THETA_STEP,
    CELL_SIZE_PX,
    MAX_SPIRAL_STEPS,
    RECTANGULAR_STEP_PX,
    REPORTS_DIR,
    SPIRAL_RADIUS_FACTOR,
    WORD_PADDING_PX,
)
from cloudlayout.core.io import item_to_dict, placement_to_dict
from cloudlayout.core.types import LayoutResult, RunContext

SCHEMA_VERSION = "1.0"


def summary_dict(result: LayoutResult) -> dict:
    """Counts and packing density for one run."""
    sizes = [p.size for p in result.placements]
    return {
        "n_items": result.n_items,
        "success_count": result.success_count,
        "unplaced_count": len(result.unplaced),
        "fill_ratio": round(result.fill_ratio, 4),
        "mean_size": round(sum(sizes) / len(sizes), 2) if sizes else 0.0,
    }


def layout_to_dict(result: LayoutResult) -> dict:
    """Exact structure for layout.json."""
    return {
        "schema_version": SCHEMA_VERSION,
        "placements": [placement_to_dict(p) for p in result.placements],
        "unplaced": [
            {**item_to_dict(u.item), "size": u.size, "rotate": u.rotate, "reason": u.reason}
            for u in result.unplaced
        ],
        "summary": summary_dict(result),
    }


def run_metadata_dict(run_name: str, ctx: RunContext, input_source: str) -> dict:
    """Timestamp, run options and config snapshot for run_metadata.json."""
    return {
        "run_name": run_name,
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        "input_source": input_source,
        "options": asdict(ctx),
        "config": {
            "CELL_SIZE_PX": CELL_SIZE_PX,
            "WORD_PADDING_PX": WORD_PADDING_PX,
            "ARCHIMEDEAN_A": ARCHIMEDEAN_A,
            "ARCHIMEDEAN_THETA_STEP": ARCHIMEDEAN_THETA_STEP,
            "RECTANGULAR_STEP_PX": RECTANGULAR_STEP_PX,
            "SPIRAL_RADIUS_FACTOR": SPIRAL_RADIUS_FACTOR,
            "MAX_SPIRAL_STEPS": MAX_SPIRAL_STEPS,
        },
    }


def ensure_report_dir(
    repo_root: Path,
    run_name: str,
    output_dir: str | None = None,
) -> Path:
    """Create output_dir/<run_name>/ under repo_root; return path. Default output_dir from config."""
    base = output_dir if output_dir is not None else REPORTS_DIR
    out = (repo_root / base).resolve() / run_name
    out.mkdir(parents=True, exist_ok=True)
    return out


def write_layout_json(report_dir: Path, result: LayoutResult) -> Path:
    """Write layout.json to report_dir. Returns path to file."""
    path = report_dir / "layout.json"
    path.write_text(json.dumps(layout_to_dict(result), indent=2), encoding="utf-8")
    return path


def write_run_metadata_json(report_dir: Path, run_name: str, ctx: RunContext, input_source: str) -> Path:
    """Write run_metadata.json to report_dir."""
    path = report_dir / "run_metadata.json"
    data = run_metadata_dict(run_name, ctx, input_source)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path
