# cloudlayout/core/validate.py
"""
Check a finished layout: words must not overlap and must stay on the surface.
Works on the rotated word rectangles (shapely) and on the grid masks the engine used.
"""

from __future__ import annotations

from shapely.geometry import Polygon
from shapely.strtree import STRtree

from cloudlayout.core.geometry import oriented_rectangle, polygon_contains_with_tol, surface_polygon
from cloudlayout.core.mask import build_mask
from cloudlayout.core.types import LayoutResult, MetricsProvider, Placement, RunContext

OVERLAP_TOLERANCE: float = 1e-6
"""Intersection area below which two word rectangles count as touching, not overlapping."""


def placement_polygon(placement: Placement, ctx: RunContext, metrics: MetricsProvider) -> Polygon:
    """Rotated text rectangle of a placement, without padding."""
    w, h = metrics(placement.text, ctx.font_family, ctx.font_weight, placement.size)
    return oriented_rectangle(placement.x, placement.y, w, h, placement.rotate)


def placement_cells(placement: Placement, ctx: RunContext, metrics: MetricsProvider) -> frozenset[tuple[int, int]]:
    """Grid cells a placement claims, rebuilt with the run's mask settings."""
    w, h = metrics(placement.text, ctx.font_family, ctx.font_weight, placement.size)
    mask = build_mask(w, h, placement.rotate, ctx.cell_size, fidelity=ctx.fidelity, padding=ctx.padding)
    gx = int(round(placement.x / ctx.cell_size))
    gy = int(round(placement.y / ctx.cell_size))
    return mask.translated_cells(gx, gy)


def find_overlaps(
    result: LayoutResult,
    ctx: RunContext,
    metrics: MetricsProvider,
    tolerance: float = OVERLAP_TOLERANCE,
) -> list[tuple[int, int]]:
    """Index pairs (i < j) of placements whose rectangles overlap by more than tolerance."""
    polys = [placement_polygon(p, ctx, metrics) for p in result.placements]
    if len(polys) < 2:
        return []
    tree = STRtree(polys)
    left, right = tree.query(polys, predicate="intersects")
    pairs: list[tuple[int, int]] = []
    for i, j in zip(left.tolist(), right.tolist()):
        if i >= j:
            continue
        if polys[i].intersection(polys[j]).area > tolerance:
            pairs.append((i, j))
    return pairs


def find_out_of_bounds(
    result: LayoutResult,
    ctx: RunContext,
    metrics: MetricsProvider,
    tolerance: float = OVERLAP_TOLERANCE,
) -> list[int]:
    """Indices of placements whose rectangle leaves [0, width] x [0, height]."""
    surface = surface_polygon(ctx.width, ctx.height)
    return [
        i for i, p in enumerate(result.placements)
        if not polygon_contains_with_tol(surface, placement_polygon(p, ctx, metrics), tolerance=tolerance)
    ]


def find_shared_cells(
    result: LayoutResult,
    ctx: RunContext,
    metrics: MetricsProvider,
) -> list[tuple[int, int]]:
    """Index pairs of placements whose grid masks share at least one cell."""
    seen: dict[tuple[int, int], int] = {}
    pairs: set[tuple[int, int]] = set()
    for i, p in enumerate(result.placements):
        for cell in placement_cells(p, ctx, metrics):
            owner = seen.setdefault(cell, i)
            if owner != i:
                pairs.add((owner, i))
    return sorted(pairs)


def validate_layout(
    result: LayoutResult,
    ctx: RunContext,
    metrics: MetricsProvider,
) -> tuple[bool, list[str]]:
    """
    True if the layout is collision-free and in bounds, with sizes in range.
    Also returns human-readable problems (empty when ok).
    """
    problems: list[str] = []
    texts = [p.text for p in result.placements]
    for i, j in find_overlaps(result, ctx, metrics):
        problems.append(f"overlap: {texts[i]!r} and {texts[j]!r}")
    for i, j in find_shared_cells(result, ctx, metrics):
        problems.append(f"shared grid cells: {texts[i]!r} and {texts[j]!r}")
    for i in find_out_of_bounds(result, ctx, metrics):
        problems.append(f"out of bounds: {texts[i]!r}")
    for p in result.placements:
        if not ctx.min_size <= p.size <= ctx.max_size:
            problems.append(f"size out of range: {p.text!r} has {p.size}")
    return (not problems, problems)
