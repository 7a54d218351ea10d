# tests/test_validate.py
"""
Deterministic tests for layout validation on handcrafted results.
"""

from __future__ import annotations

from cloudlayout.core.text_metrics import estimate_text_px
from cloudlayout.core.types import LayoutResult, Placement, RunContext
from cloudlayout.core.validate import (
    find_out_of_bounds,
    find_overlaps,
    find_shared_cells,
    placement_polygon,
    validate_layout,
)

CTX = RunContext(width=200, height=100, min_size=10, max_size=20)


def _result(*placements: Placement) -> LayoutResult:
    return LayoutResult(placements=list(placements), n_items=len(placements))


def test_placement_polygon_matches_metrics() -> None:
    # "abcd" at size 20 -> 48 x 20
    poly = placement_polygon(Placement("abcd", 100, 50, 0.0, 20), CTX, estimate_text_px)
    assert poly.bounds == (76.0, 40.0, 124.0, 60.0)


def test_separate_words_are_valid() -> None:
    result = _result(
        Placement("abcd", 40, 40, 0.0, 20),
        Placement("efgh", 140, 60, 0.0, 20),
    )
    ok, problems = validate_layout(result, CTX, estimate_text_px)
    assert ok is True
    assert problems == []


def test_overlapping_words_detected() -> None:
    result = _result(
        Placement("abcd", 100, 50, 0.0, 20),
        Placement("efgh", 110, 55, 0.0, 20),
        Placement("far", 20, 20, 0.0, 10),
    )
    assert find_overlaps(result, CTX, estimate_text_px) == [(0, 1)]
    assert (0, 1) in find_shared_cells(result, CTX, estimate_text_px)
    ok, problems = validate_layout(result, CTX, estimate_text_px)
    assert ok is False
    assert any(p.startswith("overlap") for p in problems)


def test_rotated_words_crossing_detected() -> None:
    result = _result(
        Placement("abcdefgh", 100, 50, 0.0, 10),
        Placement("abcdefgh", 100, 50, 90.0, 10),
    )
    assert find_overlaps(result, CTX, estimate_text_px) == [(0, 1)]


def test_touching_words_do_not_overlap() -> None:
    # 48 wide each, edges meet at x = 100
    result = _result(
        Placement("abcd", 76, 50, 0.0, 20),
        Placement("efgh", 124, 50, 0.0, 20),
    )
    assert find_overlaps(result, CTX, estimate_text_px) == []


def test_out_of_bounds_detected() -> None:
    result = _result(
        Placement("abcd", 10, 50, 0.0, 20),
        Placement("efgh", 100, 50, 0.0, 20),
        Placement("ijkl", 100, 95, 0.0, 20),
    )
    assert find_out_of_bounds(result, CTX, estimate_text_px) == [0, 2]
    ok, problems = validate_layout(result, CTX, estimate_text_px)
    assert ok is False
    assert sum(p.startswith("out of bounds") for p in problems) == 2


def test_size_out_of_range_reported() -> None:
    result = _result(Placement("ab", 100, 50, 0.0, 30))
    ok, problems = validate_layout(result, CTX, estimate_text_px)
    assert ok is False
    assert any("size out of range" in p for p in problems)


def test_empty_result_is_valid() -> None:
    ok, problems = validate_layout(LayoutResult(), CTX, estimate_text_px)
    assert ok is True
    assert problems == []
