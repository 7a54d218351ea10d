# tests/test_layout_engine.py
"""
End-to-end layout runs with the font-free metrics provider: no overlap, bounds,
size and rotation ranges, determinism, failure reporting, configuration handling.
"""

from __future__ import annotations

import json

import pytest

from cloudlayout.core.error_codes import PLACEMENT_FAILED
from cloudlayout.core.errors import ConfigurationError, ParseError
from cloudlayout.core.layout import LayoutEngine, run_layout
from cloudlayout.core.text_metrics import estimate_text_px
from cloudlayout.core.types import Item, RunContext
from cloudlayout.core.validate import validate_layout

WORDS = [
    Item("packing", 12), Item("spiral", 9), Item("grid", 7), Item("mask", 6),
    Item("cloud", 5), Item("layout", 4), Item("word", 3), Item("size", 3),
    Item("rotate", 2), Item("seed", 2), Item("cell", 1), Item("text", 1),
]


def _ctx(**overrides) -> RunContext:
    options = dict(width=400, height=300, min_size=10, max_size=48, seed=7)
    options.update(overrides)
    return RunContext(**options)


def _assert_valid(result, ctx: RunContext) -> None:
    ok, problems = validate_layout(result, ctx, estimate_text_px)
    assert ok, problems


def test_single_word_maps_to_max_size_near_center() -> None:
    ctx = _ctx(min_size=10, max_size=60)
    result = run_layout(ctx, [Item("hello", 1)], estimate_text_px)
    assert len(result.placements) == 1
    p = result.placements[0]
    assert p.size == 60
    assert abs(p.x - 200) <= ctx.cell_size and abs(p.y - 150) <= ctx.cell_size
    assert result.unplaced == []


def test_two_words_min_and_max_size_no_overlap() -> None:
    ctx = _ctx(min_size=10, max_size=60)
    result = run_layout(ctx, [Item("small", 1), Item("large", 10)], estimate_text_px)
    sizes = {p.text: p.size for p in result.placements}
    assert sizes["large"] == pytest.approx(60)
    assert sizes["small"] == pytest.approx(10)
    _assert_valid(result, ctx)


def test_oversized_word_is_reported_unplaced() -> None:
    ctx = _ctx(width=100, height=100, min_size=50, max_size=60)
    result = run_layout(ctx, [Item("supercalifragilistic", 1)], estimate_text_px)
    assert result.placements == []
    assert len(result.unplaced) == 1
    assert result.unplaced[0].reason == PLACEMENT_FAILED
    assert result.unplaced[0].item.text == "supercalifragilistic"


def test_failure_does_not_stop_other_words() -> None:
    ctx = _ctx(width=120, height=120, min_size=12, max_size=40)
    items = [Item("enormouslylongword", 10), Item("ok", 1), Item("fit", 1)]
    result = run_layout(ctx, items, estimate_text_px)
    assert [u.item.text for u in result.unplaced] == ["enormouslylongword"]
    assert {p.text for p in result.placements} == {"ok", "fit"}
    _assert_valid(result, ctx)


def test_no_rotation_unless_overridden() -> None:
    ctx = _ctx(rotation_range=0)
    items = WORDS[:5] + [Item("upright", 2, rotate=90.0)]
    result = run_layout(ctx, items, estimate_text_px)
    for p in result.placements:
        assert p.rotate == (90.0 if p.text == "upright" else 0.0)
    _assert_valid(result, ctx)


def test_rotation_within_range_and_override_exact() -> None:
    ctx = _ctx(rotation_range=30)
    items = WORDS + [Item("fixed", 2, rotate=-75.0)]
    result = run_layout(ctx, items, estimate_text_px)
    angles = {p.text: p.rotate for p in result.placements}
    angles.update({u.item.text: u.rotate for u in result.unplaced})
    assert angles["fixed"] == -75.0
    assert all(abs(a) <= 30 for t, a in angles.items() if t != "fixed")
    assert len({a for t, a in angles.items() if t != "fixed"}) > 1
    _assert_valid(result, ctx)


@pytest.mark.parametrize("spiral", ["archimedean", "rectangular"])
@pytest.mark.parametrize("fidelity", ["bbox", "fine"])
def test_layout_is_valid_for_every_spiral_and_fidelity(spiral: str, fidelity: str) -> None:
    ctx = _ctx(spiral=spiral, fidelity=fidelity, rotation_range=45)
    result = run_layout(ctx, WORDS, estimate_text_px)
    assert result.success_count + len(result.unplaced) == len(WORDS)
    assert result.success_count >= len(WORDS) - 2
    for p in result.placements:
        assert ctx.min_size <= p.size <= ctx.max_size
    _assert_valid(result, ctx)


def test_spiral_choice_changes_layout() -> None:
    arch = run_layout(_ctx(spiral="archimedean"), WORDS, estimate_text_px)
    rect = run_layout(_ctx(spiral="rectangular"), WORDS, estimate_text_px)
    assert [(p.x, p.y) for p in arch.placements] != [(p.x, p.y) for p in rect.placements]


def test_placement_order_is_size_descending() -> None:
    items = [Item("c", 1), Item("a", 5), Item("b", 3), Item("d", 3)]
    result = run_layout(_ctx(), items, estimate_text_px)
    assert [p.text for p in result.placements] == ["a", "b", "d", "c"]
    sizes = [p.size for p in result.placements]
    assert sizes == sorted(sizes, reverse=True)


def test_heavier_words_never_smaller() -> None:
    result = run_layout(_ctx(), WORDS, estimate_text_px)
    weights = {it.text: it.weight for it in WORDS}
    placed = result.placements
    for a in placed:
        for b in placed:
            if weights[a.text] > weights[b.text]:
                assert a.size >= b.size


def test_same_seed_same_layout() -> None:
    ctx = _ctx(rotation_range=60, seed=123)
    first = run_layout(ctx, WORDS, estimate_text_px)
    second = run_layout(_ctx(rotation_range=60, seed=123), WORDS, estimate_text_px)
    assert first.placements == second.placements
    assert first.unplaced == second.unplaced


def test_different_seed_changes_rotations() -> None:
    a = run_layout(_ctx(rotation_range=60, seed=1), WORDS, estimate_text_px)
    b = run_layout(_ctx(rotation_range=60, seed=2), WORDS, estimate_text_px)
    assert [p.rotate for p in a.placements] != [p.rotate for p in b.placements]


def test_empty_input_returns_empty_result() -> None:
    result = run_layout(_ctx(), [], estimate_text_px)
    assert result.placements == [] and result.unplaced == []
    assert result.n_items == 0


def test_engine_setters_only_affect_later_runs() -> None:
    engine = LayoutEngine(400, 300, min_size=10, max_size=48, seed=5, metrics=estimate_text_px)
    first = engine.generate_layout(WORDS)
    snapshot = list(first.placements)

    engine.set_rotation_range(40)
    engine.set_spiral("rectangular")
    second = engine.generate_layout(WORDS)

    assert first.placements == snapshot
    assert all(p.rotate == 0.0 for p in first.placements)
    assert any(p.rotate != 0.0 for p in second.placements)

    engine.set_rotation_range(0)
    engine.set_spiral("archimedean")
    assert engine.generate_layout(WORDS).placements == snapshot


def test_engine_accepts_raw_records_and_json() -> None:
    engine = LayoutEngine(400, 300, min_size=10, max_size=48, seed=5, metrics=estimate_text_px)
    records = [{"text": "alpha", "weight": 3, "color": "#abcdef"}, "beta", ["gamma", 2]]
    result = engine.generate_layout(records)
    assert {p.text for p in result.placements} == {"alpha", "beta", "gamma"}
    assert next(p for p in result.placements if p.text == "alpha").color == "#abcdef"

    out = json.loads(engine.generate_layout_json(json.dumps(records)))
    assert [r["text"] for r in out] == [p.text for p in result.placements]
    assert set(out[0]) >= {"text", "x", "y", "rotate", "size", "color"}


def test_engine_parse_error_is_fatal() -> None:
    engine = LayoutEngine(400, 300, metrics=estimate_text_px)
    with pytest.raises(ParseError):
        engine.generate_layout_json('[{"text": "ok"}, {"weight": 1}]')


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(width=0, height=300),
        dict(width=400, height=-1),
        dict(width=400, height=300, min_size=50, max_size=10),
        dict(width=400, height=300, min_size=0, max_size=10),
        dict(width=400, height=300, rotation_range=-5),
        dict(width=400, height=300, spiral="hexagonal"),
        dict(width=400, height=300, fidelity="glyph"),
        dict(width=400, height=300, cell_size=0),
        dict(width=400, height=300, padding="1"),
        dict(width=400, height=300, max_spiral_steps=2.5),
        dict(width=400, height=300, seed="seven"),
        dict(width=400, height=300, spiral_radius_factor=10 ** 400),
        dict(width=400, height=300, grid_spacing=8),
    ],
)
def test_invalid_configuration_raises(kwargs: dict) -> None:
    with pytest.raises(ConfigurationError):
        LayoutEngine(**kwargs)


def test_invalid_setter_keeps_previous_options() -> None:
    engine = LayoutEngine(400, 300, spiral="rectangular", rotation_range=10)
    with pytest.raises(ConfigurationError):
        engine.set_spiral("hexagonal")
    with pytest.raises(ConfigurationError):
        engine.set_rotation_range(-1)
    ctx = engine.context()
    assert ctx.spiral == "rectangular"
    assert ctx.rotation_range == 10


@pytest.mark.parametrize("value", ["30", None, float("nan"), True])
def test_non_numeric_rotation_range_is_configuration_error(value) -> None:
    engine = LayoutEngine(400, 300, rotation_range=10)
    with pytest.raises(ConfigurationError):
        engine.set_rotation_range(value)
    assert engine.context().rotation_range == 10


@pytest.mark.parametrize(
    "payload",
    [
        {"text": "alpha", "weight": 3},
        '[{"text": "alpha"}]x',
        42,
        b'[{"text": "\xff"}]',
    ],
)
def test_generate_layout_rejects_non_list_input(payload) -> None:
    engine = LayoutEngine(400, 300, metrics=estimate_text_px)
    with pytest.raises(ParseError):
        engine.generate_layout(payload)


def test_generate_layout_accepts_json_document() -> None:
    engine = LayoutEngine(400, 300, seed=5, metrics=estimate_text_px)
    result = engine.generate_layout('[{"text": "alpha"}, "beta"]')
    assert {p.text for p in result.placements} == {"alpha", "beta"}


@pytest.mark.parametrize(
    "bad",
    [Item("a", 1, rotate=float("nan")), Item("", 1), Item("b", -5)],
)
def test_invalid_items_fail_before_layout(bad: Item) -> None:
    engine = LayoutEngine(400, 300, metrics=estimate_text_px)
    with pytest.raises(ParseError):
        engine.generate_layout([Item("fine", 5), bad])


def test_oversized_numbers_are_parse_errors() -> None:
    engine = LayoutEngine(400, 300, metrics=estimate_text_px)
    with pytest.raises(ParseError):
        engine.generate_layout_json('[{"text": "a", "weight": ' + "9" * 400 + "}]")
