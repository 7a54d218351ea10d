# cloudlayout/core/layout.py
"""
Word cloud layout orchestration.
Resolves sizes and rotations, orders words by size (largest first), then walks a
spiral per word until the occupancy grid accepts its mask. Words that never fit
are reported in LayoutResult.unplaced instead of failing the run.
"""

from __future__ import annotations

import logging
import math
from dataclasses import fields
from typing import Any, Iterable, Sequence

import numpy as np

from cloudlayout.core.config import CLOUDLAYOUT_DEBUG

logger = logging.getLogger(__name__)

_LOG_LEVEL = logging.DEBUG if CLOUDLAYOUT_DEBUG else logging.WARNING

# Ensure warnings/errors are visible (add handler if none exists)
if not logger.handlers and not logging.root.handlers:
    import sys
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_LOG_LEVEL)
    formatter = logging.Formatter('[cloudlayout] %(levelname)s: %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(_LOG_LEVEL)
elif CLOUDLAYOUT_DEBUG:
    logger.setLevel(logging.DEBUG)

from cloudlayout.core.config import (
    DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_WEIGHT,
    DEFAULT_MAX_SIZE,
    DEFAULT_MIN_SIZE,
    DEFAULT_ROTATION_RANGE,
    DEFAULT_SPIRAL,
)
from cloudlayout.core.error_codes import PLACEMENT_FAILED
from cloudlayout.core.errors import ConfigurationError
from cloudlayout.core.grid import OccupancyGrid
from cloudlayout.core.io import layout_to_json, parse_items
from cloudlayout.core.mask import build_mask
from cloudlayout.core.sizing import resolve_sizes
from cloudlayout.core.spiral import spiral_candidates
from cloudlayout.core.text_metrics import measure_text_px
from cloudlayout.core.types import (
    Item,
    LayoutResult,
    MetricsProvider,
    Placement,
    ResolvedWord,
    RunContext,
    UnplacedItem,
)


def _resolve_rotation(item: Item, rotation_range: float, rng: np.random.Generator) -> float:
    """Explicit override wins; else uniform in [-range, range); 0 when rotation is off."""
    if item.rotate is not None:
        return item.rotate
    if rotation_range > 0:
        return float(rng.uniform(-rotation_range, rotation_range))
    return 0.0


def resolve_words(
    ctx: RunContext,
    items: list[Item],
    metrics: MetricsProvider,
) -> list[ResolvedWord]:
    """
    Size, rotation and measured extent per item, in submission order.
    Rotations are drawn in submission order from the run's seeded generator.
    """
    sizes = resolve_sizes([it.weight for it in items], ctx.min_size, ctx.max_size, ctx.size_scale)
    rng = np.random.default_rng(ctx.seed)
    words: list[ResolvedWord] = []
    for index, (item, size) in enumerate(zip(items, sizes)):
        rotate = _resolve_rotation(item, ctx.rotation_range, rng)
        width, height = metrics(item.text, ctx.font_family, ctx.font_weight, size)
        if not (math.isfinite(width) and math.isfinite(height)) or width < 0 or height < 0:
            raise ValueError(f"Metrics provider returned invalid size {width!r}x{height!r} for {item.text!r}")
        words.append(
            ResolvedWord(item=item, index=index, size=size, rotate=rotate, width=float(width), height=float(height))
        )
    return words


def order_words(words: list[ResolvedWord]) -> list[ResolvedWord]:
    """Largest size first; equal sizes keep submission order."""
    return sorted(words, key=lambda w: (-w.size, w.index))


def find_position(
    grid: OccupancyGrid,
    word: ResolvedWord,
    ctx: RunContext,
) -> tuple[int, int] | None:
    """
    First spiral candidate (snapped to a grid vertex) where the word's mask fits.
    Vertices already tried for this word are skipped. None when the spiral runs out.
    """
    mask = word.mask
    if mask is None:
        raise ValueError(f"Word {word.item.text!r} has no mask")
    rows, cols = mask.shape
    if rows > grid.rows or cols > grid.cols:
        return None
    tried: set[tuple[int, int]] = set()
    for x, y in spiral_candidates(ctx):
        vertex = grid.to_vertex(x, y)
        if vertex in tried:
            continue
        tried.add(vertex)
        if grid.test(mask, *vertex):
            return vertex
    return None


def run_layout(
    ctx: RunContext,
    items: Iterable[Item],
    metrics: MetricsProvider | None = None,
) -> LayoutResult:
    """
    One complete, independent layout run. Nothing is shared with other runs:
    grid, generator and masks are all created here.
    """
    items = list(items)
    if not items:
        return LayoutResult(n_items=0)
    measure = metrics if metrics is not None else measure_text_px

    grid = OccupancyGrid(ctx.width, ctx.height, ctx.cell_size)
    words = order_words(resolve_words(ctx, items, measure))
    logger.info(
        "Layout: %d words on %gx%g (%s spiral, %s masks, grid %dx%d)",
        len(words), ctx.width, ctx.height, ctx.spiral, ctx.fidelity, grid.cols, grid.rows,
    )

    result = LayoutResult(n_items=len(items))
    for word in words:
        word.mask = build_mask(
            word.width, word.height, word.rotate, ctx.cell_size, fidelity=ctx.fidelity, padding=ctx.padding
        )
        vertex = find_position(grid, word, ctx)
        if vertex is None:
            logger.debug("Layout: no position for %r (size %.1f, rotate %.1f)", word.item.text, word.size, word.rotate)
            result.unplaced.append(
                UnplacedItem(item=word.item, size=word.size, rotate=word.rotate, reason=PLACEMENT_FAILED)
            )
            continue
        grid.commit(word.mask, *vertex)
        x, y = grid.to_point(*vertex)
        logger.debug("Layout: placed %r at (%.1f, %.1f)", word.item.text, x, y)
        result.placements.append(
            Placement(
                text=word.item.text,
                x=x,
                y=y,
                rotate=word.rotate,
                size=word.size,
                color=word.item.color,
                weight=word.item.weight,
            )
        )

    result.fill_ratio = grid.fill_ratio()
    if result.unplaced:
        logger.info("Layout: %d of %d words did not fit", len(result.unplaced), len(items))
    return result


_OPTION_NAMES = frozenset(f.name for f in fields(RunContext))


class LayoutEngine:
    """
    Holds layout options between runs. Setters only affect later runs; every
    generate_layout call snapshots the options into a fresh RunContext.
    """

    def __init__(
        self,
        width: float,
        height: float,
        font_family: str = DEFAULT_FONT_FAMILY,
        font_weight: str = DEFAULT_FONT_WEIGHT,
        min_size: float = DEFAULT_MIN_SIZE,
        max_size: float = DEFAULT_MAX_SIZE,
        *,
        rotation_range: float = DEFAULT_ROTATION_RANGE,
        spiral: str = DEFAULT_SPIRAL,
        seed: int | None = None,
        metrics: MetricsProvider | None = None,
        **tunables: Any,
    ) -> None:
        self.metrics = metrics
        self._options: dict[str, Any] = {}
        self._update(
            width=width,
            height=height,
            font_family=font_family,
            font_weight=font_weight,
            min_size=min_size,
            max_size=max_size,
            rotation_range=rotation_range,
            spiral=spiral,
            seed=seed,
            **tunables,
        )

    def _update(self, **changes: Any) -> None:
        """Apply option changes only if the combined options form a valid RunContext."""
        unknown = sorted(set(changes) - _OPTION_NAMES)
        if unknown:
            raise ConfigurationError(f"Unknown layout option(s): {', '.join(unknown)}")
        options = {**self._options, **changes}
        RunContext(**options)
        self._options = options

    @property
    def options(self) -> dict[str, Any]:
        return dict(self._options)

    def set_rotation_range(self, rotation_range: float) -> None:
        self._update(rotation_range=rotation_range)

    def set_spiral(self, spiral: str) -> None:
        self._update(spiral=spiral)

    def set_seed(self, seed: int | None) -> None:
        self._update(seed=seed)

    def context(self) -> RunContext:
        """Snapshot of the current options."""
        return RunContext(**self._options)

    def generate_layout(self, items: Sequence[Any] | str | bytes) -> LayoutResult:
        """
        Lay out a list of Items or raw records (dicts, strings, [text, weight, color]),
        or a JSON document holding such a list. Anything else raises ParseError.
        """
        ctx = self.context()
        parsed = parse_items(items)
        return run_layout(ctx, parsed, self.metrics)

    def generate_layout_json(self, words_json: str) -> str:
        """Serialized boundary: JSON word records in, JSON placement records out."""
        ctx = self.context()
        return layout_to_json(run_layout(ctx, parse_items(words_json), self.metrics))
