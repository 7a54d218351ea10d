# cloudlayout/core/types.py
"""
Dataclasses for input items, per-run context, resolved words, placements and layout results.
Record shapes align with the JSON records handled in io.py.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from typing import Callable, Literal

from cloudlayout.core.config import (
    ARCHIMEDEAN_A,
    ARCHIMEDEAN_THETA_STEP,
    CELL_SIZE_PX,
    DEFAULT_FIDELITY,
    DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_WEIGHT,
    DEFAULT_MAX_SIZE,
    DEFAULT_MIN_SIZE,
    DEFAULT_SIZE_SCALE,
    DEFAULT_SPIRAL,
    DEFAULT_WEIGHT,
    MASK_FIDELITIES,
    MAX_SPIRAL_STEPS,
    RECTANGULAR_STEP_PX,
    SIZE_SCALES,
    SPIRAL_RADIUS_FACTOR,
    SPIRAL_TYPES,
    WORD_PADDING_PX,
)
from cloudlayout.core.errors import ConfigurationError
from cloudlayout.core.mask import Mask


SpiralType = Literal["archimedean", "rectangular"]
Fidelity = Literal["bbox", "fine"]
SizeScale = Literal["linear", "log"]

MetricsProvider = Callable[[str, str, str, float], tuple[float, float]]
"""(text, font_family, font_weight, size) -> (width, height) in surface units."""


@dataclass(frozen=True)
class Item:
    """One weighted word as submitted by the caller. Defaults are applied at parse time."""
    text: str
    weight: float = DEFAULT_WEIGHT
    color: str | None = None
    rotate: float | None = None


@dataclass(frozen=True)
class RunContext:
    """
    Everything one layout run needs. Built fresh per run and never mutated;
    invalid values raise ConfigurationError at construction.
    """
    width: float
    height: float
    font_family: str = DEFAULT_FONT_FAMILY
    font_weight: str = DEFAULT_FONT_WEIGHT
    min_size: float = DEFAULT_MIN_SIZE
    max_size: float = DEFAULT_MAX_SIZE
    rotation_range: float = 0.0
    spiral: SpiralType = DEFAULT_SPIRAL  # type: ignore[assignment]
    seed: int | None = None
    cell_size: float = CELL_SIZE_PX
    fidelity: Fidelity = DEFAULT_FIDELITY  # type: ignore[assignment]
    size_scale: SizeScale = DEFAULT_SIZE_SCALE  # type: ignore[assignment]
    padding: float = WORD_PADDING_PX
    max_spiral_steps: int = MAX_SPIRAL_STEPS
    spiral_radius_factor: float = SPIRAL_RADIUS_FACTOR
    archimedean_a: float = ARCHIMEDEAN_A
    archimedean_theta_step: float = ARCHIMEDEAN_THETA_STEP
    rectangular_step: float = RECTANGULAR_STEP_PX

    def __post_init__(self) -> None:
        if not (_finite_positive(self.width) and _finite_positive(self.height)):
            raise ConfigurationError(
                f"Surface must have positive width and height, got {self.width!r}x{self.height!r}"
            )
        if not (_finite_positive(self.min_size) and _finite_positive(self.max_size)):
            raise ConfigurationError(
                f"Sizes must be positive, got min_size={self.min_size!r}, max_size={self.max_size!r}"
            )
        if self.min_size > self.max_size:
            raise ConfigurationError(f"min_size {self.min_size} exceeds max_size {self.max_size}")
        if not _finite_non_negative(self.rotation_range):
            raise ConfigurationError(f"rotation_range must be >= 0 degrees, got {self.rotation_range!r}")
        if self.spiral not in SPIRAL_TYPES:
            raise ConfigurationError(f"Unknown spiral {self.spiral!r}; expected one of {SPIRAL_TYPES}")
        if self.fidelity not in MASK_FIDELITIES:
            raise ConfigurationError(f"Unknown mask fidelity {self.fidelity!r}; expected one of {MASK_FIDELITIES}")
        if self.size_scale not in SIZE_SCALES:
            raise ConfigurationError(f"Unknown size scale {self.size_scale!r}; expected one of {SIZE_SCALES}")
        if not _finite_positive(self.cell_size):
            raise ConfigurationError(f"cell_size must be positive, got {self.cell_size!r}")
        if self.cell_size > min(self.width, self.height):
            raise ConfigurationError(f"cell_size {self.cell_size} is larger than the surface")
        if not _finite_non_negative(self.padding):
            raise ConfigurationError(f"padding must be >= 0, got {self.padding!r}")
        if not _is_int(self.max_spiral_steps) or self.max_spiral_steps < 1:
            raise ConfigurationError(f"max_spiral_steps must be an integer >= 1, got {self.max_spiral_steps!r}")
        if self.seed is not None and not _is_int(self.seed):
            raise ConfigurationError(f"seed must be an integer or None, got {self.seed!r}")
        for name in ("spiral_radius_factor", "archimedean_a", "archimedean_theta_step", "rectangular_step"):
            if not _finite_positive(getattr(self, name)):
                raise ConfigurationError(f"{name} must be positive, got {getattr(self, name)!r}")

    @property
    def center(self) -> tuple[float, float]:
        return (self.width / 2.0, self.height / 2.0)

    @property
    def half_diagonal(self) -> float:
        return math.hypot(self.width, self.height) / 2.0


@dataclass
class ResolvedWord:
    """An item with size, rotation, measured extent and mask. Lives for one run only."""
    item: Item
    index: int  # position in the submitted list
    size: float
    rotate: float
    width: float
    height: float
    mask: Mask | None = None


@dataclass(frozen=True)
class Placement:
    """Final record for one placed word; (x, y) is the text center on the surface."""
    text: str
    x: float
    y: float
    rotate: float
    size: float
    color: str | None = None
    weight: float = DEFAULT_WEIGHT


@dataclass(frozen=True)
class UnplacedItem:
    """A word whose candidate sequence ran out without a free position."""
    item: Item
    size: float
    rotate: float
    reason: str


@dataclass
class LayoutResult:
    """Outcome of one run: placements in placement order plus diagnostics."""
    placements: list[Placement] = field(default_factory=list)
    unplaced: list[UnplacedItem] = field(default_factory=list)
    n_items: int = 0
    fill_ratio: float = 0.0

    @property
    def success_count(self) -> int:
        return len(self.placements)


def _finite_positive(value: float) -> bool:
    return _finite_non_negative(value) and value > 0


def _finite_non_negative(value: float) -> bool:
    if isinstance(value, bool):
        return False
    try:
        return math.isfinite(value) and value >= 0
    except (TypeError, OverflowError):
        return False


def _is_int(value: object) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)
