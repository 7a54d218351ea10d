# cloudlayout/core/config.py
"""
Central configuration for word cloud packing.
All tunable values live here; no magic numbers in other modules.
"""

from __future__ import annotations
import os

# ----- Paths (repo-relative) -----
REPORTS_DIR: str = "reports"

# ----- Surface and typography defaults -----
DEFAULT_WIDTH: int = 800
DEFAULT_HEIGHT: int = 600

DEFAULT_FONT_FAMILY: str = "DejaVu Sans"
DEFAULT_FONT_WEIGHT: str = "normal"

DEFAULT_MIN_SIZE: float = 10.0
DEFAULT_MAX_SIZE: float = 60.0

DEFAULT_ROTATION_RANGE: float = 0.0
"""Degrees; rotations are drawn from [-range, +range]. 0 disables rotation."""

DEFAULT_WEIGHT: float = 1.0
"""Weight given to records that omit one."""

# ----- Size mapping -----
SIZE_SCALES: tuple[str, ...] = ("linear", "log")
DEFAULT_SIZE_SCALE: str = "linear"

# ----- Masks and occupancy grid -----
CELL_SIZE_PX: float = 4.0
"""Edge of one occupancy cell in surface units. Coarser is faster but looser."""

MASK_FIDELITIES: tuple[str, ...] = ("bbox", "fine")
DEFAULT_FIDELITY: str = "fine"

WORD_PADDING_PX: float = 1.0
"""Extra margin (surface units) around each word before rasterizing its mask."""

FINE_OVERLAP_EPS: float = 1e-9
"""Fraction of a cell a rotated word must cover for "fine" masks to claim that cell."""

# ----- Spiral search -----
SPIRAL_TYPES: tuple[str, ...] = ("archimedean", "rectangular")
DEFAULT_SPIRAL: str = "archimedean"

ARCHIMEDEAN_A: float = 0.5
"""Radius growth per radian: r = a * theta."""

ARCHIMEDEAN_THETA_STEP: float = 0.1
"""Angular step (radians) between archimedean candidates."""

RECTANGULAR_STEP_PX: float = 4.0
"""Vertical leg unit of the rectangular spiral; horizontal unit scales with aspect ratio."""

SPIRAL_RADIUS_FACTOR: float = 1.0
"""Stop the spiral once its radius exceeds this multiple of the surface half-diagonal."""

MAX_SPIRAL_STEPS: int = 50000
"""Hard cap on candidates tested per word."""

# ----- Rendering -----
RENDER_BACKGROUND: str = "white"
DEFAULT_COLOR: str = "#000000"

DEFAULT_PALETTE: tuple[str, ...] = ("#1f77b4", "#ff7f0e", "#2ca02c", "#d62728", "#9467bd")
"""Colors handed out by index to records without one (when a palette is requested)."""

# ----- Determinism -----
SEED: int | None = 42
"""Default seed for the CLI; None for non-deterministic rotations."""

# ----- Debug flags -----
CLOUDLAYOUT_DEBUG: bool = os.environ.get("CLOUDLAYOUT_DEBUG", "").lower() in ("1", "true", "yes")
"""Enable per-word debug logging in the layout engine. Set env CLOUDLAYOUT_DEBUG=1 to enable."""
