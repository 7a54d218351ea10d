# cloudlayout/core/mask.py
"""
Occupancy masks: a word's rotated rectangle discretized onto the grid.

The word center sits on a grid vertex (the mask's local origin). Cell (i, j)
of the mask covers [i*cell, (i+1)*cell] x [j*cell, (j+1)*cell] relative to
that vertex, so placing a mask is a pure integer translation.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
import shapely

from cloudlayout.core.config import FINE_OVERLAP_EPS
from cloudlayout.core.geometry import oriented_rectangle, rotated_half_extents


@dataclass(frozen=True, eq=False)
class Mask:
    """
    Boolean patch (rows x cols, indexed [j, i]) plus the cell offset of its
    top-left entry relative to the word center vertex. Read-only.
    """
    patch: np.ndarray
    offset_x: int
    offset_y: int
    cell_size: float

    @property
    def shape(self) -> tuple[int, int]:
        return (int(self.patch.shape[0]), int(self.patch.shape[1]))

    @property
    def cell_count(self) -> int:
        return int(np.count_nonzero(self.patch))

    @property
    def cells(self) -> frozenset[tuple[int, int]]:
        """Occupied (i, j) offsets relative to the word center vertex."""
        js, is_ = np.nonzero(self.patch)
        return frozenset(
            (int(i) + self.offset_x, int(j) + self.offset_y) for i, j in zip(is_, js)
        )

    def translated_cells(self, gx: int, gy: int) -> frozenset[tuple[int, int]]:
        """Absolute grid cells covered when the word center sits on vertex (gx, gy)."""
        return frozenset((i + gx, j + gy) for i, j in self.cells)


def _cell_range(half_extent: float, cell_size: float) -> tuple[int, int]:
    """[start, stop) cell indices covering [-half_extent, +half_extent]; at least one cell."""
    start = math.floor(-half_extent / cell_size)
    stop = math.ceil(half_extent / cell_size)
    if stop <= start:
        stop = start + 1
    return start, stop


def _trim(patch: np.ndarray, offset_x: int, offset_y: int) -> tuple[np.ndarray, int, int]:
    """Drop empty border rows/columns so the patch is the tight cell bounding box."""
    rows = np.flatnonzero(patch.any(axis=1))
    cols = np.flatnonzero(patch.any(axis=0))
    if rows.size == 0:
        return patch, offset_x, offset_y
    r0, r1 = int(rows[0]), int(rows[-1]) + 1
    c0, c1 = int(cols[0]), int(cols[-1]) + 1
    return patch[r0:r1, c0:c1], offset_x + c0, offset_y + r0


def _fine_patch(
    width: float,
    height: float,
    angle_deg: float,
    cell_size: float,
    i0: int, i1: int, j0: int, j1: int,
) -> np.ndarray:
    """Cells whose interior overlaps the rotated rectangle by a positive area."""
    rect = oriented_rectangle(0.0, 0.0, width, height, angle_deg)
    xs = np.arange(i0, i1, dtype=float) * cell_size
    ys = np.arange(j0, j1, dtype=float) * cell_size
    gx, gy = np.meshgrid(xs, ys)
    cells = shapely.box(gx, gy, gx + cell_size, gy + cell_size)
    areas = shapely.area(shapely.intersection(cells, rect))
    return areas > FINE_OVERLAP_EPS * cell_size * cell_size


def build_mask(
    width: float,
    height: float,
    angle_deg: float,
    cell_size: float,
    fidelity: str = "fine",
    padding: float = 0.0,
) -> Mask:
    """
    Rasterize a width x height word rotated by angle_deg (plus padding on every side).
    fidelity "bbox" claims the whole axis-aligned box around the rotated rectangle;
    "fine" claims only the cells the rectangle actually overlaps.
    """
    if cell_size <= 0:
        raise ValueError(f"cell_size must be positive, got {cell_size}")
    if fidelity not in ("bbox", "fine"):
        raise ValueError(f"Unknown mask fidelity {fidelity!r}")
    w = max(0.0, float(width)) + 2.0 * padding
    h = max(0.0, float(height)) + 2.0 * padding
    half_w, half_h = rotated_half_extents(w, h, angle_deg)
    i0, i1 = _cell_range(half_w, cell_size)
    j0, j1 = _cell_range(half_h, cell_size)
    patch = np.ones((j1 - j0, i1 - i0), dtype=bool)

    if fidelity == "fine" and w > 0 and h > 0:
        fine = _fine_patch(w, h, angle_deg, cell_size, i0, i1, j0, j1)
        if fine.any():
            patch, i0, j0 = _trim(fine, i0, j0)

    patch = np.ascontiguousarray(patch)
    patch.flags.writeable = False
    return Mask(patch=patch, offset_x=i0, offset_y=j0, cell_size=float(cell_size))
