# cloudlayout/core/grid.py
"""
Occupancy grid over the drawing surface: the collision authority for one layout run.
Cells only ever go from free to occupied; the grid is discarded when the run ends.
"""

from __future__ import annotations

import math

import numpy as np

from cloudlayout.core.mask import Mask


class OccupancyGrid:
    """
    Dense boolean grid of cols x rows cells, each cell_size wide, indexed [row, col].
    Only whole cells that lie inside the surface are part of the grid, so a mask
    that passes test() never reaches past the surface edges.
    """

    def __init__(self, width: float, height: float, cell_size: float) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid needs a positive surface, got {width}x{height}")
        if cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {cell_size}")
        self.width = float(width)
        self.height = float(height)
        self.cell_size = float(cell_size)
        self.cols = int(math.floor(self.width / self.cell_size))
        self.rows = int(math.floor(self.height / self.cell_size))
        self._cells = np.zeros((self.rows, self.cols), dtype=bool)

    @property
    def occupied(self) -> np.ndarray:
        """Read-only view of the occupancy array ([row, col])."""
        view = self._cells.view()
        view.flags.writeable = False
        return view

    def _window(self, mask: Mask, gx: int, gy: int) -> tuple[int, int, int, int] | None:
        """Grid slice bounds (x0, y0, x1, y1) the mask covers at vertex (gx, gy); None if out of bounds."""
        x0 = gx + mask.offset_x
        y0 = gy + mask.offset_y
        rows, cols = mask.shape
        x1 = x0 + cols
        y1 = y0 + rows
        if x0 < 0 or y0 < 0 or x1 > self.cols or y1 > self.rows:
            return None
        return x0, y0, x1, y1

    def test(self, mask: Mask, gx: int, gy: int) -> bool:
        """True if every mask cell, centered on vertex (gx, gy), is inside the grid and free."""
        window = self._window(mask, gx, gy)
        if window is None:
            return False
        x0, y0, x1, y1 = window
        return not bool(np.any(self._cells[y0:y1, x0:x1] & mask.patch))

    def commit(self, mask: Mask, gx: int, gy: int) -> None:
        """Mark the mask's cells at vertex (gx, gy) occupied. Position must pass test()."""
        if not self.test(mask, gx, gy):
            raise ValueError(f"Cannot commit mask at vertex ({gx}, {gy}): collision or out of bounds")
        x0, y0, x1, y1 = self._window(mask, gx, gy)  # type: ignore[misc]
        self._cells[y0:y1, x0:x1] |= mask.patch

    def to_vertex(self, x: float, y: float) -> tuple[int, int]:
        """Snap surface coordinates to the nearest grid vertex."""
        return (int(round(x / self.cell_size)), int(round(y / self.cell_size)))

    def to_point(self, gx: int, gy: int) -> tuple[float, float]:
        """Surface coordinates of grid vertex (gx, gy)."""
        return (gx * self.cell_size, gy * self.cell_size)

    def fill_ratio(self) -> float:
        """Share of grid cells occupied, 0..1."""
        if self._cells.size == 0:
            return 0.0
        return float(np.count_nonzero(self._cells)) / float(self._cells.size)
