# cloudlayout/core/render.py
"""
Matplotlib PNG rendering: cloud.png (words only) and debug.png (masks, rectangles, spiral).
Surface coordinates have +y pointing down, like a canvas; axes are flipped to match.
"""

from __future__ import annotations

import warnings
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from cloudlayout.core.config import DEFAULT_COLOR, RENDER_BACKGROUND
from cloudlayout.core.geometry import rectangle_corners
from cloudlayout.core.spiral import spiral_candidates
from cloudlayout.core.types import LayoutResult, MetricsProvider, RunContext
from cloudlayout.core.validate import placement_cells

# 1 pt == 1 surface unit at this dpi, so font sizes map straight onto the surface
_DPI = 72


def set_axes_to_surface(ax: plt.Axes, width: float, height: float) -> None:
    """Limits to the surface with y flipped; equal aspect; hide axes."""
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.set_aspect("equal", adjustable="box")
    ax.axis("off")


def _new_fig(width: float, height: float, scale: int = 1) -> tuple[plt.Figure, plt.Axes]:
    fig = plt.figure(
        figsize=(width / _DPI, height / _DPI),
        dpi=_DPI * scale,
        constrained_layout=False,
    )
    ax = fig.add_axes([0, 0, 1, 1])  # full-canvas axes
    ax.axis("off")
    return fig, ax


def _save(fig: plt.Figure, output_path: str | Path, dpi: int) -> None:
    with warnings.catch_warnings():
        warnings.filterwarnings("ignore", message=".*constrained_layout.*", category=UserWarning)
        fig.savefig(output_path, dpi=dpi, facecolor=RENDER_BACKGROUND)
    plt.close(fig)


def _draw_words(ax: plt.Axes, result: LayoutResult, ctx: RunContext, alpha: float = 1.0) -> None:
    weight = "bold" if str(ctx.font_weight).lower() in ("bold", "700", "800", "900") else "normal"
    for p in result.placements:
        ax.text(
            p.x, p.y, p.text,
            fontsize=p.size,
            fontfamily=ctx.font_family,
            fontweight=weight,
            ha="center", va="center",
            color=p.color or DEFAULT_COLOR,
            # canvas rotation is clockwise on screen; matplotlib rotates counter-clockwise
            rotation=-p.rotate,
            rotation_mode="anchor",
            alpha=alpha,
            zorder=5,
        )


def render_layout(
    result: LayoutResult,
    ctx: RunContext,
    output_path: str | Path,
    scale: int = 1,
) -> None:
    """Render placed words. scale multiplies output resolution (1x, 2x, 4x)."""
    fig, ax = _new_fig(ctx.width, ctx.height, scale)
    _draw_words(ax, result, ctx)
    set_axes_to_surface(ax, ctx.width, ctx.height)
    _save(fig, output_path, _DPI * scale)


def occupancy_image(result: LayoutResult, ctx: RunContext, metrics: MetricsProvider) -> np.ndarray:
    """Rebuild the committed occupancy as a [row, col] array; value = placement order + 1."""
    cols = int(ctx.width // ctx.cell_size)
    rows = int(ctx.height // ctx.cell_size)
    image = np.zeros((rows, cols), dtype=int)
    for k, p in enumerate(result.placements, start=1):
        for i, j in placement_cells(p, ctx, metrics):
            if 0 <= i < cols and 0 <= j < rows:
                image[j, i] = k
    return image


def render_debug(
    result: LayoutResult,
    ctx: RunContext,
    metrics: MetricsProvider,
    output_path: str | Path,
    scale: int = 1,
    max_spiral_points: int = 2000,
) -> None:
    """Debug overlay: occupied cells, word rectangles and the first spiral candidates."""
    fig, ax = _new_fig(ctx.width, ctx.height, scale)

    image = occupancy_image(result, ctx, metrics)
    rows, cols = image.shape
    masked = np.ma.masked_equal(image, 0)
    ax.imshow(
        masked,
        extent=(0, cols * ctx.cell_size, rows * ctx.cell_size, 0),
        cmap="tab20",
        alpha=0.35,
        interpolation="nearest",
        zorder=1,
    )

    for p in result.placements:
        w, h = metrics(p.text, ctx.font_family, ctx.font_weight, p.size)
        corners = rectangle_corners(p.x, p.y, w, h, p.rotate)
        xy = np.array(corners + [corners[0]])
        ax.plot(xy[:, 0], xy[:, 1], linewidth=0.8, color="black", zorder=3)

    spiral = []
    for k, pt in enumerate(spiral_candidates(ctx)):
        if k >= max_spiral_points:
            break
        spiral.append(pt)
    if spiral:
        sxy = np.array(spiral)
        ax.plot(sxy[:, 0], sxy[:, 1], linewidth=0.5, color="gray", alpha=0.6, zorder=2)

    _draw_words(ax, result, ctx, alpha=0.8)
    set_axes_to_surface(ax, ctx.width, ctx.height)
    _save(fig, output_path, _DPI * scale)
