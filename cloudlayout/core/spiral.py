# cloudlayout/core/spiral.py
"""
Candidate centers for the placement search: lazy, finite spirals around a start point.
Each call returns a fresh generator; a consumed generator cannot be restarted.
"""

from __future__ import annotations

import math
from typing import Iterator

from cloudlayout.core.types import RunContext

# right, down, left, up (screen coordinates: +y points down)
_RECT_DIRECTIONS: tuple[tuple[int, int], ...] = ((1, 0), (0, 1), (-1, 0), (0, -1))


def archimedean_spiral(
    cx: float,
    cy: float,
    max_radius: float,
    a: float,
    theta_step: float,
    max_steps: int,
) -> Iterator[tuple[float, float]]:
    """
    Points (cx + r cos t, cy + r sin t) with r = a * t and t = 0, step, 2*step, ...
    Stops once r exceeds max_radius or max_steps points were produced.
    """
    theta = 0.0
    for _ in range(max_steps):
        r = a * theta
        if r > max_radius:
            return
        yield (cx + r * math.cos(theta), cy + r * math.sin(theta))
        theta += theta_step


def rectangular_spiral(
    cx: float,
    cy: float,
    max_radius: float,
    dx: float,
    dy: float,
    max_steps: int,
) -> Iterator[tuple[float, float]]:
    """
    Walk the boundary of growing axis-aligned rectangles around (cx, cy):
    right, down, left, up, with legs of 1, 1, 2, 2, 3, 3, ... units (dx wide, dy tall).
    Every lattice point is visited once. Stops once the half-extent of the
    current rectangle exceeds max_radius or max_steps points were produced.
    """
    if max_steps < 1:
        return
    yield (cx, cy)
    produced = 1
    x = y = 0
    leg = 0
    leg_len = 1
    while True:
        step_x, step_y = _RECT_DIRECTIONS[leg % 4]
        for _ in range(leg_len):
            x += step_x
            y += step_y
            if max(abs(x) * dx, abs(y) * dy) > max_radius or produced >= max_steps:
                return
            yield (cx + x * dx, cy + y * dy)
            produced += 1
        leg += 1
        if leg % 2 == 0:
            leg_len += 1


def spiral_candidates(ctx: RunContext) -> Iterator[tuple[float, float]]:
    """Fresh candidate sequence for one word, starting at the surface center."""
    cx, cy = ctx.center
    max_radius = ctx.spiral_radius_factor * ctx.half_diagonal
    if ctx.spiral == "rectangular":
        dy = ctx.rectangular_step
        dx = dy * ctx.width / ctx.height
        return rectangular_spiral(cx, cy, max_radius, dx, dy, ctx.max_spiral_steps)
    if ctx.spiral == "archimedean":
        return archimedean_spiral(
            cx, cy, max_radius, ctx.archimedean_a, ctx.archimedean_theta_step, ctx.max_spiral_steps
        )
    raise ValueError(f"Unknown spiral {ctx.spiral!r}")
