# cloudlayout/core/geometry.py
"""
Geometry helpers: rotated word rectangles, their axis-aligned extents, containment.
Angles are in degrees; positive angles rotate from +x toward +y (screen: clockwise).
"""

from __future__ import annotations

import math

from shapely.geometry import Polygon, box
from shapely.geometry.base import BaseGeometry


def rectangle_corners(
    cx: float, cy: float, width: float, height: float, angle_deg: float
) -> list[tuple[float, float]]:
    """Four corners of a width x height rectangle centered at (cx, cy), rotated by angle_deg."""
    hw = width / 2.0
    hh = height / 2.0
    rad = math.radians(angle_deg)
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)
    corners = [
        (-hw, -hh),
        (hw, -hh),
        (hw, hh),
        (-hw, hh),
    ]
    return [
        (cx + x * cos_a - y * sin_a, cy + x * sin_a + y * cos_a)
        for x, y in corners
    ]


def oriented_rectangle(
    cx: float, cy: float, width: float, height: float, angle_deg: float
) -> Polygon:
    """
    Axis-aligned rectangle centered at (cx, cy) with given width/height,
    then rotated by angle_deg around center.
    """
    return Polygon(rectangle_corners(cx, cy, width, height, angle_deg))


def rotated_half_extents(width: float, height: float, angle_deg: float) -> tuple[float, float]:
    """Half width and half height of the axis-aligned box around the rotated rectangle."""
    rad = math.radians(angle_deg)
    # right angles must give exact extents, not cos(90) residue
    cos_a = round(abs(math.cos(rad)), 12)
    sin_a = round(abs(math.sin(rad)), 12)
    half_w = (width * cos_a + height * sin_a) / 2.0
    half_h = (width * sin_a + height * cos_a) / 2.0
    return (half_w, half_h)


def surface_polygon(width: float, height: float) -> Polygon:
    """The drawing surface [0, width] x [0, height]."""
    return box(0.0, 0.0, width, height)


def polygon_contains_with_tol(
    poly: BaseGeometry,
    rect: BaseGeometry,
    tolerance: float = 1e-6,
) -> bool:
    """True if rect is fully inside poly, allowing rect to poke out by at most tolerance."""
    if poly is None or rect is None or poly.is_empty or rect.is_empty:
        return False
    if tolerance > 0:
        return poly.buffer(tolerance).covers(rect)
    return poly.covers(rect)
