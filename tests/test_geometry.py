# tests/test_geometry.py
"""
Deterministic tests for geometry: rotated rectangles, extents, containment.
"""

from __future__ import annotations

import pytest
from shapely.geometry import Polygon

from cloudlayout.core.geometry import (
    oriented_rectangle,
    polygon_contains_with_tol,
    rotated_half_extents,
    surface_polygon,
)


def test_oriented_rectangle() -> None:
    rect = oriented_rectangle(5, 5, 4, 2, 0)
    assert rect.is_valid
    assert rect.centroid.x == pytest.approx(5) and rect.centroid.y == pytest.approx(5)
    rect90 = oriented_rectangle(5, 5, 4, 2, 90)
    assert rect90.is_valid
    minx, miny, maxx, maxy = rect90.bounds
    assert maxx - minx == pytest.approx(2) and maxy - miny == pytest.approx(4)


def test_rotated_half_extents_right_angles_exact() -> None:
    assert rotated_half_extents(40, 8, 0) == (20.0, 4.0)
    assert rotated_half_extents(40, 8, 90) == (4.0, 20.0)
    assert rotated_half_extents(40, 8, -90) == (4.0, 20.0)


def test_rotated_half_extents_match_polygon_bounds() -> None:
    hw, hh = rotated_half_extents(30, 10, 30)
    minx, miny, maxx, maxy = oriented_rectangle(0, 0, 30, 10, 30).bounds
    assert hw == pytest.approx(maxx) and hh == pytest.approx(maxy)
    assert -hw == pytest.approx(minx) and -hh == pytest.approx(miny)


def test_polygon_contains_with_tol() -> None:
    surface = surface_polygon(10, 10)
    inside = Polygon([(2, 2), (4, 2), (4, 4), (2, 4)])
    assert polygon_contains_with_tol(surface, inside) is True
    edge = Polygon([(0, 0), (10, 0), (10, 10), (0, 10)])
    assert polygon_contains_with_tol(surface, edge) is True
    outside = Polygon([(8, 8), (12, 8), (12, 12), (8, 12)])
    assert polygon_contains_with_tol(surface, outside) is False
