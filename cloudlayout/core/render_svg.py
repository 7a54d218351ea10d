# cloudlayout/core/render_svg.py
"""
Export a layout as a self-contained SVG: one <text> per placement, centered and rotated.
SVG shares the canvas convention (+y down, clockwise rotation), so coordinates pass through.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from cloudlayout.core.config import DEFAULT_COLOR, RENDER_BACKGROUND
from cloudlayout.core.types import LayoutResult, RunContext

SVG_NS = "http://www.w3.org/2000/svg"


def layout_to_svg(result: LayoutResult, ctx: RunContext) -> str:
    """SVG document text for the layout."""
    root = ET.Element(
        "svg",
        {
            "xmlns": SVG_NS,
            "width": f"{ctx.width:g}",
            "height": f"{ctx.height:g}",
            "viewBox": f"0 0 {ctx.width:g} {ctx.height:g}",
        },
    )
    ET.SubElement(root, "rect", {"width": "100%", "height": "100%", "fill": RENDER_BACKGROUND})

    g_words = ET.SubElement(
        root,
        "g",
        {
            "font-family": ctx.font_family,
            "font-weight": str(ctx.font_weight),
            "text-anchor": "middle",
            "dominant-baseline": "central",
        },
    )
    for p in result.placements:
        text = ET.SubElement(
            g_words,
            "text",
            {
                "transform": f"translate({p.x:.2f} {p.y:.2f}) rotate({p.rotate:.2f})",
                "font-size": f"{p.size:.2f}",
                "fill": p.color or DEFAULT_COLOR,
            },
        )
        text.text = p.text

    return '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(root, encoding="unicode", method="xml")


def export_layout_svg(result: LayoutResult, ctx: RunContext, out_path: str | Path) -> Path:
    """Write the SVG to out_path and return the path."""
    path = Path(out_path)
    path.write_text(layout_to_svg(result, ctx), encoding="utf-8")
    return path
