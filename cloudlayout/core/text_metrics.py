# cloudlayout/core/text_metrics.py
"""
Metrics providers: width/height of a text run at a font family, weight and size.
measure_text_px uses Pillow; estimate_text_px is a font-free estimate for tests and headless runs.
"""

from __future__ import annotations

import warnings

_font_warning_emitted: set[str] = set()

_BOLD_WEIGHTS = {"bold", "bolder", "600", "700", "800", "900"}

ESTIMATE_CHAR_WIDTH: float = 0.6
"""Average glyph advance as a fraction of the font size (estimate_text_px)."""


def _is_bold(font_weight: str) -> bool:
    return str(font_weight).strip().lower() in _BOLD_WEIGHTS


def _load_font(font_family: str, font_weight: str, font_size: float):
    """Load PIL ImageFont; fallback with warning if font not found."""
    from PIL import ImageFont

    size = max(1, int(round(font_size)))
    compact = font_family.replace(" ", "")
    candidates: list[str] = []
    if _is_bold(font_weight):
        candidates += [compact + "-Bold.ttf", font_family + " Bold.ttf", "DejaVuSans-Bold.ttf", "arialbd.ttf"]
    candidates += [
        font_family + ".ttf",
        compact + ".ttf",
        "DejaVuSans.ttf",
        "arial.ttf",
        "Arial.ttf",
    ]
    for name in candidates:
        try:
            return ImageFont.truetype(name, size=size)
        except (OSError, IOError):
            continue
    if font_family not in _font_warning_emitted:
        _font_warning_emitted.add(font_family)
        warnings.warn(f"Font not found: {font_family!r}; using default.", UserWarning)
    return ImageFont.load_default(size=size)


def measure_text_px(text: str, font_family: str, font_weight: str, font_size: float) -> tuple[float, float]:
    """
    Return (width, height) of the rendered text in surface units (1 px = 1 unit).
    Pillow rounds the font to whole pixels; the box is rescaled to the exact size.
    """
    from PIL import Image, ImageDraw

    font = _load_font(font_family, font_weight, font_size)
    img = Image.new("RGB", (1, 1))
    draw = ImageDraw.Draw(img)
    bbox = draw.textbbox((0, 0), text, font=font)
    w = float(bbox[2] - bbox[0])
    h = float(bbox[3] - bbox[1])
    size_used = getattr(font, "size", font_size)
    scale = font_size / max(1.0, float(size_used))
    return (w * scale, h * scale)


def estimate_text_px(text: str, font_family: str, font_weight: str, font_size: float) -> tuple[float, float]:
    """Font-free estimate: ESTIMATE_CHAR_WIDTH * size per character wide, one size tall."""
    width = font_size * ESTIMATE_CHAR_WIDTH * len(text)
    if _is_bold(font_weight):
        width *= 1.1
    return (width, float(font_size))
