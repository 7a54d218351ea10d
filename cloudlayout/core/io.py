# cloudlayout/core/io.py
"""
Load and validate word records; serialize placements.
Input records: {text, weight?, color?, rotate?}; shorthand "text" and [text, weight, color] are accepted.
Output records: {text, x, y, rotate, size, color, weight}.
Malformed input raises ParseError; defaults are applied here once.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Iterable, Sequence

from cloudlayout.core.config import DEFAULT_WEIGHT
from cloudlayout.core.errors import ParseError
from cloudlayout.core.types import Item, LayoutResult, Placement


def _resolve_path(path: str | Path, repo_root: Path | None) -> Path:
    """Resolve path; if relative, against repo_root (or cwd if repo_root is None)."""
    p = Path(path)
    if not p.is_absolute() and repo_root is not None:
        p = repo_root / p
    return p.resolve()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_text(value: Any, index: int) -> str:
    if not isinstance(value, str):
        raise ParseError(f"text must be a string, got {type(value).__name__}", index)
    if not value.strip():
        raise ParseError("text is empty", index)
    return value


def _finite_float(value: Any, name: str, index: int) -> float:
    """Number -> float; bools, non-numbers, NaN, infinities and ints too large for a float raise ParseError."""
    if not _is_number(value):
        raise ParseError(f"{name} must be a finite number, got {value!r}", index)
    try:
        number = float(value)
    except OverflowError as e:
        raise ParseError(f"{name} is too large", index) from e
    if not math.isfinite(number):
        raise ParseError(f"{name} must be a finite number, got {value!r}", index)
    return number


def _parse_weight(value: Any, index: int) -> float:
    if value is None:
        return DEFAULT_WEIGHT
    weight = _finite_float(value, "weight", index)
    if weight < 0:
        raise ParseError(f"weight must be >= 0, got {value!r}", index)
    return weight


def _parse_color(value: Any, index: int) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ParseError(f"color must be a string, got {value!r}", index)
    return value


def _parse_rotate(value: Any, index: int) -> float | None:
    if value is None:
        return None
    return _finite_float(value, "rotate (degrees)", index)


def parse_item(record: Any, index: int = 0) -> Item:
    """One record (Item, dict, "text" or [text, weight, color]) -> validated Item. Unknown dict keys are ignored."""
    if isinstance(record, Item):
        return Item(
            text=_parse_text(record.text, index),
            weight=_parse_weight(record.weight, index),
            color=_parse_color(record.color, index),
            rotate=_parse_rotate(record.rotate, index),
        )
    if isinstance(record, str):
        return Item(text=_parse_text(record, index))
    if isinstance(record, (list, tuple)):
        if not 1 <= len(record) <= 3:
            raise ParseError(f"array record must be [text, weight?, color?], got {len(record)} fields", index)
        fields = list(record) + [None] * (3 - len(record))
        return Item(
            text=_parse_text(fields[0], index),
            weight=_parse_weight(fields[1], index),
            color=_parse_color(fields[2], index),
        )
    if isinstance(record, dict):
        if "text" not in record:
            raise ParseError("missing 'text'", index)
        return Item(
            text=_parse_text(record["text"], index),
            weight=_parse_weight(record.get("weight"), index),
            color=_parse_color(record.get("color"), index),
            rotate=_parse_rotate(record.get("rotate"), index),
        )
    raise ParseError(f"unsupported record type {type(record).__name__}", index)


def parse_items(
    raw: str | bytes | Iterable[Any],
    palette: Sequence[str] | None = None,
) -> list[Item]:
    """
    Parse a JSON string or a list of records into Items.
    If palette is given, records without a color get palette[index % len(palette)].
    """
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError as e:  # JSONDecodeError, UnicodeDecodeError, over-long int literals
            raise ParseError(f"invalid JSON: {e}") from e
    if isinstance(raw, dict) or not isinstance(raw, (list, tuple)):
        raise ParseError(f"expected a list of records, got {type(raw).__name__}")
    items = [parse_item(rec, i) for i, rec in enumerate(raw)]
    if palette:
        items = [
            it if it.color is not None else Item(it.text, it.weight, palette[i % len(palette)], it.rotate)
            for i, it in enumerate(items)
        ]
    return items


def load_items(
    path: str | Path,
    repo_root: Path | None = None,
    palette: Sequence[str] | None = None,
) -> list[Item]:
    """
    Read a JSON word list from a file.
    Raises FileNotFoundError if path is missing, ParseError if the content is malformed.
    """
    resolved = _resolve_path(path, repo_root)
    if not resolved.exists():
        raise FileNotFoundError(f"Word list not found: {resolved}")
    return parse_items(resolved.read_text(encoding="utf-8"), palette=palette)


def item_to_dict(item: Item) -> dict:
    out: dict[str, Any] = {"text": item.text, "weight": item.weight}
    if item.color is not None:
        out["color"] = item.color
    if item.rotate is not None:
        out["rotate"] = item.rotate
    return out


def placement_to_dict(placement: Placement) -> dict:
    """Output record for one placed word."""
    return {
        "text": placement.text,
        "x": placement.x,
        "y": placement.y,
        "rotate": placement.rotate,
        "size": placement.size,
        "color": placement.color,
        "weight": placement.weight,
    }


def layout_to_records(result: LayoutResult) -> list[dict]:
    return [placement_to_dict(p) for p in result.placements]


def layout_to_json(result: LayoutResult, indent: int | None = None) -> str:
    """Placements as a JSON array, in placement order."""
    return json.dumps(layout_to_records(result), indent=indent)
