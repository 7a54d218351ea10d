# cloudlayout/core/errors.py
"""
Fatal run errors. Both derive from ValueError so callers catching bad input keep working.
Per-word placement failures are not exceptions; see LayoutResult.unplaced.
"""

from __future__ import annotations

from cloudlayout.core.error_codes import CONFIGURATION_INVALID, PARSE_FAILED


class ConfigurationError(ValueError):
    """Invalid surface or size options. Raised before any word is processed."""
    error_key = CONFIGURATION_INVALID


class ParseError(ValueError):
    """Malformed input record or payload."""
    error_key = PARSE_FAILED

    def __init__(self, message: str, index: int | None = None) -> None:
        if index is not None:
            message = f"record {index}: {message}"
        super().__init__(message)
        self.index = index
