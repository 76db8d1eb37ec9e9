"""Helpers for request parameters and user input."""

from __future__ import annotations

import re
from typing import Mapping

_INT = re.compile(r"[+-]?[0-9]+")
_UNSAFE = re.compile(r"[^0-9A-Za-z_\t\n\f\r ]")


def _atoi(text: str) -> int:
    """Parse a strict decimal integer; anything else counts as 0."""
    return int(text) if _INT.fullmatch(text) else 0


def get_pagination_params(query: Mapping[str, str]) -> tuple[int, int]:
    """Return ``(page, limit)`` from query parameters, defaulting to 1 and 10."""
    page = _atoi(query.get("page", "1"))
    limit = _atoi(query.get("limit", "10"))
    if page < 1:
        page = 1
    if limit < 1:
        limit = 10
    return page, limit


def sanitize_input(text: str) -> str:
    """Remove every character that is not a word character or whitespace."""
    return _UNSAFE.sub("", text)