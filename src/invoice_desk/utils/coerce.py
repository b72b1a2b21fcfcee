"""
Lenient converters for values coming from JSON files and form fields.
"""

from __future__ import annotations

import math
from typing import Any


def safe_float(value: Any, default: float = 0.0) -> float:
    """Parse a number; missing, malformed and non-finite values become `default`."""
    if value is None or value == "":
        return float(default)
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return float(default)
    if not math.isfinite(numeric):
        return float(default)
    return numeric


def clean_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()
