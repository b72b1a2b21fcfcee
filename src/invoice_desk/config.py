"""
Runtime configuration read from environment variables.
Every value has a default so the app starts without any setup.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def _env_str(name: str, default: str) -> str:
    value = os.environ.get(name, "")
    value = value.strip().strip('"').strip("'").strip()
    return value or default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


PACKAGE_DIR = Path(__file__).resolve().parent

# JSON data files (settings, customers, invoices)
DATA_DIR = Path(_env_str("INVOICE_DESK_DATA_DIR", str(PACKAGE_DIR / "data")))

# Logo download timeout in seconds
LOGO_TIMEOUT = _env_float("INVOICE_DESK_LOGO_TIMEOUT", 5.0)

LOG_LEVEL = _env_str("INVOICE_DESK_LOG_LEVEL", "INFO").upper()

FOOTER_CAPTION = _env_str("INVOICE_DESK_FOOTER", "Powered by invoice-desk")
