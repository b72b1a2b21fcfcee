"""
Display formatting. This is the only place where amounts get rounded.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from invoice_desk.utils.coerce import safe_float

# Symbols the built-in PDF fonts can draw; other currencies use their code.
CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}


def format_money(value: Any, currency: str = "") -> str:
    """1234.5, "USD" -> "$1,234.50"; 1234.5, "MUR" -> "MUR 1,234.50"."""
    numeric = safe_float(value)
    body = f"{abs(numeric):,.2f}"
    sign = "-" if numeric < 0 and body.strip("0.,") else ""
    code = (currency or "").strip().upper()
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol:
        return f"{sign}{symbol}{body}"
    if code:
        return f"{sign}{code} {body}"
    return f"{sign}{body}"


def parse_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raw = str(value or "").strip()
    if not raw:
        return None
    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        return None


def format_date(value: Any) -> str:
    """ISO date -> DD/MM/YYYY. Unparseable input is returned as-is."""
    parsed = parse_date(value)
    if parsed is None:
        return str(value or "")
    return parsed.strftime("%d/%m/%Y")


def format_qty(value: Any) -> str:
    numeric = safe_float(value)
    if numeric.is_integer():
        return str(int(numeric))
    return f"{numeric:g}"
