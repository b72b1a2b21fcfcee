from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping

from invoice_desk.utils.coerce import clean_str, safe_float


@dataclass
class Preferences:
    """Invoice numbering and defaults for new invoices."""

    currency: str = "MUR"
    number_prefix: str = "INV"
    number_padding: int = 4
    next_number: int = 1
    payment_terms: int = 14  # days
    default_notes: str = ""
    default_terms: str = ""
    accent_color: str = ""

    def format_number(self, number: int | None = None) -> str:
        value = self.next_number if number is None else number
        return f"{self.number_prefix}-{str(value).zfill(max(0, self.number_padding))}"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "Preferences":
        data = data or {}
        defaults = cls()
        return cls(
            currency=clean_str(data.get("currency")) or defaults.currency,
            number_prefix=clean_str(data.get("number_prefix")) or defaults.number_prefix,
            number_padding=int(safe_float(data.get("number_padding"), defaults.number_padding)),
            next_number=max(1, int(safe_float(data.get("next_number"), defaults.next_number))),
            payment_terms=int(safe_float(data.get("payment_terms"), defaults.payment_terms)),
            default_notes=clean_str(data.get("default_notes")),
            default_terms=clean_str(data.get("default_terms")),
            accent_color=clean_str(data.get("accent_color")),
        )

    def to_mapping(self) -> dict:
        return asdict(self)
