from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from invoice_desk.utils.coerce import clean_str, safe_float


@dataclass(frozen=True)
class LineItem:
    """One billable row of an invoice."""

    description_primary: str
    description_secondary: str = ""
    quantity: float = 1.0
    unit_price: float = 0.0
    tax_percent: float = 0.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "LineItem":
        return cls(
            description_primary=clean_str(data.get("item", data.get("description_primary"))),
            description_secondary=clean_str(data.get("description", data.get("description_secondary"))),
            quantity=safe_float(data.get("quantity")),
            unit_price=safe_float(data.get("unit_price")),
            tax_percent=safe_float(data.get("tax_percent")),
        )

    def to_mapping(self) -> dict:
        return {
            "item": self.description_primary,
            "description": self.description_secondary or None,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "tax_percent": self.tax_percent,
        }


class DiscountKind(str, Enum):
    ABSOLUTE = "value"
    PERCENT_OF_SUBTOTAL = "percent"


@dataclass(frozen=True)
class DiscountPolicy:
    kind: DiscountKind = DiscountKind.ABSOLUTE
    amount: float = 0.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DiscountPolicy":
        raw_kind = clean_str(data.get("discount_type")).lower()
        kind = DiscountKind.PERCENT_OF_SUBTOTAL if raw_kind == "percent" else DiscountKind.ABSOLUTE
        return cls(kind=kind, amount=safe_float(data.get("discount_amount")))


NO_DISCOUNT = DiscountPolicy()
