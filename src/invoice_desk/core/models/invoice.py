from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Any, Mapping

from invoice_desk.core.models.line_item import DiscountPolicy, LineItem, NO_DISCOUNT
from invoice_desk.core.models.party import PartyKind, PartySnapshot
from invoice_desk.utils.coerce import clean_str, safe_float


class InvoiceStatus(str, Enum):
    UNPAID = "unpaid"
    PAID = "paid"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: Any) -> "InvoiceStatus":
        return cls.PAID if clean_str(value).lower() == cls.PAID.value else cls.UNPAID


class PaymentMethod(str, Enum):
    CASH = "Cash"
    CARD = "Card Payment"
    CREDIT = "Credit Facilities"

    @classmethod
    def parse(cls, value: Any) -> "PaymentMethod | None":
        raw = clean_str(value)
        if not raw:
            return None
        for method in cls:
            if raw.lower() in (method.value.lower(), method.name.lower()):
                return method
        return None


def _iso(value: Any) -> str:
    if isinstance(value, date):
        return value.isoformat()
    return clean_str(value)


@dataclass(frozen=True)
class InvoiceDocument:
    """
    Everything the renderer needs about one invoice.
    `sender` is the from-snapshot captured at creation; it may be None for
    invoices created before a profile existed.
    """

    id: str = ""
    number: str = ""
    issue_date: str = ""
    due_date: str = ""
    status: InvoiceStatus = InvoiceStatus.UNPAID
    currency: str = "MUR"
    sender: PartySnapshot | None = None
    bill_to: PartySnapshot = field(default_factory=PartySnapshot)
    items: tuple[LineItem, ...] = ()
    discount: DiscountPolicy = NO_DISCOUNT
    notes: str = ""
    terms: str = ""
    payment_method: PaymentMethod | None = None
    amount_paid: float = 0.0
    amount_due: float = 0.0
    customer_id: str | None = None
    created_at: str = ""

    @property
    def is_paid(self) -> bool:
        return self.status is InvoiceStatus.PAID

    def updated(self, **changes: Any) -> "InvoiceDocument":
        return replace(self, **changes)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "InvoiceDocument":
        sender_raw = data.get("from_snapshot")
        return cls(
            id=clean_str(data.get("id")),
            number=clean_str(data.get("number")),
            issue_date=_iso(data.get("issue_date")),
            due_date=_iso(data.get("due_date")),
            status=InvoiceStatus.parse(data.get("status")),
            currency=clean_str(data.get("currency")) or "MUR",
            sender=PartySnapshot.from_mapping(sender_raw, PartyKind.COMPANY) if sender_raw else None,
            bill_to=PartySnapshot.from_mapping(data.get("bill_to_snapshot")),
            items=tuple(LineItem.from_mapping(it) for it in data.get("items") or []),
            discount=DiscountPolicy.from_mapping(data),
            notes=clean_str(data.get("notes")),
            terms=clean_str(data.get("terms")),
            payment_method=PaymentMethod.parse(data.get("payment_method")),
            amount_paid=safe_float(data.get("amount_paid")),
            amount_due=safe_float(data.get("amount_due")),
            customer_id=clean_str(data.get("customer_id")) or None,
            created_at=clean_str(data.get("created_at")),
        )

    def to_mapping(self) -> dict:
        return {
            "id": self.id,
            "number": self.number,
            "issue_date": self.issue_date,
            "due_date": self.due_date,
            "status": self.status.value,
            "currency": self.currency,
            "from_snapshot": self.sender.to_mapping() if self.sender else None,
            "bill_to_snapshot": self.bill_to.to_mapping(),
            "items": [it.to_mapping() for it in self.items],
            "discount_type": self.discount.kind.value,
            "discount_amount": self.discount.amount,
            "notes": self.notes or None,
            "terms": self.terms or None,
            "payment_method": self.payment_method.value if self.payment_method else None,
            "amount_paid": self.amount_paid,
            "amount_due": self.amount_due,
            "customer_id": self.customer_id,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class InvoiceListRow:
    id: str
    number: str
    issue_date: str
    due_date: str
    status: InvoiceStatus
    currency: str
    client_name: str
    total: float
