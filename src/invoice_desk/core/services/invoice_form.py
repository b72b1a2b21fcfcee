from __future__ import annotations

import math
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Dict, List, Mapping, Sequence

from invoice_desk.core.models.line_item import DiscountKind, DiscountPolicy, LineItem
from invoice_desk.core.models.party import PartyKind, PartySnapshot
from invoice_desk.core.models.preferences import Preferences
from invoice_desk.exceptions import ValidationError
from invoice_desk.utils.coerce import clean_str, safe_float

if TYPE_CHECKING:
    from invoice_desk.core.services.invoices import InvoiceDraft

# (field, message) checked on a one-off client
REQUIRED_CLIENT_FIELDS = (
    ("email", "Email is required."),
    ("phone", "Phone is required."),
    ("street", "Street is required."),
    ("city", "City is required."),
    ("postal", "Postal code is required."),
    ("country", "Country is required."),
)


def _client_errors(client: PartySnapshot | None) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    client = client or PartySnapshot()
    if client.kind is PartyKind.COMPANY:
        if not client.company_name.strip():
            errors["company_name"] = "Company name is required."
    elif not client.full_name.strip():
        errors["full_name"] = "Full name is required."
    for name, message in REQUIRED_CLIENT_FIELDS:
        if not getattr(client, name).strip():
            errors[name] = message
    return errors


def validate_draft(draft: "InvoiceDraft") -> None:
    """Raise ValidationError listing every problem at once; roster customers skip the client checks."""
    errors: Dict[str, str] = {}
    if not draft.customer_id:
        errors.update(_client_errors(draft.client))
    if not draft.items:
        errors["items"] = "Add at least one item."
    for idx, item in enumerate(draft.items, start=1):
        if not item.description_primary.strip():
            errors[f"item_{idx}"] = "Item name is required."
        if item.quantity <= 0:
            errors[f"qty_{idx}"] = "Quantity must be greater than 0."
        if item.unit_price < 0:
            errors[f"price_{idx}"] = "Price cannot be negative."
    if errors:
        raise ValidationError("Please fix the highlighted fields.", errors)


def default_due_date(issue: date, payment_terms: int) -> date:
    return issue + timedelta(days=max(0, int(payment_terms)))


def preview_number(prefs: Preferences) -> str:
    """Number the next created invoice will get."""
    return prefs.format_number()


# --- form field parsing ---

DATE_FORMAT = "%Y-%m-%d"
FIX_FIELDS = "Please fix the highlighted fields."


def parse_form_date(text: str, field: str) -> date:
    try:
        return datetime.strptime(clean_str(text), DATE_FORMAT).date()
    except ValueError as exc:
        raise ValidationError(FIX_FIELDS, {field: "Use the YYYY-MM-DD format."}) from exc


def _number(text: str, blank: float) -> float:
    """NaN marks text that is not a number; blank text means `blank`."""
    raw = clean_str(text)
    if not raw:
        return blank
    return safe_float(raw, default=float("nan"))


def items_from_rows(rows: Sequence[Mapping[str, str]]) -> List[LineItem]:
    """
    Turn item rows typed into the invoice form into line items.

    Rows left completely blank are skipped. Error keys use the position of the
    row among the kept ones, the same numbering `validate_draft` reports.
    """
    items: List[LineItem] = []
    errors: Dict[str, str] = {}
    for row in rows:
        if not any(clean_str(value) for value in row.values()):
            continue
        idx = len(items) + 1
        quantity = _number(row.get("qty", ""), blank=float("nan"))
        price = _number(row.get("price", ""), blank=float("nan"))
        tax = _number(row.get("tax", ""), blank=0.0)
        if math.isnan(quantity):
            errors[f"qty_{idx}"] = "Quantity must be a number."
        if math.isnan(price):
            errors[f"price_{idx}"] = "Price must be a number."
        if math.isnan(tax):
            errors[f"tax_{idx}"] = "Tax must be a number."
        items.append(
            LineItem(
                description_primary=clean_str(row.get("item")),
                description_secondary=clean_str(row.get("description")),
                quantity=quantity,
                unit_price=price,
                tax_percent=tax,
            )
        )
    if errors:
        raise ValidationError(FIX_FIELDS, errors)
    return items


def discount_from_form(kind: str, amount: str) -> DiscountPolicy:
    value = _number(amount, blank=0.0)
    if math.isnan(value) or value < 0:
        raise ValidationError(FIX_FIELDS, {"discount": "Discount must be 0 or more."})
    if clean_str(kind).lower() == DiscountKind.PERCENT_OF_SUBTOTAL.value:
        return DiscountPolicy(DiscountKind.PERCENT_OF_SUBTOTAL, value)
    return DiscountPolicy(DiscountKind.ABSOLUTE, value)


def error_lines(field_errors: Mapping[str, str]) -> List[str]:
    """Readable messages for a form; item errors are prefixed with their row."""
    lines = []
    for key, message in field_errors.items():
        prefix, _, idx = key.rpartition("_")
        if prefix in ("item", "qty", "price", "tax") and idx.isdigit():
            lines.append(f"Item {idx}: {message}")
        else:
            lines.append(message)
    return lines
