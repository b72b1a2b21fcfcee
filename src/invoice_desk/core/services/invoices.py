from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from typing import List, Sequence

from invoice_desk import config
from invoice_desk.core.calculations.totals_engine import compute_totals, items_gross_total
from invoice_desk.core.models.invoice import InvoiceDocument, InvoiceListRow, InvoiceStatus, PaymentMethod
from invoice_desk.core.models.line_item import DiscountPolicy, LineItem, NO_DISCOUNT
from invoice_desk.core.models.party import PartySnapshot
from invoice_desk.core.services.customers import CustomerRepository
from invoice_desk.core.services.invoice_form import validate_draft
from invoice_desk.core.services.settings import SettingsRepository
from invoice_desk.core.services.storage import JsonStore
from invoice_desk.exceptions import InvoiceNotFoundError, ValidationError
from invoice_desk.utils.coerce import safe_float

logger = logging.getLogger(__name__)

INVOICES_FILE = "invoices.json"
SORT_FIELDS = ("issue_date", "due_date", "number", "created_at")
PERIODS = ("all", "month", "quarter", "year")


def _cents(value: float) -> float:
    """Amounts are compared as the user sees them, to the cent."""
    return round(value, 2)


@dataclass
class InvoiceDraft:
    """What the invoice form submits. Number, snapshots and payment state are assigned on create."""

    issue_date: date
    due_date: date
    items: List[LineItem] = field(default_factory=list)
    status: InvoiceStatus = InvoiceStatus.UNPAID
    currency: str = "MUR"
    discount: DiscountPolicy = NO_DISCOUNT
    notes: str = ""
    terms: str = ""
    # either a roster customer or a one-off client
    customer_id: str | None = None
    client: PartySnapshot | None = None


def period_start(period: str, today: date) -> date | None:
    if period == "month":
        return today.replace(day=1)
    if period == "quarter":
        # first day of the month two months back
        month = today.month - 2
        year = today.year
        if month < 1:
            month += 12
            year -= 1
        return date(year, month, 1)
    if period == "year":
        return date(today.year, 1, 1)
    return None


class InvoiceRepository:
    def __init__(
        self,
        data_dir: Path | None = None,
        settings: SettingsRepository | None = None,
        customers: CustomerRepository | None = None,
    ) -> None:
        base = Path(data_dir or config.DATA_DIR)
        self.store = JsonStore(base / INVOICES_FILE, default=[])
        self.settings = settings or SettingsRepository(base)
        self.customers = customers or CustomerRepository(base)

    def _load(self) -> List[InvoiceDocument]:
        return [InvoiceDocument.from_mapping(row) for row in self.store.load() or []]

    def _save(self, invoices: Sequence[InvoiceDocument]) -> None:
        self.store.save([inv.to_mapping() for inv in invoices])

    def _replace(self, invoice_id: str, **changes) -> InvoiceDocument:
        invoices = self._load()
        for idx, inv in enumerate(invoices):
            if inv.id == invoice_id:
                invoices[idx] = inv.updated(**changes)
                self._save(invoices)
                return invoices[idx]
        raise InvoiceNotFoundError(invoice_id)

    # --- create ---
    def create_invoice(self, draft: InvoiceDraft) -> str:
        """
        Number the invoice, capture sender and bill-to snapshots and store it.
        Returns the new invoice id.
        """
        validate_draft(draft)
        prefs = self.settings.fetch_preferences()
        number = prefs.format_number()
        prefs.next_number += 1

        profile = self.settings.fetch_profile()
        if draft.customer_id:
            bill_to = self.customers.get_customer(draft.customer_id).party
        else:
            bill_to = draft.client or PartySnapshot()

        total = _cents(compute_totals(draft.items, draft.discount).total)
        # an invoice issued as paid is settled in full
        paid = max(0.0, total) if draft.status is InvoiceStatus.PAID else 0.0
        doc = InvoiceDocument(
            id=uuid.uuid4().hex,
            number=number,
            issue_date=draft.issue_date.isoformat(),
            due_date=draft.due_date.isoformat(),
            status=draft.status,
            currency=draft.currency or prefs.currency,
            sender=None if profile.is_empty() else profile,
            bill_to=bill_to,
            items=tuple(draft.items),
            discount=draft.discount,
            notes=draft.notes,
            terms=draft.terms,
            amount_paid=paid,
            amount_due=max(0.0, _cents(total - paid)),
            customer_id=draft.customer_id,
            created_at=datetime.now(timezone.utc).isoformat(timespec="microseconds"),
        )
        invoices = self._load()
        invoices.append(doc)
        self._save(invoices)
        self.settings.save_preferences(prefs)
        logger.info("Created invoice %s (%s)", doc.number, doc.id)
        return doc.id

    # --- read ---
    def get_invoice(self, invoice_id: str) -> InvoiceDocument | None:
        for inv in self._load():
            if inv.id == invoice_id:
                return inv
        return None

    def list_invoices(
        self,
        search: str = "",
        status: str = "all",
        period: str = "all",
        page: int = 1,
        page_size: int = 10,
        sort_by: str = "issue_date",
        sort: str = "desc",
        today: date | None = None,
    ) -> tuple[List[InvoiceListRow], int]:
        if sort_by not in SORT_FIELDS:
            raise ValidationError(f"Cannot sort by {sort_by!r}", {"sort_by": f"One of {', '.join(SORT_FIELDS)}"})
        if period not in PERIODS:
            raise ValidationError(f"Unknown period {period!r}", {"period": f"One of {', '.join(PERIODS)}"})

        rows = self._load()
        if status and status != "all":
            wanted = InvoiceStatus.parse(status)
            rows = [inv for inv in rows if inv.status is wanted]
        start = period_start(period, today or date.today())
        if start is not None:
            rows = [inv for inv in rows if inv.issue_date >= start.isoformat()]
        term = (search or "").strip().lower()
        if term:
            rows = [
                inv
                for inv in rows
                if term in inv.number.lower()
                or term in inv.bill_to.company_name.lower()
                or term in inv.bill_to.full_name.lower()
            ]

        # secondary order first; sort() is stable
        rows.sort(key=lambda inv: inv.number, reverse=True)
        rows.sort(key=lambda inv: getattr(inv, sort_by), reverse=(sort != "asc"))

        total = len(rows)
        page = max(1, page)
        page_size = max(1, page_size)
        start_idx = (page - 1) * page_size
        return [self._list_row(inv) for inv in rows[start_idx : start_idx + page_size]], total

    @staticmethod
    def _list_row(inv: InvoiceDocument) -> InvoiceListRow:
        return InvoiceListRow(
            id=inv.id,
            number=inv.number,
            issue_date=inv.issue_date,
            due_date=inv.due_date,
            status=inv.status,
            currency=inv.currency,
            client_name=inv.bill_to.display_name,
            total=items_gross_total(inv.items),
        )

    # --- payments ---
    def mark_invoice_paid(self, invoice_id: str) -> InvoiceDocument:
        inv = self.get_invoice(invoice_id)
        if inv is None:
            raise InvoiceNotFoundError(invoice_id)
        total = _cents(compute_totals(inv.items, inv.discount).total)
        updated = self._replace(invoice_id, status=InvoiceStatus.PAID, amount_paid=max(0.0, total), amount_due=0.0)
        logger.info("Invoice %s marked as paid", inv.number)
        return updated

    def update_invoice_payment(
        self,
        invoice_id: str,
        payment_method: PaymentMethod | str | None,
        amount_paid: float,
    ) -> InvoiceDocument:
        """Record a payment; status and amount due are derived from the total."""
        inv = self.get_invoice(invoice_id)
        if inv is None:
            raise InvoiceNotFoundError(invoice_id)
        total = _cents(compute_totals(inv.items, inv.discount).total)
        amount = _cents(safe_float(amount_paid, default=-1.0))
        if amount < 0:
            raise ValidationError("Amount paid cannot be negative.", {"amount_paid": "Must be 0 or more."})
        if amount > max(0.0, total):
            raise ValidationError("Amount paid cannot exceed the invoice total.", {"amount_paid": "Must not exceed the total."})

        method = payment_method if isinstance(payment_method, PaymentMethod) else PaymentMethod.parse(payment_method)
        status = InvoiceStatus.PAID if amount >= total else InvoiceStatus.UNPAID
        updated = self._replace(
            invoice_id,
            payment_method=method,
            amount_paid=amount,
            amount_due=max(0.0, _cents(total - amount)),
            status=status,
        )
        logger.info("Payment recorded for %s: %.2f (%s)", inv.number, amount, status.value)
        return updated

    def delete_invoice(self, invoice_id: str) -> None:
        invoices = self._load()
        remaining = [inv for inv in invoices if inv.id != invoice_id]
        if len(remaining) == len(invoices):
            raise InvoiceNotFoundError(invoice_id)
        self._save(remaining)
        logger.info("Deleted invoice %s", invoice_id)
