import logging
import tkinter as tk
from datetime import date
from tkinter import messagebox
from typing import Callable, Dict, List

import customtkinter as ctk

from invoice_desk.core.calculations.totals_engine import compute_totals
from invoice_desk.core.models.invoice import InvoiceStatus
from invoice_desk.core.models.line_item import DiscountKind
from invoice_desk.core.services.customers import CustomerRepository
from invoice_desk.core.services.invoice_form import (
    DATE_FORMAT,
    default_due_date,
    discount_from_form,
    error_lines,
    items_from_rows,
    parse_form_date,
    preview_number,
)
from invoice_desk.core.services.invoices import InvoiceDraft
from invoice_desk.core.services.settings import SettingsRepository
from invoice_desk.exceptions import InvoiceDeskError, ValidationError
from invoice_desk.ui.layouts.party_form import PartyForm
from invoice_desk.ui.styles import theme
from invoice_desk.utils.formatting import format_money

logger = logging.getLogger(__name__)

ONE_OFF = "One-off client"
DISCOUNT_KINDS = {"Amount": DiscountKind.ABSOLUTE.value, "Percent": DiscountKind.PERCENT_OF_SUBTOTAL.value}
STATUSES = {status.label: status for status in InvoiceStatus}
# (key, heading, width)
ITEM_COLUMNS = (
    ("item", "Item", 150),
    ("description", "Description", 170),
    ("qty", "Qty", 60),
    ("price", "Price", 80),
    ("tax", "Tax %", 60),
)
class InvoiceDialog(ctk.CTkToplevel):
    """
    New invoice form. Bill-to is either a roster customer or a one-off
    client typed in here; the number shown is a preview, the real one is
    assigned on save. `on_save` raises ValidationError to keep the form open.
    """

    def __init__(
        self,
        master: tk.Misc,
        settings: SettingsRepository,
        customers: CustomerRepository,
        on_save: Callable[[InvoiceDraft], None],
        today: date | None = None,
    ):
        super().__init__(master)
        self.title("New Invoice")
        self.transient(master)
        self.grab_set()
        self.geometry("760x720")
        self.minsize(680, 560)
        self._on_save = on_save
        self._prefs = settings.fetch_preferences()
        rows, _total = customers.list_customers(page_size=1000)
        self._customer_ids = {f"{c.display_name} <{c.party.email}>": c.id for c in rows}
        issue = today or date.today()

        body = ctk.CTkScrollableFrame(self, fg_color="transparent")
        body.pack(fill="both", expand=True, padx=12, pady=(12, 6))
        body.columnconfigure(1, weight=1)

        ctk.CTkLabel(body, text=f"Invoice {preview_number(self._prefs)}", font=("Segoe UI", 13, "bold")).grid(
            row=0, column=0, columnspan=2, sticky="w", pady=(0, 8)
        )

        # --- bill to ---
        ctk.CTkLabel(body, text="Bill to").grid(row=1, column=0, sticky="w")
        self._customer_var = tk.StringVar(value=ONE_OFF)
        combo = ctk.CTkComboBox(
            body,
            values=[ONE_OFF, *self._customer_ids],
            variable=self._customer_var,
            state="readonly",
            width=320,
            command=lambda _val: self._update_bill_to(),
        )
        combo.grid(row=1, column=1, sticky="w", pady=4)
        theme.style_combo_box(combo, theme.PALETTE)
        self._client_form = PartyForm(body, title="Client")
        self._client_form.grid(row=2, column=0, columnspan=2, sticky="ew", pady=(0, 8))

        # --- details ---
        details = ctk.CTkFrame(body, fg_color="transparent")
        details.grid(row=3, column=0, columnspan=2, sticky="ew")
        self._issue_var = tk.StringVar(value=issue.strftime(DATE_FORMAT))
        self._due_var = tk.StringVar(value=default_due_date(issue, self._prefs.payment_terms).strftime(DATE_FORMAT))
        self._currency_var = tk.StringVar(value=self._prefs.currency)
        self._status_var = tk.StringVar(value=InvoiceStatus.UNPAID.label)
        for col, (label, var) in enumerate(
            (("Issue date", self._issue_var), ("Due date", self._due_var), ("Currency", self._currency_var))
        ):
            ctk.CTkLabel(details, text=label).grid(row=0, column=col, sticky="w", padx=(0, 8))
            ctk.CTkEntry(details, textvariable=var, width=120).grid(row=1, column=col, sticky="w", padx=(0, 8))
        ctk.CTkLabel(details, text="Status").grid(row=0, column=3, sticky="w")
        status = ctk.CTkComboBox(details, values=list(STATUSES), variable=self._status_var, state="readonly", width=110)
        status.grid(row=1, column=3, sticky="w")
        theme.style_combo_box(status, theme.PALETTE)
        self._issue_var.trace_add("write", lambda *_: self._follow_issue_date())

        # --- items ---
        ctk.CTkLabel(body, text="Items", font=("Segoe UI", 12, "bold")).grid(row=4, column=0, sticky="w", pady=(12, 4))
        ctk.CTkButton(body, text="Add item", width=90, command=self._add_item_row).grid(row=4, column=1, sticky="e", pady=(12, 4))
        self._items_frame = ctk.CTkFrame(body, fg_color=theme.PALETTE["panel"], corner_radius=8)
        self._items_frame.grid(row=5, column=0, columnspan=2, sticky="ew")
        header = ctk.CTkFrame(self._items_frame, fg_color="transparent")
        header.pack(fill="x", padx=6, pady=(4, 0))
        for _key, title, width in ITEM_COLUMNS:
            ctk.CTkLabel(header, text=title, width=width, anchor="w", text_color=theme.PALETTE["muted"]).pack(
                side="left", padx=(0, 4)
            )
        self._item_rows: List[tuple[Dict[str, tk.StringVar], ctk.CTkFrame]] = []
        self._add_item_row()

        # --- discount and totals ---
        totals = ctk.CTkFrame(body, fg_color="transparent")
        totals.grid(row=6, column=0, columnspan=2, sticky="ew", pady=(8, 0))
        ctk.CTkLabel(totals, text="Discount").pack(side="left")
        self._discount_kind_var = tk.StringVar(value="Amount")
        kind = ctk.CTkComboBox(
            totals,
            values=list(DISCOUNT_KINDS),
            variable=self._discount_kind_var,
            state="readonly",
            width=100,
            command=lambda _val: self._update_total(),
        )
        kind.pack(side="left", padx=6)
        theme.style_combo_box(kind, theme.PALETTE)
        self._discount_var = tk.StringVar(value="0")
        self._discount_var.trace_add("write", lambda *_: self._update_total())
        ctk.CTkEntry(totals, textvariable=self._discount_var, width=80, justify="right").pack(side="left")
        self._total_var = tk.StringVar(value="")
        ctk.CTkLabel(totals, textvariable=self._total_var, font=("Segoe UI", 12, "bold")).pack(side="right")

        # --- notes ---
        ctk.CTkLabel(body, text="Notes").grid(row=7, column=0, sticky="nw", pady=(8, 0))
        self._notes = ctk.CTkTextbox(body, height=60)
        self._notes.grid(row=7, column=1, sticky="ew", pady=(8, 0))
        self._notes.insert("1.0", self._prefs.default_notes)
        ctk.CTkLabel(body, text="Terms & Conditions").grid(row=8, column=0, sticky="nw", pady=(8, 0))
        self._terms = ctk.CTkTextbox(body, height=60)
        self._terms.grid(row=8, column=1, sticky="ew", pady=(8, 0))
        self._terms.insert("1.0", self._prefs.default_terms)

        self._errors = tk.StringVar(value="")
        ctk.CTkLabel(self, textvariable=self._errors, text_color=theme.PALETTE["danger"], justify="left").pack(
            anchor="w", padx=12
        )
        btns = ctk.CTkFrame(self, fg_color="transparent")
        btns.pack(fill="x", padx=12, pady=(0, 12))
        ctk.CTkButton(btns, text="Cancel", command=self.destroy).pack(side="right", padx=(6, 0))
        ctk.CTkButton(btns, text="Create Invoice", command=self._handle_save, **theme.accent_button_kwargs(theme.PALETTE)).pack(
            side="right"
        )

        self._update_total()

    # --- bill to / dates ---
    def _update_bill_to(self) -> None:
        if self._customer_var.get() == ONE_OFF:
            self._client_form.grid()
        else:
            self._client_form.grid_remove()

    def _follow_issue_date(self) -> None:
        try:
            issue = parse_form_date(self._issue_var.get(), "issue_date")
        except ValidationError:
            return
        self._due_var.set(default_due_date(issue, self._prefs.payment_terms).strftime(DATE_FORMAT))

    # --- items ---
    def _add_item_row(self) -> None:
        row = ctk.CTkFrame(self._items_frame, fg_color="transparent")
        row.pack(fill="x", padx=6, pady=2)
        values: Dict[str, tk.StringVar] = {}
        for key, _title, width in ITEM_COLUMNS:
            var = tk.StringVar(value="")
            var.trace_add("write", lambda *_: self._update_total())
            ctk.CTkEntry(row, textvariable=var, width=width).pack(side="left", padx=(0, 4))
            values[key] = var
        entry = (values, row)
        ctk.CTkButton(row, text="x", width=28, command=lambda: self._remove_item_row(entry)).pack(side="left")
        self._item_rows.append(entry)

    def _remove_item_row(self, entry) -> None:
        self._item_rows.remove(entry)
        entry[1].destroy()
        self._update_total()

    def _row_values(self) -> List[Dict[str, str]]:
        return [{key: var.get() for key, var in values.items()} for values, _frame in self._item_rows]

    def _update_total(self) -> None:
        try:
            items = items_from_rows(self._row_values())
            discount = discount_from_form(DISCOUNT_KINDS[self._discount_kind_var.get()], self._discount_var.get())
        except ValidationError:
            self._total_var.set("Total: -")
            return
        total = compute_totals(items, discount).total
        self._total_var.set(f"Total: {format_money(total, self._currency_var.get())}")

    # --- save ---
    def _build_draft(self) -> InvoiceDraft:
        errors: Dict[str, str] = {}
        parsed = {}
        steps = (
            ("issue_date", lambda: parse_form_date(self._issue_var.get(), "issue_date")),
            ("due_date", lambda: parse_form_date(self._due_var.get(), "due_date")),
            ("items", lambda: items_from_rows(self._row_values())),
            (
                "discount",
                lambda: discount_from_form(DISCOUNT_KINDS[self._discount_kind_var.get()], self._discount_var.get()),
            ),
        )
        for name, step in steps:
            try:
                parsed[name] = step()
            except ValidationError as exc:
                errors.update(exc.field_errors)
        if errors:
            raise ValidationError("Please fix the highlighted fields.", errors)

        customer_id = self._customer_ids.get(self._customer_var.get())
        return InvoiceDraft(
            issue_date=parsed["issue_date"],
            due_date=parsed["due_date"],
            items=parsed["items"],
            status=STATUSES.get(self._status_var.get(), InvoiceStatus.UNPAID),
            currency=self._currency_var.get().strip().upper(),
            discount=parsed["discount"],
            notes=self._notes.get("1.0", "end").strip(),
            terms=self._terms.get("1.0", "end").strip(),
            customer_id=customer_id,
            client=None if customer_id else self._client_form.data(),
        )

    def _handle_save(self) -> None:
        try:
            self._on_save(self._build_draft())
        except ValidationError as exc:
            self._client_form.show_errors(exc.field_errors)
            self._errors.set("\n".join(error_lines(exc.field_errors)) or exc.message)
            return
        except InvoiceDeskError as exc:
            logger.error("Creating invoice failed: %s", exc.to_dict())
            messagebox.showerror("New Invoice", exc.message, parent=self)
            return
        self.destroy()
