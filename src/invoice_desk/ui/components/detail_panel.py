import tkinter as tk

import customtkinter as ctk

from invoice_desk.core.calculations.totals_engine import compute_totals
from invoice_desk.core.models.invoice import InvoiceDocument
from invoice_desk.ui.styles import theme
from invoice_desk.utils.formatting import format_date, format_money


class DetailPanel(ctk.CTkFrame):
    """Totals and payment state of the selected invoice."""

    _FIELDS = (
        ("client", "Client"),
        ("dates", "Issued / Due"),
        ("subtotal", "Subtotal"),
        ("tax", "Tax"),
        ("discount", "Discount"),
        ("total", "Total"),
        ("paid", "Amount Paid"),
        ("due", "Amount Due"),
        ("method", "Payment Method"),
    )

    def __init__(self, master: tk.Misc):
        super().__init__(master, fg_color=theme.PALETTE["panel"], corner_radius=8)
        self._title_var = tk.StringVar(value="No invoice selected")
        self._status_var = tk.StringVar(value="")
        self._vars = {key: tk.StringVar(value="") for key, _ in self._FIELDS}

        ctk.CTkLabel(self, textvariable=self._title_var, font=("Segoe UI", 14, "bold")).grid(
            row=0, column=0, sticky="w", padx=12, pady=(10, 0)
        )
        self._status_label = ctk.CTkLabel(self, textvariable=self._status_var, font=("Segoe UI", 11, "bold"))
        self._status_label.grid(row=0, column=1, sticky="e", padx=12, pady=(10, 0))

        for idx, (key, label) in enumerate(self._FIELDS, start=1):
            bold = key == "total"
            font = ("Segoe UI", 12, "bold") if bold else ("Segoe UI", 10)
            ctk.CTkLabel(self, text=label, font=font).grid(row=idx, column=0, sticky="w", padx=12)
            value = ctk.CTkLabel(self, textvariable=self._vars[key], font=font)
            value.grid(row=idx, column=1, sticky="e", padx=12)
            if key == "due":
                self._due_label = value

        for col in range(2):
            self.columnconfigure(col, weight=1)

    def clear(self) -> None:
        self._title_var.set("No invoice selected")
        self._status_var.set("")
        for var in self._vars.values():
            var.set("")

    def show(self, doc: InvoiceDocument) -> None:
        totals = compute_totals(doc.items, doc.discount)
        cur = doc.currency
        self._title_var.set(doc.number or doc.id)
        self._status_var.set(doc.status.label)
        self._status_label.configure(text_color=theme.PALETTE["success" if doc.is_paid else "danger"])
        self._vars["client"].set(doc.bill_to.display_name or "—")
        self._vars["dates"].set(f"{format_date(doc.issue_date)} / {format_date(doc.due_date)}")
        self._vars["subtotal"].set(format_money(totals.subtotal, cur))
        self._vars["tax"].set(format_money(totals.tax_total, cur))
        self._vars["discount"].set("-" + format_money(totals.discount_amount, cur) if totals.discount_amount > 0 else "")
        self._vars["total"].set(format_money(totals.total, cur))
        self._vars["paid"].set(format_money(doc.amount_paid, cur))
        self._vars["due"].set(format_money(doc.amount_due, cur))
        self._vars["method"].set(doc.payment_method.value if doc.payment_method else "")
        self._due_label.configure(text_color=theme.PALETTE["danger" if doc.amount_due > 0 else "text"])
