import math
import tkinter as tk
from tkinter import messagebox
from typing import Callable

import customtkinter as ctk

from invoice_desk.core.calculations.totals_engine import compute_totals
from invoice_desk.core.models.invoice import InvoiceDocument, PaymentMethod
from invoice_desk.ui.styles import theme
from invoice_desk.utils.coerce import safe_float
from invoice_desk.utils.formatting import format_money


class PaymentDialog(ctk.CTkToplevel):
    """Ask for a payment method and the amount paid so far."""

    def __init__(self, master: tk.Misc, doc: InvoiceDocument, on_save: Callable[[PaymentMethod, float], bool]):
        super().__init__(master)
        self.title(f"Update Payment - {doc.number}")
        self.transient(master)
        self.grab_set()
        self.geometry("380x230")
        self.resizable(False, False)
        self._on_save = on_save
        self._total = compute_totals(doc.items, doc.discount).total

        body = ctk.CTkFrame(self, fg_color="transparent")
        body.pack(fill="both", expand=True, padx=14, pady=12)

        ctk.CTkLabel(body, text=f"Invoice total: {format_money(self._total, doc.currency)}", font=("Segoe UI", 11, "bold")).grid(
            row=0, column=0, columnspan=2, sticky="w", pady=(0, 8)
        )

        ctk.CTkLabel(body, text="Payment method").grid(row=1, column=0, sticky="w")
        methods = [m.value for m in PaymentMethod]
        self._method_var = tk.StringVar(value=(doc.payment_method or PaymentMethod.CASH).value)
        combo = ctk.CTkComboBox(body, values=methods, variable=self._method_var, state="readonly", width=180)
        combo.grid(row=1, column=1, sticky="e", pady=4)
        theme.style_combo_box(combo, theme.PALETTE)

        ctk.CTkLabel(body, text="Amount paid").grid(row=2, column=0, sticky="w")
        self._amount_var = tk.StringVar(value=f"{doc.amount_paid:.2f}")
        ctk.CTkEntry(body, textvariable=self._amount_var, width=180, justify="right").grid(row=2, column=1, sticky="e", pady=4)
        body.columnconfigure(1, weight=1)

        btns = ctk.CTkFrame(self, fg_color="transparent")
        btns.pack(fill="x", padx=14, pady=(0, 12))
        ctk.CTkButton(btns, text="Cancel", command=self.destroy).pack(side="right", padx=(6, 0))
        ctk.CTkButton(btns, text="Save", command=self._handle_save, **theme.accent_button_kwargs(theme.PALETTE)).pack(side="right")

    def _handle_save(self) -> None:
        raw = (self._amount_var.get() or "").strip()
        amount = safe_float(raw, default=float("nan"))
        if math.isnan(amount):
            messagebox.showwarning("Update Payment", "Enter a valid amount.", parent=self)
            return
        method = PaymentMethod.parse(self._method_var.get()) or PaymentMethod.CASH
        if self._on_save(method, amount):
            self.destroy()
