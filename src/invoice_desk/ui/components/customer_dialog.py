import logging
import tkinter as tk
from tkinter import messagebox, ttk

import customtkinter as ctk

from invoice_desk.core.models.party import PartySnapshot
from invoice_desk.core.services.customers import CustomerRepository
from invoice_desk.exceptions import InvoiceDeskError
from invoice_desk.ui.components.party_dialog import PartyDialog
from invoice_desk.ui.styles import theme

logger = logging.getLogger(__name__)

PAGE_SIZE = 200

COLUMNS = {
    "name": ("Name", 200, "w"),
    "email": ("Email", 200, "w"),
    "phone": ("Phone", 120, "w"),
    "status": ("Status", 80, "center"),
}


class CustomerDialog(ctk.CTkToplevel):
    """Customer roster: search, add, edit, (de)activate and delete."""

    def __init__(self, master: tk.Misc, customers: CustomerRepository, on_change=None):
        super().__init__(master)
        self.title("Customers")
        self.transient(master)
        self.grab_set()
        self.geometry("720x480")
        self.minsize(600, 380)
        self._customers = customers
        self._on_change = on_change or (lambda: None)

        top = ctk.CTkFrame(self, fg_color="transparent")
        top.pack(fill="x", padx=12, pady=(12, 6))
        self._search_var = tk.StringVar(value="")
        ctk.CTkEntry(top, textvariable=self._search_var, placeholder_text="Search name or email", width=260).pack(side="left")
        self._search_var.trace_add("write", lambda *_: self.refresh())
        self._inactive_var = tk.BooleanVar(value=False)
        ctk.CTkCheckBox(
            top,
            text="Show inactive",
            variable=self._inactive_var,
            command=self.refresh,
            fg_color=theme.PALETTE["accent"],
        ).pack(side="left", padx=(12, 0))
        self._count_var = tk.StringVar(value="")
        ctk.CTkLabel(top, textvariable=self._count_var, text_color=theme.PALETTE["muted"]).pack(side="right")

        table = ttk.Frame(self, padding=(12, 0))
        table.pack(fill="both", expand=True)
        tree = ttk.Treeview(table, columns=tuple(COLUMNS), show="headings", selectmode="browse")
        for col, (heading, width, anchor) in COLUMNS.items():
            tree.heading(col, text=heading)
            tree.column(col, width=width, anchor=anchor)
        tree.tag_configure("inactive", foreground=theme.PALETTE["muted"])
        tree.pack(side="left", fill="both", expand=True)
        scrollbar = ttk.Scrollbar(table, orient="vertical", command=tree.yview)
        scrollbar.pack(side="right", fill="y")
        tree.configure(yscrollcommand=scrollbar.set)
        tree.bind("<Double-1>", lambda _e: self._edit())
        self._tree = tree

        btns = ctk.CTkFrame(self, fg_color="transparent")
        btns.pack(fill="x", padx=12, pady=12)
        ctk.CTkButton(btns, text="Close", command=self.destroy).pack(side="right")
        ctk.CTkButton(btns, text="Add", command=self._add, **theme.accent_button_kwargs(theme.PALETTE)).pack(side="left")
        ctk.CTkButton(btns, text="Edit", command=self._edit).pack(side="left", padx=(6, 0))
        ctk.CTkButton(btns, text="Activate / Deactivate", command=self._toggle_active).pack(side="left", padx=(6, 0))
        ctk.CTkButton(btns, text="Delete", command=self._delete, fg_color=theme.PALETTE["danger"]).pack(side="left", padx=(6, 0))

        self.refresh()

    def refresh(self) -> None:
        try:
            rows, total = self._customers.list_customers(
                search=self._search_var.get(),
                include_inactive=self._inactive_var.get(),
                page_size=PAGE_SIZE,
            )
        except InvoiceDeskError as exc:
            messagebox.showerror("Customers", exc.message, parent=self)
            return
        self._tree.delete(*self._tree.get_children())
        for customer in rows:
            self._tree.insert(
                "",
                tk.END,
                iid=customer.id,
                values=(
                    customer.display_name,
                    customer.party.email,
                    customer.party.phone,
                    "Active" if customer.is_active else "Inactive",
                ),
                tags=() if customer.is_active else ("inactive",),
            )
        self._count_var.set(f"{total} customers")

    def _selected_id(self) -> str | None:
        selection = self._tree.selection()
        return selection[0] if selection else None

    def _changed(self) -> None:
        self.refresh()
        self._on_change()

    def _add(self) -> None:
        def save(party: PartySnapshot) -> None:
            self._customers.add_customer(party)
            self._changed()

        PartyDialog(self, "New Customer", None, on_save=save)

    def _edit(self) -> None:
        customer_id = self._selected_id()
        if not customer_id:
            return
        try:
            customer = self._customers.get_customer(customer_id)
        except InvoiceDeskError as exc:
            messagebox.showerror("Customers", exc.message, parent=self)
            self.refresh()
            return

        def save(party: PartySnapshot) -> None:
            changes = party.to_mapping()
            changes["kind"] = changes.pop("type")
            self._customers.update_customer(customer_id, **changes)
            self._changed()

        PartyDialog(self, f"Edit {customer.display_name}", customer.party, on_save=save)

    def _toggle_active(self) -> None:
        customer_id = self._selected_id()
        if not customer_id:
            return
        try:
            customer = self._customers.get_customer(customer_id)
            self._customers.set_customer_active(customer_id, not customer.is_active)
        except InvoiceDeskError as exc:
            messagebox.showerror("Customers", exc.message, parent=self)
            return
        self._changed()

    def _delete(self) -> None:
        customer_id = self._selected_id()
        if not customer_id:
            return
        if not messagebox.askyesno("Delete Customer", "Delete this customer? Existing invoices keep their copy.", parent=self):
            return
        try:
            self._customers.delete_customer(customer_id)
        except InvoiceDeskError as exc:
            messagebox.showerror("Customers", exc.message, parent=self)
            return
        logger.debug("Customer %s removed from the roster", customer_id)
        self._changed()
