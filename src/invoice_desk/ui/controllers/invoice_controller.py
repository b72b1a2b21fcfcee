from __future__ import annotations

import logging
from pathlib import Path
from tkinter import filedialog, messagebox

from invoice_desk.core.models.invoice import PaymentMethod
from invoice_desk.core.services.customers import CustomerRepository
from invoice_desk.core.services.invoices import InvoiceDraft, InvoiceRepository
from invoice_desk.core.services.settings import SettingsRepository
from invoice_desk.exceptions import InvoiceDeskError, ValidationError
from invoice_desk.ui.components.customer_dialog import CustomerDialog
from invoice_desk.ui.components.invoice_dialog import InvoiceDialog
from invoice_desk.ui.components.payment_dialog import PaymentDialog
from invoice_desk.ui.components.settings_dialog import SettingsDialog
from invoice_desk.utils.pdf.exports import OutputAction, export_invoice
from invoice_desk.utils.pdf.renderers.pdf_renderer import invoice_filename

logger = logging.getLogger(__name__)

PAGE_SIZE = 50


class InvoiceController:
    """
    Handles list queries, invoice creation, PDF download/print, payment
    updates and the customer and settings dialogs for the main window.
    Repositories are injected so the window holds no data itself.
    """

    def __init__(
        self,
        window,
        invoices: InvoiceRepository,
        settings: SettingsRepository,
        customers: CustomerRepository,
    ) -> None:
        self.w = window
        self.invoices = invoices
        self.settings = settings
        self.customers = customers
        self._sort_by = "issue_date"
        self._sort_dir = "desc"
        self._selected: str | None = None
        self._busy = False

    # --- list ---
    def refresh(self) -> None:
        try:
            rows, total = self.invoices.list_invoices(
                search=self.w.filters.search,
                status=self.w.filters.status,
                period=self.w.filters.period,
                page_size=PAGE_SIZE,
                sort_by=self._sort_by,
                sort=self._sort_dir,
            )
        except InvoiceDeskError as exc:
            messagebox.showerror("Invoices", exc.message)
            return
        self.w.table.set_rows(rows)
        self.w.set_count(len(rows), total)
        self.on_select(self._selected)

    def on_sort(self, key: str) -> None:
        if self._sort_by == key:
            self._sort_dir = "asc" if self._sort_dir == "desc" else "desc"
        else:
            self._sort_by, self._sort_dir = key, "desc"
        self.refresh()

    def on_select(self, invoice_id: str | None) -> None:
        doc = self.invoices.get_invoice(invoice_id) if invoice_id else None
        self._selected = doc.id if doc else None
        if doc is None:
            self.w.detail.clear()
            self.w.actions.set_enabled(False)
            return
        self.w.detail.show(doc)
        self.w.actions.set_enabled(True, paid=doc.is_paid)

    # --- create ---
    def new_invoice(self) -> None:
        def save(draft: InvoiceDraft) -> None:
            self._selected = self.invoices.create_invoice(draft)
            self.refresh()

        try:
            InvoiceDialog(self.w, self.settings, self.customers, on_save=save)
        except InvoiceDeskError as exc:
            messagebox.showerror("New Invoice", exc.message)

    # --- roster and settings ---
    def manage_customers(self) -> None:
        CustomerDialog(self.w, self.customers)

    def edit_settings(self) -> None:
        try:
            SettingsDialog(self.w, self.settings)
        except InvoiceDeskError as exc:
            messagebox.showerror("Settings", exc.message)

    # --- documents ---
    def download_pdf(self) -> None:
        doc = self._selected_doc()
        if doc is None:
            return
        path = filedialog.asksaveasfilename(
            defaultextension=".pdf",
            filetypes=[("PDF", "*.pdf"), ("All files", "*.*")],
            title="Download PDF",
            initialfile=invoice_filename(doc),
        )
        if not path:
            return
        self._export(OutputAction.DOWNLOAD, Path(path))

    def print_pdf(self) -> None:
        if self._selected_doc() is not None:
            self._export(OutputAction.PRINT)

    def _export(self, action: OutputAction, target: Path | None = None) -> None:
        if self._busy:
            return
        self._busy = True
        self.w.actions.set_busy(True)
        self.w.update_idletasks()
        try:
            out_path, rendered = export_invoice(self._selected, self.invoices, self.settings, action=action, target=target)
        except InvoiceDeskError as exc:
            logger.error("PDF export failed: %s", exc.to_dict())
            messagebox.showerror("PDF Error", exc.message)
            return
        finally:
            self._busy = False
            self.w.actions.set_busy(False)

        note = ""
        if rendered.warnings:
            note = "\n\n" + "\n".join(rendered.warnings)
        if action is OutputAction.DOWNLOAD:
            messagebox.showinfo("PDF Downloaded", f"{rendered.filename} has been saved to\n{out_path}{note}")
        elif note:
            messagebox.showwarning("Print", f"Sent to the printer with warnings:{note}")

    # --- payments ---
    def update_payment(self) -> None:
        doc = self._selected_doc()
        if doc is None:
            return

        def save(method: PaymentMethod, amount: float) -> bool:
            try:
                self.invoices.update_invoice_payment(doc.id, method, amount)
            except ValidationError as exc:
                messagebox.showwarning("Update Payment", exc.message)
                return False
            except InvoiceDeskError as exc:
                messagebox.showerror("Update Payment", exc.message)
                return False
            self.refresh()
            return True

        PaymentDialog(self.w, doc, on_save=save)

    def mark_paid(self) -> None:
        doc = self._selected_doc()
        if doc is None or doc.is_paid:
            return
        if not messagebox.askyesno("Mark as Paid", f"Mark {doc.number} as paid in full?"):
            return
        try:
            self.invoices.mark_invoice_paid(doc.id)
        except InvoiceDeskError as exc:
            messagebox.showerror("Mark as Paid", exc.message)
            return
        self.refresh()

    def _selected_doc(self):
        if not self._selected:
            return None
        doc = self.invoices.get_invoice(self._selected)
        if doc is None:
            messagebox.showerror("Invoices", "Invoice not found.")
            self.refresh()
        return doc
