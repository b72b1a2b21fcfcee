import tkinter as tk

import customtkinter as ctk

from invoice_desk.core.services.customers import CustomerRepository
from invoice_desk.core.services.invoices import InvoiceRepository
from invoice_desk.core.services.settings import SettingsRepository
from invoice_desk.ui.components.detail_panel import DetailPanel
from invoice_desk.ui.components.invoice_table import InvoiceTable
from invoice_desk.ui.controllers.invoice_controller import InvoiceController
from invoice_desk.ui.layouts.actions_bar import ActionsBar
from invoice_desk.ui.layouts.filter_controls import FilterControls
from invoice_desk.ui.styles import theme


class MainWindow(ctk.CTk):
    def __init__(
        self,
        invoices: InvoiceRepository,
        settings: SettingsRepository,
        customers: CustomerRepository,
        theme_name: str = "light",
    ):
        super().__init__()
        self._palette = theme.apply_theme(self, theme_name)
        self._title_base = "Invoices"
        self.title(self._title_base)
        self.geometry("1100x640")
        self.minsize(900, 520)

        self.columnconfigure(0, weight=1)
        self.rowconfigure(1, weight=1)

        self._controller = InvoiceController(self, invoices, settings, customers)

        self.filters = FilterControls(self, on_change=self._controller.refresh)

        self.table = InvoiceTable(self, on_select=self._controller.on_select, on_sort=self._controller.on_sort)
        self.table.grid(row=1, column=0, sticky="nsew")

        side = ctk.CTkFrame(self, fg_color="transparent")
        side.grid(row=1, column=1, sticky="ns", padx=(0, 8), pady=8)
        self.detail = DetailPanel(side)
        self.detail.pack(fill="x")
        self._count_var = tk.StringVar(value="")
        ctk.CTkLabel(side, textvariable=self._count_var, text_color=self._palette["muted"]).pack(anchor="w", pady=(8, 0))

        self.actions = ActionsBar(
            self,
            on_download=self._controller.download_pdf,
            on_print=self._controller.print_pdf,
            on_payment=self._controller.update_payment,
            on_mark_paid=self._controller.mark_paid,
            on_refresh=self._controller.refresh,
            on_new=self._controller.new_invoice,
            on_customers=self._controller.manage_customers,
            on_settings=self._controller.edit_settings,
            row=2,
        )

        self._controller.refresh()

    def set_count(self, shown: int, total: int) -> None:
        self._count_var.set(f"Showing {shown} of {total} invoices")
        self.title(f"{self._title_base} ({total})")
