import tkinter as tk

import customtkinter as ctk

from invoice_desk.ui.styles import icons, theme


class ActionsBar(ctk.CTkFrame):
    """
    Bottom bar. New invoice, customers and settings are always available;
    the per-invoice buttons stay disabled until an invoice is selected.
    """

    def __init__(
        self,
        master: tk.Misc,
        on_download,
        on_print,
        on_payment,
        on_mark_paid,
        on_refresh,
        on_new,
        on_customers,
        on_settings,
        row: int = 2,
    ):
        super().__init__(master, fg_color="transparent")
        self.grid(row=row, column=0, columnspan=2, sticky="ew", padx=8, pady=6)

        self._icons = icons.build_icons(theme.PALETTE["text"])
        self._accent_icons = icons.build_icons("#ffffff")

        self.refresh_btn = ctk.CTkButton(self, text="Refresh", command=on_refresh, image=self._icons["refresh"], compound="left")
        self.new_btn = ctk.CTkButton(
            self,
            text="New Invoice",
            command=on_new,
            image=self._accent_icons["new"],
            compound="left",
            **theme.accent_button_kwargs(theme.PALETTE),
        )
        self.new_btn.pack(side="left")
        self.customers_btn = ctk.CTkButton(self, text="Customers", command=on_customers)
        self.customers_btn.pack(side="left", padx=(6, 0))
        self.settings_btn = ctk.CTkButton(self, text="Settings", command=on_settings)
        self.settings_btn.pack(side="left", padx=(6, 0))
        self.refresh_btn.pack(side="left", padx=(6, 0))

        self.download_btn = ctk.CTkButton(
            self,
            text="Download PDF",
            command=on_download,
            image=self._accent_icons["download"],
            compound="left",
            **theme.accent_button_kwargs(theme.PALETTE),
        )
        self.download_btn.pack(side="right")

        self.print_btn = ctk.CTkButton(self, text="Print", command=on_print, image=self._icons["print"], compound="left")
        self.print_btn.pack(side="right", padx=(0, 6))

        self.payment_btn = ctk.CTkButton(
            self, text="Update Payment", command=on_payment, image=self._icons["payment"], compound="left"
        )
        self.payment_btn.pack(side="right", padx=(0, 6))

        self.paid_btn = ctk.CTkButton(self, text="Mark as Paid", command=on_mark_paid, image=self._icons["paid"], compound="left")
        self.paid_btn.pack(side="right", padx=(0, 6))

        self.set_enabled(False)

    def set_enabled(self, enabled: bool, paid: bool = False) -> None:
        state = "normal" if enabled else "disabled"
        for btn in (self.download_btn, self.print_btn, self.payment_btn):
            btn.configure(state=state)
        self.paid_btn.configure(state="normal" if enabled and not paid else "disabled")

    def set_busy(self, busy: bool) -> None:
        """Block the PDF buttons while a document is being generated."""
        state = "disabled" if busy else "normal"
        self.download_btn.configure(state=state, text="Generating..." if busy else "Download PDF")
        self.print_btn.configure(state=state)
