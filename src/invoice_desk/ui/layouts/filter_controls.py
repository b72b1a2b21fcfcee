import tkinter as tk

import customtkinter as ctk

from invoice_desk.ui.styles import theme

STATUS_OPTIONS = {"All statuses": "all", "Paid": "paid", "Unpaid": "unpaid"}
PERIOD_OPTIONS = {"All time": "all", "This month": "month", "Last 3 months": "quarter", "This year": "year"}


class FilterControls(ctk.CTkFrame):
    """
    Top panel: search box, status and period filters.
    `on_change()` fires whenever any of them changes.
    """

    def __init__(self, master: tk.Misc, on_change):
        super().__init__(master, fg_color="transparent")
        self.grid(row=0, column=0, columnspan=2, sticky="ew", padx=8, pady=(8, 0))
        self._on_change = on_change

        self._search_var = tk.StringVar(value="")
        ctk.CTkEntry(self, textvariable=self._search_var, placeholder_text="Search number or client", width=260).pack(side="left")
        self._search_var.trace_add("write", lambda *_: self._on_change())

        self._status_var = tk.StringVar(value="All statuses")
        self._period_var = tk.StringVar(value="All time")
        for var, options in ((self._period_var, PERIOD_OPTIONS), (self._status_var, STATUS_OPTIONS)):
            combo = ctk.CTkComboBox(
                self,
                values=list(options),
                variable=var,
                state="readonly",
                width=150,
                command=lambda _val: self._on_change(),
            )
            combo.pack(side="right", padx=(6, 0))
            theme.style_combo_box(combo, theme.PALETTE)

    @property
    def search(self) -> str:
        return self._search_var.get().strip()

    @property
    def status(self) -> str:
        return STATUS_OPTIONS.get(self._status_var.get(), "all")

    @property
    def period(self) -> str:
        return PERIOD_OPTIONS.get(self._period_var.get(), "all")
