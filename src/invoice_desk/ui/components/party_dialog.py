import tkinter as tk
from tkinter import messagebox
from typing import Callable

import customtkinter as ctk

from invoice_desk.core.models.party import PartySnapshot
from invoice_desk.exceptions import InvoiceDeskError, ValidationError
from invoice_desk.ui.layouts.party_form import PartyForm
from invoice_desk.ui.styles import theme


class PartyDialog(ctk.CTkToplevel):
    """Edit one customer. `on_save` raises ValidationError to keep the dialog open."""

    def __init__(self, master: tk.Misc, title: str, party: PartySnapshot | None, on_save: Callable[[PartySnapshot], None]):
        super().__init__(master)
        self.title(title)
        self.transient(master)
        self.grab_set()
        self.geometry("520x560")
        self.minsize(480, 480)
        self._on_save = on_save

        body = ctk.CTkScrollableFrame(self, fg_color="transparent")
        body.pack(fill="both", expand=True, padx=12, pady=12)

        self._form = PartyForm(body, title="Customer")
        self._form.pack(fill="both", expand=True)
        self._form.set_data(party)

        btns = ctk.CTkFrame(self, fg_color="transparent")
        btns.pack(fill="x", padx=12, pady=(0, 12))
        ctk.CTkButton(btns, text="Cancel", command=self.destroy).pack(side="right", padx=(6, 0))
        ctk.CTkButton(btns, text="Save", command=self._handle_save, **theme.accent_button_kwargs(theme.PALETTE)).pack(side="right")

    def _handle_save(self) -> None:
        try:
            self._on_save(self._form.data())
        except ValidationError as exc:
            if not exc.field_errors:
                messagebox.showwarning(self.title(), exc.message, parent=self)
            self._form.show_errors(exc.field_errors)
            return
        except InvoiceDeskError as exc:
            messagebox.showerror(self.title(), exc.message, parent=self)
            return
        self.destroy()
