import tkinter as tk
from typing import Dict

import customtkinter as ctk

from invoice_desk.core.models.party import PartyKind, PartySnapshot
from invoice_desk.ui.styles import theme

# (field, label); company-only rows are hidden for individuals
COMPANY_FIELDS = (
    ("company_name", "Company name"),
    ("contact_name", "Contact person"),
    ("registration_id", "Registration ID"),
    ("vat_number", "VAT number"),
)
INDIVIDUAL_FIELDS = (("full_name", "Full name"),)
COMMON_FIELDS = (
    ("email", "Email"),
    ("phone", "Phone"),
    ("street", "Street"),
    ("city", "City"),
    ("postal", "Postal code"),
    ("country", "Country"),
    ("website", "Website"),
)
BANK_FIELDS = (
    ("bank_name", "Bank name"),
    ("bank_account", "Bank account"),
)


class PartyForm(ctk.CTkFrame):
    """
    Company / individual details with a type toggle and bound StringVars.
    Used for roster customers, one-off clients and the account profile.
    """

    def __init__(self, master: tk.Misc, title: str = "Client", with_bank: bool = False):
        super().__init__(master, fg_color=theme.PALETTE["panel"], corner_radius=8)
        self.columnconfigure(1, weight=1)

        self.kind = tk.StringVar(value=PartyKind.INDIVIDUAL.value)
        self.vars: Dict[str, tk.StringVar] = {}
        self._rows: Dict[str, tuple] = {}
        self._errors = tk.StringVar(value="")
        self._base = PartySnapshot()

        ctk.CTkLabel(self, text=title, font=("Segoe UI", 12, "bold")).grid(
            row=0, column=0, columnspan=2, sticky="w", padx=8, pady=(8, 4)
        )
        radios = ctk.CTkFrame(self, fg_color="transparent")
        radios.grid(row=1, column=0, columnspan=2, sticky="w", padx=8)
        for kind, label in ((PartyKind.INDIVIDUAL, "Individual"), (PartyKind.COMPANY, "Company")):
            ctk.CTkRadioButton(
                radios,
                text=label,
                variable=self.kind,
                value=kind.value,
                command=self._update_kind,
                fg_color=theme.PALETTE["accent"],
            ).pack(side="left", padx=(0, 12))

        fields = COMPANY_FIELDS + INDIVIDUAL_FIELDS + COMMON_FIELDS + (BANK_FIELDS if with_bank else ())
        for row, (name, label) in enumerate(fields, start=2):
            var = tk.StringVar()
            lbl = ctk.CTkLabel(self, text=label)
            lbl.grid(row=row, column=0, sticky="w", padx=8)
            entry = ctk.CTkEntry(
                self,
                textvariable=var,
                fg_color=theme.PALETTE["surface"],
                border_color=theme.PALETTE["border"],
                text_color=theme.PALETTE["text"],
            )
            entry.grid(row=row, column=1, sticky="ew", padx=(4, 8), pady=2)
            self.vars[name] = var
            self._rows[name] = (lbl, entry)

        ctk.CTkLabel(self, textvariable=self._errors, text_color=theme.PALETTE["danger"], justify="left").grid(
            row=len(fields) + 2, column=0, columnspan=2, sticky="w", padx=8, pady=(0, 8)
        )
        self._update_kind()

    def _update_kind(self) -> None:
        is_company = self.kind.get() == PartyKind.COMPANY.value
        for name, _label in COMPANY_FIELDS + INDIVIDUAL_FIELDS:
            shown = is_company == (name in dict(COMPANY_FIELDS))
            for widget in self._rows[name]:
                if shown:
                    widget.grid()
                else:
                    widget.grid_remove()

    def data(self) -> PartySnapshot:
        values = {name: var.get().strip() for name, var in self.vars.items()}
        # fields without an entry keep what was loaded
        return self._base.updated(kind=PartyKind.parse(self.kind.get()), **values)

    def set_data(self, party: PartySnapshot | None) -> None:
        party = party or PartySnapshot()
        self._base = party
        self.kind.set(party.kind.value)
        for name, var in self.vars.items():
            var.set(getattr(party, name))
        self._errors.set("")
        self._update_kind()

    def show_errors(self, field_errors: Dict[str, str]) -> None:
        """List the errors that belong to this form's fields."""
        mine = [message for name, message in field_errors.items() if name in self.vars]
        self._errors.set("\n".join(mine))
