import logging
import tkinter as tk
from tkinter import messagebox
from typing import Dict

import customtkinter as ctk

from invoice_desk.core.models.party import Branding
from invoice_desk.core.services.settings import SettingsRepository, preferences_from_form
from invoice_desk.exceptions import InvoiceDeskError, ValidationError
from invoice_desk.ui.layouts.party_form import PartyForm
from invoice_desk.ui.styles import theme

logger = logging.getLogger(__name__)

PREFERENCE_FIELDS = (
    ("currency", "Currency"),
    ("number_prefix", "Number prefix"),
    ("number_padding", "Number padding"),
    ("next_number", "Next number"),
    ("payment_terms", "Payment terms (days)"),
    ("default_notes", "Default notes"),
    ("default_terms", "Default terms"),
    ("accent_color", "Accent color"),
)
BRANDING_FIELDS = (
    ("logo_url", "Logo (URL or file)"),
    ("brand_color", "Brand color"),
    ("company_name", "Company name"),
    ("address1", "Address line 1"),
    ("address2", "Address line 2"),
    ("website", "Website"),
    ("phone", "Phone"),
    ("email", "Email"),
)


def _entry_grid(master: tk.Misc, fields, values: Dict[str, str]) -> Dict[str, tk.StringVar]:
    master.columnconfigure(1, weight=1)
    out: Dict[str, tk.StringVar] = {}
    for row, (name, label) in enumerate(fields):
        ctk.CTkLabel(master, text=label).grid(row=row, column=0, sticky="w", padx=8)
        var = tk.StringVar(value=str(values.get(name, "")))
        ctk.CTkEntry(master, textvariable=var).grid(row=row, column=1, sticky="ew", padx=(4, 8), pady=2)
        out[name] = var
    return out


class SettingsDialog(ctk.CTkToplevel):
    """Business profile, invoice numbering defaults and PDF branding, saved together."""

    def __init__(self, master: tk.Misc, settings: SettingsRepository, on_saved=None):
        super().__init__(master)
        self.title("Settings")
        self.transient(master)
        self.grab_set()
        self.geometry("560x620")
        self.minsize(500, 520)
        self._settings = settings
        self._on_saved = on_saved or (lambda: None)

        tabs = ctk.CTkTabview(self)
        tabs.pack(fill="both", expand=True, padx=12, pady=(12, 6))
        profile_tab = ctk.CTkScrollableFrame(tabs.add("Profile"), fg_color="transparent")
        profile_tab.pack(fill="both", expand=True)
        prefs_tab = tabs.add("Invoicing")
        branding_tab = tabs.add("Branding")

        self._profile = PartyForm(profile_tab, title="Business profile", with_bank=True)
        self._profile.pack(fill="both", expand=True)
        self._profile.set_data(settings.fetch_profile())
        self._prefs = _entry_grid(prefs_tab, PREFERENCE_FIELDS, settings.fetch_preferences().to_mapping())
        branding = settings.fetch_branding() or Branding()
        self._branding = _entry_grid(branding_tab, BRANDING_FIELDS, branding.to_mapping())

        self._errors = tk.StringVar(value="")
        ctk.CTkLabel(self, textvariable=self._errors, text_color=theme.PALETTE["danger"], justify="left").pack(
            anchor="w", padx=12
        )

        btns = ctk.CTkFrame(self, fg_color="transparent")
        btns.pack(fill="x", padx=12, pady=(0, 12))
        ctk.CTkButton(btns, text="Cancel", command=self.destroy).pack(side="right", padx=(6, 0))
        ctk.CTkButton(btns, text="Save", command=self._handle_save, **theme.accent_button_kwargs(theme.PALETTE)).pack(side="right")

    def _handle_save(self) -> None:
        try:
            prefs = preferences_from_form({name: var.get() for name, var in self._prefs.items()})
        except ValidationError as exc:
            labels = dict(PREFERENCE_FIELDS)
            self._errors.set("\n".join(f"{labels.get(k, k)}: {msg}" for k, msg in exc.field_errors.items()))
            return
        branding = Branding.from_mapping({name: var.get() for name, var in self._branding.items()})
        try:
            self._settings.save_profile(self._profile.data())
            self._settings.save_preferences(prefs)
            self._settings.save_branding(branding)
        except InvoiceDeskError as exc:
            logger.error("Saving settings failed: %s", exc.to_dict())
            messagebox.showerror("Settings", exc.message, parent=self)
            return
        logger.info("Settings saved")
        self._on_saved()
        self.destroy()
