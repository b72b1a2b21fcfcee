from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Dict, Mapping

from invoice_desk import config
from invoice_desk.core.models.party import Branding, PartyKind, PartySnapshot, parse_hex_color
from invoice_desk.core.models.preferences import Preferences
from invoice_desk.core.services.storage import JsonStore
from invoice_desk.exceptions import StorageError, ValidationError
from invoice_desk.utils.coerce import clean_str, safe_float

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.json"


def _whole(values: Mapping[str, str], key: str, minimum: int, errors: Dict[str, str]) -> int:
    number = safe_float(values.get(key), default=float("nan"))
    if math.isnan(number) or number < minimum or number != int(number):
        errors[key] = f"Enter a whole number of at least {minimum}."
        return minimum
    return int(number)


def preferences_from_form(values: Mapping[str, str]) -> Preferences:
    """Build preferences from the settings form, rejecting every bad field at once."""
    errors: Dict[str, str] = {}
    prefs = Preferences(
        currency=clean_str(values.get("currency")).upper(),
        number_prefix=clean_str(values.get("number_prefix")),
        number_padding=_whole(values, "number_padding", 0, errors),
        next_number=_whole(values, "next_number", 1, errors),
        payment_terms=_whole(values, "payment_terms", 0, errors),
        default_notes=clean_str(values.get("default_notes")),
        default_terms=clean_str(values.get("default_terms")),
        accent_color=clean_str(values.get("accent_color")),
    )
    if not prefs.currency:
        errors["currency"] = "Currency is required."
    if not prefs.number_prefix:
        errors["number_prefix"] = "Prefix is required."
    if prefs.accent_color and parse_hex_color(prefs.accent_color) is None:
        errors["accent_color"] = "Use a hex color such as #0F172A."
    if errors:
        raise ValidationError("Please fix the highlighted fields.", errors)
    return prefs


class SettingsRepository:
    """
    Account-level settings kept in one file:
    `{"profile": {...}, "preferences": {...}, "branding": {...}}`.
    """

    def __init__(self, data_dir: Path | None = None) -> None:
        self.store = JsonStore(Path(data_dir or config.DATA_DIR) / SETTINGS_FILE, default={})

    def _section(self, key: str) -> dict:
        data = self.store.load()
        section = data.get(key) if isinstance(data, dict) else None
        return section if isinstance(section, dict) else {}

    def _save_section(self, key: str, value: dict) -> None:
        data = self.store.load()
        if not isinstance(data, dict):
            data = {}
        data[key] = value
        self.store.save(data)

    def fetch_profile(self) -> PartySnapshot:
        return PartySnapshot.from_mapping(self._section("profile"), PartyKind.COMPANY)

    def save_profile(self, profile: PartySnapshot) -> None:
        self._save_section("profile", profile.to_mapping())

    def fetch_preferences(self) -> Preferences:
        return Preferences.from_mapping(self._section("preferences"))

    def save_preferences(self, prefs: Preferences) -> None:
        self._save_section("preferences", prefs.to_mapping())

    def fetch_branding(self) -> Branding | None:
        """Best effort: an unreadable settings file means no branding."""
        try:
            section = self._section("branding")
        except StorageError as exc:
            logger.warning("Branding unavailable: %s", exc)
            return None
        return Branding.from_mapping(section) if section else None

    def save_branding(self, branding: Branding) -> None:
        self._save_section("branding", branding.to_mapping())
