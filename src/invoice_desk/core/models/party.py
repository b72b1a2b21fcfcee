from __future__ import annotations

import re
from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any, Mapping

from invoice_desk.utils.coerce import clean_str


class PartyKind(str, Enum):
    COMPANY = "company"
    INDIVIDUAL = "individual"

    @classmethod
    def parse(cls, value: Any, default: "PartyKind" = None) -> "PartyKind":
        raw = clean_str(value).lower()
        for kind in cls:
            if kind.value == raw:
                return kind
        return default or cls.INDIVIDUAL


_SNAPSHOT_FIELDS = (
    "company_name",
    "contact_name",
    "full_name",
    "email",
    "phone",
    "street",
    "city",
    "postal",
    "country",
    "address_line_1",
    "address_line_2",
    "registration_id",
    "vat_number",
    "website",
    "logo_url",
    "bank_name",
    "bank_account",
)


@dataclass(frozen=True)
class PartySnapshot:
    """
    Point-in-time copy of a party's identifying details.

    Used for the sender, the bill-to party and the account's own profile
    (the fallback used when an invoice's sender snapshot is incomplete).
    Bank details only make sense on the sender/profile side.
    """

    kind: PartyKind = PartyKind.INDIVIDUAL
    company_name: str = ""
    contact_name: str = ""
    full_name: str = ""
    email: str = ""
    phone: str = ""
    street: str = ""
    city: str = ""
    postal: str = ""
    country: str = ""
    address_line_1: str = ""
    address_line_2: str = ""
    registration_id: str = ""
    vat_number: str = ""
    website: str = ""
    logo_url: str = ""
    bank_name: str = ""
    bank_account: str = ""

    @property
    def display_name(self) -> str:
        if self.kind is PartyKind.COMPANY:
            return self.company_name
        return self.full_name

    def composed_address(self, separator: str = " • ") -> str:
        """street, "city, postal" and country joined; empty parts are skipped."""
        city_postal = ", ".join(p for p in (self.city, self.postal) if p)
        return separator.join(p for p in (self.street, city_postal, self.country) if p)

    def is_empty(self) -> bool:
        return not any(getattr(self, name) for name in _SNAPSHOT_FIELDS)

    def updated(self, **changes: Any) -> "PartySnapshot":
        return replace(self, **changes)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None, default_kind: PartyKind = PartyKind.INDIVIDUAL) -> "PartySnapshot":
        data = data or {}
        kind = PartyKind.parse(data.get("type", data.get("account_type", data.get("kind"))), default_kind)
        values = {name: clean_str(data.get(name)) for name in _SNAPSHOT_FIELDS}
        if not values["bank_account"]:
            values["bank_account"] = clean_str(data.get("bank_acc_num"))
        return cls(kind=kind, **values)

    def to_mapping(self) -> dict:
        data = asdict(self)
        data["type"] = self.kind.value
        del data["kind"]
        return data


_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{3})$")


@dataclass(frozen=True)
class Branding:
    """Presentation-only overrides layered over the sender at render time."""

    logo_url: str = ""
    brand_color: str = ""
    company_name: str = ""
    address1: str = ""
    address2: str = ""
    website: str = ""
    phone: str = ""
    email: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "Branding":
        data = data or {}
        return cls(
            logo_url=clean_str(data.get("logo_url", data.get("logoUrl"))),
            brand_color=clean_str(data.get("brand_color", data.get("brandColor"))),
            company_name=clean_str(data.get("company_name", data.get("companyName"))),
            address1=clean_str(data.get("address1")),
            address2=clean_str(data.get("address2")),
            website=clean_str(data.get("website")),
            phone=clean_str(data.get("phone")),
            email=clean_str(data.get("email")),
        )

    def to_mapping(self) -> dict:
        return asdict(self)


def parse_hex_color(value: str) -> tuple[float, float, float] | None:
    """'#0F172A' -> (r, g, b) in 0-1 space; None when the value is not a hex color."""
    match = _HEX_COLOR.match(clean_str(value))
    if not match:
        return None
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return tuple(int(digits[i : i + 2], 16) / 255.0 for i in (0, 2, 4))  # type: ignore[return-value]
