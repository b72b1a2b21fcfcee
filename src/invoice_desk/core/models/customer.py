from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from invoice_desk.core.models.party import PartySnapshot
from invoice_desk.utils.coerce import clean_str


@dataclass
class Customer:
    """Roster entry. `party` is copied into invoices as the bill-to snapshot."""

    id: str
    party: PartySnapshot = field(default_factory=PartySnapshot)
    is_active: bool = True
    created_at: str = ""
    updated_at: str = ""

    @property
    def display_name(self) -> str:
        return self.party.display_name or self.party.contact_name or self.party.email

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Customer":
        return cls(
            id=clean_str(data.get("id")),
            party=PartySnapshot.from_mapping(data),
            is_active=bool(data.get("is_active", True)),
            created_at=clean_str(data.get("created_at")),
            updated_at=clean_str(data.get("updated_at")),
        )

    def to_mapping(self) -> dict:
        data = self.party.to_mapping()
        data.update(
            {
                "id": self.id,
                "is_active": self.is_active,
                "created_at": self.created_at,
                "updated_at": self.updated_at,
            }
        )
        return data
