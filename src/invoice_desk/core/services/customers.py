from __future__ import annotations

import logging
import uuid
from dataclasses import fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List

from invoice_desk import config
from invoice_desk.core.models.customer import Customer
from invoice_desk.core.models.party import PartyKind, PartySnapshot
from invoice_desk.core.services.storage import JsonStore
from invoice_desk.exceptions import CustomerNotFoundError, ValidationError

logger = logging.getLogger(__name__)

CUSTOMERS_FILE = "customers.json"
_PARTY_FIELDS = {f.name for f in fields(PartySnapshot)}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def _normalized(party: PartySnapshot) -> PartySnapshot:
    return party.updated(email=party.email.strip().lower())


class CustomerRepository:
    """Customer roster stored as a list in `customers.json`."""

    def __init__(self, data_dir: Path | None = None) -> None:
        self.store = JsonStore(Path(data_dir or config.DATA_DIR) / CUSTOMERS_FILE, default=[])

    def _load(self) -> List[Customer]:
        return [Customer.from_mapping(row) for row in self.store.load() or []]

    def _save(self, customers: List[Customer]) -> None:
        self.store.save([c.to_mapping() for c in customers])

    def list_customers(
        self,
        search: str = "",
        include_inactive: bool = False,
        page: int = 1,
        page_size: int = 10,
    ) -> tuple[List[Customer], int]:
        """Newest first. Returns (page rows, total matching)."""
        rows = list(reversed(self._load()))
        if not include_inactive:
            rows = [c for c in rows if c.is_active]
        term = (search or "").strip().lower()
        if term:
            rows = [
                c
                for c in rows
                if term in c.party.company_name.lower()
                or term in c.party.full_name.lower()
                or term in c.party.email.lower()
            ]
        rows.sort(key=lambda c: c.created_at, reverse=True)
        page = max(1, page)
        page_size = max(1, page_size)
        start = (page - 1) * page_size
        return rows[start : start + page_size], len(rows)

    def get_customer(self, customer_id: str) -> Customer:
        for customer in self._load():
            if customer.id == customer_id:
                return customer
        raise CustomerNotFoundError(customer_id)

    def add_customer(self, party: PartySnapshot, is_active: bool = True) -> Customer:
        if not party.email.strip():
            raise ValidationError("Customer email is required.", {"email": "Email is required."})
        now = _now()
        customer = Customer(
            id=uuid.uuid4().hex,
            party=_normalized(party),
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )
        customers = self._load()
        customers.append(customer)
        self._save(customers)
        logger.info("Added customer %s", customer.id)
        return customer

    def update_customer(self, customer_id: str, **changes: Any) -> Customer:
        """Apply party field changes (and `is_active`); unknown keys are rejected."""
        unknown = set(changes) - _PARTY_FIELDS - {"is_active"}
        if unknown:
            raise ValidationError(f"Unknown customer fields: {', '.join(sorted(unknown))}")
        customers = self._load()
        for customer in customers:
            if customer.id != customer_id:
                continue
            if "is_active" in changes:
                customer.is_active = bool(changes.pop("is_active"))
            if "kind" in changes:
                changes["kind"] = PartyKind.parse(changes["kind"], customer.party.kind)
            if changes:
                customer.party = _normalized(customer.party.updated(**changes))
            if not customer.party.email:
                raise ValidationError("Customer email is required.", {"email": "Email is required."})
            customer.updated_at = _now()
            self._save(customers)
            return customer
        raise CustomerNotFoundError(customer_id)

    def set_customer_active(self, customer_id: str, active: bool) -> Customer:
        return self.update_customer(customer_id, is_active=active)

    def delete_customer(self, customer_id: str) -> None:
        customers = self._load()
        remaining = [c for c in customers if c.id != customer_id]
        if len(remaining) == len(customers):
            raise CustomerNotFoundError(customer_id)
        self._save(remaining)
        logger.info("Deleted customer %s", customer_id)
