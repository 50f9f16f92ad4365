"""Customer lookups and registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..core import NotFoundError, new_id, utcnow
from . import schemas

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..store import EntityStore


class CustomerService:
    def __init__(self, store: EntityStore) -> None:
        self._store = store

    def list_customers(
        self, tiers: list[str] | None = None
    ) -> list[schemas.Customer]:
        items = self._store.customers.list()
        if tiers:
            items = [c for c in items if c.tier.value in tiers]
        return items

    def get_customer(self, customer_id: str) -> schemas.Customer:
        customer = self._store.customers.get(customer_id)
        if customer is None:
            raise NotFoundError("Customer", customer_id)
        return customer

    def create_customer(
        self, payload: schemas.CustomerCreate, *, customer_id: str | None = None
    ) -> schemas.Customer:
        customer = schemas.Customer(
            id=customer_id or new_id("cust"),
            name=payload.name,
            email=payload.email,
            company=payload.company,
            tier=payload.tier,
            created_at=utcnow(),
        )
        return self._store.customers.save(customer)

    def ensure_customer(
        self,
        customer_id: str | None,
        *,
        name: str | None = None,
        email: str | None = None,
    ) -> schemas.Customer:
        """Return the referenced customer, registering it when unknown."""

        if customer_id:
            existing = self._store.customers.get(customer_id)
            if existing is not None:
                return existing
        payload = schemas.CustomerCreate(name=name or "Unknown Customer", email=email)
        return self.create_customer(payload, customer_id=customer_id)
