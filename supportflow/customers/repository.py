"""Storage for customer records."""
from __future__ import annotations

from typing import Dict, List, Optional, Protocol

from . import schemas


class CustomerRepository(Protocol):
    """Abstraction for persisting customers."""

    def get(self, customer_id: str) -> Optional[schemas.Customer]: ...

    def save(self, customer: schemas.Customer) -> schemas.Customer: ...

    def list(self) -> List[schemas.Customer]: ...


class InMemoryCustomerRepository:
    """Process-local implementation of :class:`CustomerRepository`."""

    def __init__(self) -> None:
        self._customers: Dict[str, schemas.Customer] = {}

    def get(self, customer_id: str) -> Optional[schemas.Customer]:
        customer = self._customers.get(customer_id)
        return customer.model_copy(deep=True) if customer else None

    def save(self, customer: schemas.Customer) -> schemas.Customer:
        self._customers[customer.id] = customer.model_copy(deep=True)
        return customer

    def list(self) -> List[schemas.Customer]:
        return [c.model_copy(deep=True) for c in self._customers.values()]
