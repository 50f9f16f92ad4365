"""Wiring of the entity store and the services that operate on it."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from .conversations.service import ConversationService
from .core import Settings, get_settings
from .customers.service import CustomerService
from .resolutions.service import ResolutionService
from .security.auth import AuthService
from .seed import seed_sample_data, seed_users
from .store import EntityStore


@dataclass
class Services:
    settings: Settings
    store: EntityStore
    customers: CustomerService
    conversations: ConversationService
    resolutions: ResolutionService
    auth: AuthService
    started_at: float = field(default_factory=time.monotonic)

    @property
    def uptime(self) -> float:
        return round(time.monotonic() - self.started_at, 3)


def build_services(
    settings: Settings | None = None, *, store: EntityStore | None = None
) -> Services:
    """Create the service graph over ``store`` (a fresh in-memory one by default)."""

    settings = settings or get_settings()
    store = store if store is not None else EntityStore()
    customers = CustomerService(store)
    resolutions = ResolutionService(store, settings)
    conversations = ConversationService(store, customers, resolutions, settings)
    auth = AuthService(store, settings)

    seed_users(store)
    if settings.seed_sample_data:
        seed_sample_data(store)

    return Services(
        settings=settings,
        store=store,
        customers=customers,
        conversations=conversations,
        resolutions=resolutions,
        auth=auth,
    )


__all__ = ["Services", "build_services"]
