"""The entity store: one repository per entity type.

The default wiring keeps everything in process memory. Any object that
satisfies the repository protocols can be swapped in without touching the
services.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .conversations.repository import (
    ConversationRepository,
    InMemoryConversationRepository,
    InMemoryMessageRepository,
    MessageRepository,
)
from .customers.repository import CustomerRepository, InMemoryCustomerRepository
from .resolutions.repository import InMemoryResolutionRepository, ResolutionRepository
from .security.tokens import InMemoryTokenRepository, TokenRepository
from .security.users import InMemoryUserRepository, UserRepository


@dataclass
class EntityStore:
    customers: CustomerRepository = field(default_factory=InMemoryCustomerRepository)
    conversations: ConversationRepository = field(
        default_factory=InMemoryConversationRepository
    )
    messages: MessageRepository = field(default_factory=InMemoryMessageRepository)
    resolutions: ResolutionRepository = field(
        default_factory=InMemoryResolutionRepository
    )
    users: UserRepository = field(default_factory=InMemoryUserRepository)
    tokens: TokenRepository = field(default_factory=InMemoryTokenRepository)


__all__ = ["EntityStore"]
