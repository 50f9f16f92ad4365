"""Staff user accounts and the authenticated actor."""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Protocol

from pydantic import Field

from ..schemas import ApiModel


class UserRole(str, Enum):
    ADMIN = "admin"
    SUPERVISOR = "supervisor"
    AGENT = "agent"
    ENGINEER = "engineer"
    API = "api"


class User(ApiModel):
    id: str
    email: str
    name: str
    role: UserRole
    password_hash: str = Field(default="", exclude=True)


class Actor(ApiModel):
    """Identity attached to a bearer token; handed to handlers per request."""

    user_id: str
    email: str
    role: UserRole
    name: str


class UserRepository(Protocol):
    def get_by_email(self, email: str) -> Optional[User]: ...

    def save(self, user: User) -> User: ...

    def list(self) -> List[User]: ...


class InMemoryUserRepository:
    """Users keyed by lower-cased e-mail address."""

    def __init__(self) -> None:
        self._users: Dict[str, User] = {}

    def get_by_email(self, email: str) -> Optional[User]:
        user = self._users.get(email.lower())
        return user.model_copy() if user else None

    def save(self, user: User) -> User:
        self._users[user.email.lower()] = user.model_copy()
        return user

    def list(self) -> List[User]:
        return [u.model_copy() for u in self._users.values()]
