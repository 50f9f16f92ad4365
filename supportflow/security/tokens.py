"""Opaque bearer tokens stored by hash."""

from __future__ import annotations

import datetime as dt
import hashlib
import secrets
from typing import Dict, Optional, Protocol

from ..core import utcnow
from ..schemas import ApiModel
from .users import Actor, User


class TokenRecord(ApiModel):
    token_hash: str
    actor: Actor
    issued_at: dt.datetime
    expires_at: dt.datetime


class TokenRepository(Protocol):
    def save(self, record: TokenRecord) -> TokenRecord: ...

    def get(self, token_hash: str) -> Optional[TokenRecord]: ...

    def delete(self, token_hash: str) -> bool: ...


class InMemoryTokenRepository:
    def __init__(self) -> None:
        self._tokens: Dict[str, TokenRecord] = {}

    def save(self, record: TokenRecord) -> TokenRecord:
        self._tokens[record.token_hash] = record
        return record

    def get(self, token_hash: str) -> Optional[TokenRecord]:
        return self._tokens.get(token_hash)

    def delete(self, token_hash: str) -> bool:
        return self._tokens.pop(token_hash, None) is not None


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def issue_token(
    repository: TokenRepository, user: User, *, ttl_seconds: int
) -> tuple[str, TokenRecord]:
    """Persist a token bound to ``user`` and return the raw secret.

    ``expires_at`` is advisory: it is reported to the client but lookups do
    not enforce it.
    """

    raw_token = secrets.token_urlsafe(32)
    now = utcnow()
    record = TokenRecord(
        token_hash=hash_token(raw_token),
        actor=Actor(user_id=user.id, email=user.email, role=user.role, name=user.name),
        issued_at=now,
        expires_at=now + dt.timedelta(seconds=ttl_seconds),
    )
    repository.save(record)
    return raw_token, record


__all__ = [
    "InMemoryTokenRepository",
    "TokenRecord",
    "TokenRepository",
    "hash_token",
    "issue_token",
]
