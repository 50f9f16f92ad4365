"""Login, logout and bearer-token actor lookup."""

from __future__ import annotations

import datetime as dt
import logging
from typing import TYPE_CHECKING

from ..core import AuthenticationRequiredError, InvalidCredentialsError, Settings
from ..schemas import ApiModel
from .passwords import verify_password
from .tokens import hash_token, issue_token
from .users import Actor, User

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..store import EntityStore

logger = logging.getLogger(__name__)


class LoginResult(ApiModel):
    token: str
    user: User
    expires_at: dt.datetime


def bearer_credentials(authorization: str | None) -> str | None:
    """Return the token from an ``Authorization: Bearer ...`` header."""

    if not authorization:
        return None
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() != "bearer" or not credentials.strip():
        return None
    return credentials.strip()


class AuthService:
    """Issues tokens against the user table and resolves them to actors."""

    def __init__(self, store: EntityStore, settings: Settings) -> None:
        self._store = store
        self._settings = settings

    def login(self, email: str, password: str) -> LoginResult:
        user = self._store.users.get_by_email(email) if email else None
        hashed = user.password_hash if user is not None else None
        if not verify_password(password, hashed) or user is None:
            logger.info("Rejected login attempt")
            raise InvalidCredentialsError()
        token, record = issue_token(
            self._store.tokens, user, ttl_seconds=self._settings.token_ttl_seconds
        )
        logger.info("User %s logged in", user.id)
        return LoginResult(token=token, user=user, expires_at=record.expires_at)

    def actor_for(self, authorization: str | None) -> Actor | None:
        token = bearer_credentials(authorization)
        if token is None:
            return None
        record = self._store.tokens.get(hash_token(token))
        return record.actor if record is not None else None

    def require_actor(self, actor: Actor | None) -> Actor:
        if actor is None:
            raise AuthenticationRequiredError()
        return actor

    def logout(self, authorization: str | None) -> bool:
        token = bearer_credentials(authorization)
        if token is None:
            raise AuthenticationRequiredError()
        revoked = self._store.tokens.delete(hash_token(token))
        if not revoked:
            raise AuthenticationRequiredError("Token is not active")
        return True
