"""Password hashing for staff accounts, backed by Passlib (Argon2)."""

from __future__ import annotations

from functools import lru_cache

from passlib.context import CryptContext

_pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("Password must be non-empty.")
    return _pwd_context.hash(password)


@lru_cache(maxsize=1)
def _placeholder_hash() -> str:
    return _pwd_context.hash("placeholder-for-unknown-accounts")


def verify_password(password: str, hashed_password: str | None) -> bool:
    """Check ``password`` against ``hashed_password``.

    A missing hash (unknown account) is still verified against a placeholder so
    that failed logins cost the same whether or not the e-mail exists. Malformed
    hashes count as a mismatch.
    """

    if not password:
        return False
    try:
        matched = _pwd_context.verify(password, hashed_password or _placeholder_hash())
    except (ValueError, TypeError):
        return False
    return matched and bool(hashed_password)


__all__ = ["hash_password", "verify_password"]
