"""Security utilities exposed for convenience."""

from .auth import AuthService, LoginResult, bearer_credentials
from .passwords import hash_password, verify_password
from .tokens import hash_token, issue_token
from .users import Actor, User, UserRole

__all__ = [
    "Actor",
    "AuthService",
    "LoginResult",
    "User",
    "UserRole",
    "bearer_credentials",
    "hash_password",
    "hash_token",
    "issue_token",
    "verify_password",
]
