from __future__ import annotations

import datetime as dt
import secrets


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def new_id(prefix: str) -> str:
    """Return a short random identifier such as ``conv_1a2b3c4d``."""

    return f"{prefix}_{secrets.token_hex(4)}"


__all__ = ["new_id", "utcnow"]
