"""Runtime configuration for the support lifecycle service.

Values come from environment variables (optionally loaded from a ``.env``
file). They are parsed once into a frozen :class:`Settings` instance; tests
that change the environment should call :func:`reset_settings_cache`.
"""

from __future__ import annotations

import dataclasses
import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable '{name}' must be an integer.") from exc


def _env_list(name: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclasses.dataclass(frozen=True)
class Settings:
    """Service configuration."""

    service_name: str = "Omnichannel Support API"
    require_auth: bool = False
    token_ttl_seconds: int = 3600
    sla_first_response_minutes: int = 60
    sla_resolution_minutes: int = 4 * 60
    default_support_team: str = "team_support"
    default_engineering_team: str = "team_engineering"
    default_page_size: int = 20
    max_page_size: int = 100
    seed_sample_data: bool = True
    cors_origins: tuple[str, ...] = ("*",)
    rate_limit_default: str = ""
    metrics_enabled: bool = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from the environment with development defaults."""

    defaults = Settings()
    return Settings(
        service_name=os.getenv("SERVICE_NAME", defaults.service_name),
        require_auth=_env_bool("REQUIRE_AUTH", defaults.require_auth),
        token_ttl_seconds=_env_int("TOKEN_TTL_SECONDS", defaults.token_ttl_seconds),
        sla_first_response_minutes=_env_int(
            "SLA_FIRST_RESPONSE_MINUTES", defaults.sla_first_response_minutes
        ),
        sla_resolution_minutes=_env_int(
            "SLA_RESOLUTION_MINUTES", defaults.sla_resolution_minutes
        ),
        default_support_team=os.getenv(
            "DEFAULT_SUPPORT_TEAM", defaults.default_support_team
        ),
        default_engineering_team=os.getenv(
            "DEFAULT_ENGINEERING_TEAM", defaults.default_engineering_team
        ),
        default_page_size=_env_int("DEFAULT_PAGE_SIZE", defaults.default_page_size),
        max_page_size=_env_int("MAX_PAGE_SIZE", defaults.max_page_size),
        seed_sample_data=_env_bool("SEED_SAMPLE_DATA", defaults.seed_sample_data),
        cors_origins=_env_list("CORS_ORIGINS", "*"),
        rate_limit_default=os.getenv("RATE_LIMIT_DEFAULT", "").strip(),
        metrics_enabled=_env_bool("METRICS_ENABLED", defaults.metrics_enabled),
    )


def reset_settings_cache() -> None:
    """Clear cached settings; useful in tests when env vars change."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
