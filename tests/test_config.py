import pytest

from supportflow.core import get_settings, reset_settings_cache


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings_cache()
    yield
    reset_settings_cache()


def test_defaults(monkeypatch):
    for name in ("REQUIRE_AUTH", "SLA_FIRST_RESPONSE_MINUTES", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    settings = get_settings()
    assert settings.require_auth is False
    assert settings.sla_first_response_minutes == 60
    assert settings.sla_resolution_minutes == 240
    assert settings.cors_origins == ("*",)


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("REQUIRE_AUTH", "yes")
    monkeypatch.setenv("SLA_RESOLUTION_MINUTES", "30")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("RATE_LIMIT_DEFAULT", " 100/minute ")

    settings = get_settings()
    assert settings.require_auth is True
    assert settings.sla_resolution_minutes == 30
    assert settings.cors_origins == ("https://a.example", "https://b.example")
    assert settings.rate_limit_default == "100/minute"
    assert get_settings() is settings


def test_invalid_integer_is_reported(monkeypatch):
    monkeypatch.setenv("MAX_PAGE_SIZE", "lots")
    with pytest.raises(RuntimeError, match="MAX_PAGE_SIZE"):
        get_settings()
