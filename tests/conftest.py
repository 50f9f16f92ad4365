import os
import pathlib
import sys
import tempfile
from dataclasses import replace

import pytest
from starlette.testclient import TestClient

# supportflow.main builds a module-level app on import; keep its logs out of the
# working tree.
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="supportflow-logs-"))

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))
from supportflow.container import build_services
from supportflow.core import Settings
from supportflow.main import create_app

AGENT_EMAIL = "agent@company.com"
AGENT_PASSWORD = "agent123"


@pytest.fixture
def settings() -> Settings:
    return Settings(seed_sample_data=False, metrics_enabled=False)


@pytest.fixture
def services(settings):
    return build_services(settings)


@pytest.fixture
def make_client(monkeypatch, tmp_path, settings):
    """Build isolated clients; keyword arguments override :class:`Settings`."""

    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    clients = []

    def _make(**overrides) -> TestClient:
        app = create_app(services=build_services(replace(settings, **overrides)))
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()


@pytest.fixture
def agent_headers(client) -> dict[str, str]:
    resp = client.post(
        "/api/auth/login", json={"email": AGENT_EMAIL, "password": AGENT_PASSWORD}
    )
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['data']['token']}"}


@pytest.fixture
def new_conversation(client):
    def _create(**body) -> dict:
        resp = client.post("/api/conversations", json=body)
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]

    return _create
