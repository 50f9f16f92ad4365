"""Tests for login, logout and the bearer-token gate."""

import pytest

from supportflow.security import hash_password, hash_token, verify_password


def _login(client, email="engineer@company.com", password="engineer123"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def test_login_returns_token_user_and_expiry(client):
    resp = _login(client)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["user"] == {
        "id": "user_eng1",
        "email": "engineer@company.com",
        "name": "Mike Engineer",
        "role": "engineer",
    }
    assert data["expiresAt"]
    # Only the hash of the token is kept.
    record = client.app.state.services.store.tokens.get(hash_token(data["token"]))
    assert record is not None
    assert record.actor.user_id == "user_eng1"


def test_login_is_case_insensitive_on_email(client):
    assert _login(client, email="Engineer@Company.com").status_code == 200


@pytest.mark.parametrize(
    "body",
    [
        {"email": "engineer@company.com", "password": "wrong"},
        {"email": "nobody@company.com", "password": "engineer123"},
        {"email": "engineer@company.com"},
        {},
        {"email": 42, "password": ["engineer123"]},
    ],
)
def test_login_failures_look_identical(client, body):
    resp = client.post("/api/auth/login", json=body)
    assert resp.status_code == 401
    assert resp.json() == {
        "success": False,
        "error": {"code": "INVALID_CREDENTIALS", "message": "Invalid credentials"},
    }


def test_me_and_logout(client):
    token = _login(client).json()["data"]["token"]
    headers = {"Authorization": f"Bearer {token}"}

    me = client.get("/api/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["data"]["userId"] == "user_eng1"

    resp = client.post("/api/auth/logout", headers=headers)
    assert resp.json() == {"success": True, "data": {"revoked": True}}

    assert client.get("/api/auth/me", headers=headers).status_code == 401
    resp = client.post("/api/auth/logout", headers=headers)
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "UNAUTHORIZED"


def test_me_requires_token(client):
    resp = client.get("/api/auth/me", headers={"Authorization": "Basic abc"})
    assert resp.status_code == 401


def test_required_auth_gates_non_public_routes(make_client):
    client = make_client(require_auth=True)

    resp = client.get("/api/conversations")
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "UNAUTHORIZED"
    assert client.get("/api/conversations", headers={"Authorization": "Bearer nope"}).status_code == 401

    assert client.get("/health").status_code == 200
    assert client.get("/api").status_code == 200
    token = _login(client).json()["data"]["token"]

    resp = client.get("/api/conversations", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200


def test_optional_auth_leaves_routes_open(client):
    assert client.get("/api/conversations").status_code == 200


def test_verify_password_edge_cases():
    hashed = hash_password("s3cret")
    assert verify_password("s3cret", hashed)
    assert not verify_password("S3cret", hashed)
    assert not verify_password("s3cret", None)
    assert not verify_password("s3cret", "not-a-hash")
    assert not verify_password("", hashed)
    with pytest.raises(ValueError):
        hash_password("")
