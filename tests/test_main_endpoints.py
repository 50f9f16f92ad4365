"""Tests for the application shell: service info, dispatch edge cases and middleware."""

import logging

import pytest

from supportflow.__version__ import __version__
from supportflow.routing import Reply


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["status"] == "healthy"
    assert data["version"] == __version__
    assert data["uptime"] >= 0
    assert data["timestamp"]


def test_service_description(client):
    data = client.get("/api").json()["data"]
    assert data["name"] == "Omnichannel Support API"
    assert data["version"] == __version__
    assert data["endpoints"]["conversations"] == "/api/conversations"
    assert "metrics" not in data["endpoints"]


def test_unknown_route_and_method(client):
    resp = client.get("/api/unknown")
    assert resp.status_code == 404
    assert resp.json()["error"] == {
        "code": "NOT_FOUND",
        "message": "Route GET /api/unknown not found",
    }
    assert client.delete("/api/conversations").status_code == 404
    assert client.put("/health").status_code == 404

    resp = client.head("/api/conversations")
    assert resp.status_code == 404
    assert resp.headers["content-type"] == "application/json"

    resp = client.request("TRACE", "/api/conversations")
    assert resp.status_code == 404
    assert resp.json() == {
        "success": False,
        "error": {"code": "NOT_FOUND", "message": "Route TRACE /api/conversations not found"},
    }


@pytest.mark.parametrize("path", ["/docs", "/redoc", "/openapi.json", "/docs/oauth2-redirect"])
def test_generated_docs_are_not_served(make_client, path):
    for client in (make_client(), make_client(require_auth=True)):
        resp = client.get(path)
        assert resp.status_code == 404
        assert resp.json()["error"] == {
            "code": "NOT_FOUND",
            "message": f"Route GET {path} not found",
        }


def test_encoded_slash_is_kept_in_the_path_parameter(client):
    resp = client.get("/api/conversations/a%2Fb")
    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "Conversation a/b not found"

    resp = client.get("/api/conversations/a%2Fb/messages")
    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "Conversation a/b not found"

    resp = client.get("/api/unknown%2Fthing?page=2")
    assert resp.json()["error"]["message"] == "Route GET /api/unknown%2Fthing not found"


def test_options_short_circuits(client):
    resp = client.options("/api/conversations/anything")
    assert resp.status_code == 204
    assert resp.content == b""


def test_unexpected_error_becomes_internal_error(client, caplog):
    def boom(ctx):
        raise RuntimeError("database on fire")

    client.app.state.routes.add("GET", "/api/boom", boom)

    with caplog.at_level(logging.ERROR, logger="supportflow"):
        resp = client.get("/api/boom")

    assert resp.status_code == 500
    assert resp.json() == {
        "success": False,
        "error": {"code": "INTERNAL_ERROR", "message": "Internal server error"},
    }
    assert any(record.exc_info for record in caplog.records)
    # The process keeps serving.
    assert client.get("/health").status_code == 200


def test_handlers_can_set_status(client):
    client.app.state.routes.add("POST", "/api/echo", lambda ctx: Reply(ctx.body, status_code=202))
    resp = client.post("/api/echo", json={"a": 1})
    assert resp.status_code == 202
    assert resp.json() == {"success": True, "data": {"a": 1}}


def test_cors_headers(client):
    resp = client.get("/api", headers={"Origin": "https://widget.example"})
    assert resp.headers["access-control-allow-origin"] in {"*", "https://widget.example"}

    preflight = client.options(
        "/api/conversations",
        headers={
            "Origin": "https://widget.example",
            "Access-Control-Request-Method": "POST",
        },
    )
    assert preflight.status_code == 200
    assert "access-control-allow-methods" in preflight.headers


def test_metrics_endpoint(make_client):
    client = make_client(metrics_enabled=True)
    client.get("/api")

    resp = client.get("/api/metrics")
    assert resp.status_code == 200
    assert "http_request" in resp.text
    assert client.get("/api").json()["data"]["endpoints"]["metrics"] == "/api/metrics"


def test_rate_limit(make_client):
    client = make_client(rate_limit_default="2/minute")
    assert client.get("/api").status_code == 200
    assert client.get("/api").status_code == 200

    resp = client.get("/api")
    assert resp.status_code == 429
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["code"] == "RATE_LIMITED"
