import json
import logging
from logging.handlers import TimedRotatingFileHandler

import pytest

from supportflow.app_logging import _scrub, init_logging

APP_LOGGER = "supportflow"
ACCESS_LOGGER = "uvicorn.access"


def _file_handlers(name: str) -> list[TimedRotatingFileHandler]:
    return [
        h for h in logging.getLogger(name).handlers if isinstance(h, TimedRotatingFileHandler)
    ]


def _access_records(caplog) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.name == ACCESS_LOGGER]


@pytest.fixture(autouse=True)
def _reset_handlers():
    yield
    for name in (APP_LOGGER, ACCESS_LOGGER):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()


def test_timed_rotating_handler_configuration(monkeypatch, tmp_path):
    monkeypatch.setenv("LOG_DIR", str(tmp_path))
    monkeypatch.setenv("LOG_RETENTION_DAYS", "5")
    monkeypatch.setenv("LOG_ROTATE_UTC", "true")

    init_logging()

    for name, filename in ((APP_LOGGER, "app.log"), (ACCESS_LOGGER, "access.log")):
        (handler,) = _file_handlers(name)
        assert handler.when == "MIDNIGHT"
        assert handler.backupCount == 5
        assert handler.utc is True
        assert handler.baseFilename == str(tmp_path / filename)


def test_reinitialising_swaps_file_handlers_only(monkeypatch, tmp_path):
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "first"))
    access_logger = logging.getLogger(ACCESS_LOGGER)
    stream_handler = logging.StreamHandler()
    access_logger.addHandler(stream_handler)

    init_logging()
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "second"))
    init_logging()

    assert stream_handler in access_logger.handlers
    (handler,) = _file_handlers(ACCESS_LOGGER)
    assert handler.baseFilename == str(tmp_path / "second" / "access.log")
    assert len(_file_handlers(APP_LOGGER)) == 1


def test_json_formatter(monkeypatch, tmp_path):
    monkeypatch.setenv("LOG_DIR", str(tmp_path))
    monkeypatch.setenv("LOG_JSON", "true")
    init_logging()

    logging.getLogger("supportflow.tests").warning("state %s", "changed")
    (handler,) = _file_handlers(APP_LOGGER)
    handler.flush()

    record = json.loads((tmp_path / "app.log").read_text().splitlines()[-1])
    assert record["level"] == "WARNING"
    assert record["logger"] == "supportflow.tests"
    assert record["message"] == "state changed"


def test_scrub_is_recursive():
    data = {
        "Authorization": "Bearer x",
        "nested": [{"password": "p", "keep": 1}],
        "token": "t",
    }
    assert _scrub(data) == {
        "Authorization": "***",
        "nested": [{"password": "***", "keep": 1}],
        "token": "***",
    }


def test_log_files_and_redaction(monkeypatch, tmp_path, make_client):
    monkeypatch.setenv("LOG_REQUEST_BODIES", "true")
    client = make_client()
    log_dir = tmp_path / "logs"

    resp = client.post(
        "/api/auth/login",
        json={"email": "agent@company.com", "password": "agent123"},
        headers={"Authorization": "Bearer stale", "X-Request-Id": "req-1"},
    )
    assert resp.status_code == 200
    assert resp.headers["X-Request-Id"] == "req-1"

    for name in (APP_LOGGER, ACCESS_LOGGER):
        for handler in logging.getLogger(name).handlers:
            handler.flush()

    app_log = (log_dir / "app.log").read_text()
    assert "User user_agent1 logged in" in app_log

    access_line = (log_dir / "access.log").read_text().splitlines()[-1]
    data = json.loads(access_line.split(": ", 1)[1])
    assert data["request_id"] == "req-1"
    assert data["path"] == "/api/auth/login"
    assert data["status"] == 200
    assert data["headers"]["authorization"] == "***"
    assert data["body"]["password"] == "***"
    assert data["body"]["email"] == "agent@company.com"


def test_health_and_metrics_are_not_access_logged(make_client, caplog):
    client = make_client(metrics_enabled=True)

    with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
        client.get("/health")
        client.get("/api/metrics")
        assert _access_records(caplog) == []

        resp = client.get("/api/conversations")
        (record,) = _access_records(caplog)
        assert json.loads(record.getMessage())["request_id"] == resp.headers["X-Request-Id"]

def test_access_record_names_route_actor_and_error(client, agent_headers, caplog):
    with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
        client.get(
            "/api/conversations/conv_missing",
            headers={**agent_headers, "X-Request-Id": "req-42"},
        )
        client.get("/api/conversations")

    missing, listed = _access_records(caplog)
    data = json.loads(missing.getMessage())
    assert missing.levelno == logging.WARNING
    assert data["request_id"] == "req-42"
    assert data["route"] == "/api/conversations/:id"
    assert data["status"] == 404
    assert data["error_code"] == "NOT_FOUND"
    assert data["actor_id"] == "user_agent1"
    assert data["headers"]["authorization"] == "***"

    data = json.loads(listed.getMessage())
    assert listed.levelno == logging.INFO
    assert data["route"] == "/api/conversations"
    assert data["error_code"] is None
    assert data["actor_id"] is None


def test_unmatched_request_has_no_route(client, caplog):
    with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
        client.get("/api/unknown")

    (record,) = _access_records(caplog)
    data = json.loads(record.getMessage())
    assert data["route"] is None
    assert data["error_code"] == "NOT_FOUND"


def test_app_log_lines_carry_request_id(client, tmp_path):
    client.post(
        "/api/auth/login",
        json={"email": "agent@company.com", "password": "agent123"},
        headers={"X-Request-Id": "req-login"},
    )
    for handler in logging.getLogger(APP_LOGGER).handlers:
        handler.flush()

    lines = (tmp_path / "logs" / "app.log").read_text().splitlines()
    (line,) = [entry for entry in lines if "logged in" in entry]
    assert "[req-login]: User user_agent1 logged in" in line
