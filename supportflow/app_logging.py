"""Application and access logging for the support API.

Two rotating log files are written under ``LOG_DIR``:

- ``app.log`` for the ``supportflow`` logger tree (state transitions, logins,
  unhandled errors). Every line carries the id of the request being served.
- ``access.log`` with one JSON object per request. Besides method, path,
  status and latency it records the route template the dispatcher matched,
  the acting user and, for failed requests, the envelope error code. Headers
  (and bodies, when ``LOG_REQUEST_BODIES`` is on) are scrubbed of credentials.

Environment variables: LOG_DIR, LOG_LEVEL, LOG_JSON, LOG_REQUEST_BODIES,
LOG_RETENTION_DAYS, LOG_ROTATE_UTC.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import os
import time
from contextvars import ContextVar
from logging.handlers import TimedRotatingFileHandler
from typing import Any, cast
from uuid import uuid4

from fastapi import FastAPI, Request

APP_LOGGER_NAME = "supportflow"
ACCESS_LOGGER_NAME = "uvicorn.access"
SKIP_PATHS = frozenset({"/health", "/api/metrics"})

SENSITIVE_FIELDS = frozenset(
    {
        "authorization",
        "cookie",
        "set-cookie",
        "password",
        "token",
        "access_token",
        "refresh_token",
    }
)

_current_request_id: ContextVar[str] = ContextVar("supportflow_request_id", default="-")


@dataclasses.dataclass(frozen=True)
class LogSettings:
    directory: str = "logs"
    level: int = logging.INFO
    json_format: bool = False
    request_bodies: bool = False
    retention_days: int = 7
    rotate_utc: bool = False

    @classmethod
    def from_env(cls) -> "LogSettings":
        def flag(name: str) -> bool:
            return os.getenv(name, "false").strip().lower() == "true"

        level_name = os.getenv("LOG_LEVEL", "INFO").strip().upper()
        return cls(
            directory=os.getenv("LOG_DIR", cls.directory),
            level=getattr(logging, level_name, logging.INFO),
            json_format=flag("LOG_JSON"),
            request_bodies=flag("LOG_REQUEST_BODIES"),
            retention_days=int(os.getenv("LOG_RETENTION_DAYS", str(cls.retention_days))),
            rotate_utc=flag("LOG_ROTATE_UTC"),
        )


class RequestIdFilter(logging.Filter):
    """Stamp records with the id of the request currently being served."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _current_request_id.get()
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record, used when LOG_JSON=true."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "level": record.levelname,
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "logger": record.name,
            "request_id": getattr(record, "request_id", "-"),
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def _formatter(log_json: bool) -> logging.Formatter:
    if log_json:
        return JsonFormatter()
    return logging.Formatter(
        "[%(asctime)s] %(levelname)s in %(name)s [%(request_id)s]: %(message)s"
    )


def _scrub(data: object) -> object:
    """Mask credential-looking keys in nested dicts and lists."""

    if isinstance(data, dict):
        return {
            key: "***" if str(key).lower() in SENSITIVE_FIELDS else _scrub(value)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [_scrub(item) for item in data]
    return data


def _attach_log_file(logger: logging.Logger, path: str, config: LogSettings) -> None:
    # Earlier rotating handlers are closed so apps built later write to their own
    # LOG_DIR; other handlers stay attached.
    for existing in list(logger.handlers):
        if isinstance(existing, TimedRotatingFileHandler):
            logger.removeHandler(existing)
            existing.close()
    handler = TimedRotatingFileHandler(
        path,
        when="midnight",
        backupCount=config.retention_days,
        utc=config.rotate_utc,
    )
    handler.setFormatter(_formatter(config.json_format))
    handler.addFilter(RequestIdFilter())
    logger.addHandler(handler)
    logger.setLevel(config.level)


def _access_level(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


async def _read_body(request: Request) -> object:
    raw = await request.body()

    async def replay() -> dict:  # pragma: no cover - internal
        return {"type": "http.request", "body": raw, "more_body": False}

    # The dispatcher reads the body again downstream.
    request._receive = replay  # type: ignore[attr-defined]
    if not raw:
        return None
    try:
        return _scrub(json.loads(raw))
    except (ValueError, UnicodeDecodeError):
        return raw.decode("utf-8", errors="replace")


def _install_access_logging(app: FastAPI, config: LogSettings) -> None:
    """Log one access record per request and echo ``X-Request-Id``.

    The dispatcher leaves ``route``, ``actor_id`` and ``error_code`` on
    ``request.state``; requests that never reach it (metrics, CORS preflight)
    log those as null.
    """

    access_logger = logging.getLogger(ACCESS_LOGGER_NAME)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        if request.url.path in SKIP_PATHS:
            return await call_next(request)

        request_id = request.headers.get("X-Request-Id") or uuid4().hex
        request.state.request_id = request_id
        token = _current_request_id.set(request_id)
        started = time.perf_counter()
        try:
            body = await _read_body(request) if config.request_bodies else None
            response = await call_next(request)
        finally:
            _current_request_id.reset(token)

        state = request.state
        record: dict[str, Any] = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "route": getattr(state, "route", None),
            "status": response.status_code,
            "error_code": getattr(state, "error_code", None),
            "actor_id": getattr(state, "actor_id", None),
            "latency_ms": round((time.perf_counter() - started) * 1000, 2),
            "client_ip": request.headers.get("X-Forwarded-For")
            or (request.client.host if request.client else None),
            "headers": _scrub(dict(request.headers)),
        }
        if body is not None:
            record["body"] = body

        response.headers["X-Request-Id"] = request_id
        access_logger.log(_access_level(response.status_code), json.dumps(record, default=str))
        return response


def init_logging(app: FastAPI | None = None) -> LogSettings:
    """Point the app and access loggers at ``LOG_DIR`` and install the middleware."""

    config = LogSettings.from_env()
    os.makedirs(config.directory, exist_ok=True)

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    _attach_log_file(app_logger, os.path.join(config.directory, "app.log"), config)
    _attach_log_file(
        logging.getLogger(ACCESS_LOGGER_NAME),
        os.path.join(config.directory, "access.log"),
        config,
    )

    if app is not None:
        cast(Any, app).logger = app_logger
        _install_access_logging(app, config)
    return config


__all__ = [
    "APP_LOGGER_NAME",
    "JsonFormatter",
    "LogSettings",
    "RequestIdFilter",
    "SENSITIVE_FIELDS",
    "init_logging",
]
