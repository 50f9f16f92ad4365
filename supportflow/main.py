"""FastAPI application wiring for the support API.

This module bootstraps the HTTP API:

- Configures logging, CORS, Prometheus metrics and rate limiting.
- Builds the in-memory entity store and the services operating on it.
- Hands every request to a single catch-all endpoint that resolves the bearer
  token, matches the route table and runs the handler. Domain errors are
  turned into the ``{success: false, error: {code, message}}`` envelope here
  and nowhere else.

The request body is awaited before anything else happens; from then on the
handler runs to completion without yielding, so two requests never interleave
their mutations of the store.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CollectorRegistry
from prometheus_fastapi_instrumentator import Instrumentator
from pydantic import ValidationError
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .__version__ import __version__
from .app_logging import init_logging
from .container import Services, build_services
from .core import NotFoundError, Settings, SupportError, get_settings
from .routers import build_route_table
from .routing import RequestContext, RouteTable, parse_body
from .schemas import error_body

logger = logging.getLogger(__name__)

DISPATCH_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def get_client_ip(request: Request) -> str:
    """Extract a best-effort client IP for rate limiting.

    Prefer ``X-Forwarded-For`` (first hop) if present, otherwise use the
    socket peer address. This function is used by SlowAPI to key the limiter.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _request_path(request: Request) -> str:
    """The request path as sent, before percent-decoding."""

    raw = request.scope.get("raw_path")
    if not raw:
        return request.url.path
    return raw.split(b"?", 1)[0].decode("latin-1")


def _error_response(
    request: Request, status_code: int, code: str, message: str
) -> JSONResponse:
    request.state.error_code = code
    return JSONResponse(error_body(code, message), status_code=status_code)


def _validation_message(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first['msg']}" if location else first["msg"]


def _rate_limited(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    # SlowAPIMiddleware calls this handler synchronously.
    return _error_response(request, 429, "RATE_LIMITED", f"Rate limit exceeded: {exc.detail}")


def _unrouted(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Verbs the catch-all does not accept are rejected before dispatch runs.
    if exc.status_code == 405:
        error = NotFoundError("Route", f"{request.method} {_request_path(request)}")
        return _error_response(request, error.status_code, error.code, error.message)
    return _error_response(request, exc.status_code, "HTTP_ERROR", str(exc.detail))


async def dispatch(request: Request) -> Response:
    """Route ``request`` through the route table and wrap the result."""

    method = request.method.upper()
    if method == "OPTIONS":
        return Response(status_code=204)

    body = parse_body(await request.body())

    services: Services = request.app.state.services
    routes: RouteTable = request.app.state.routes
    path = _request_path(request)
    try:
        authorization = request.headers.get("Authorization")
        actor = services.auth.actor_for(authorization)
        request.state.actor_id = actor.user_id if actor is not None else None
        match = routes.match(method, path)
        if match is None:
            raise NotFoundError("Route", f"{method} {path}")
        request.state.route = match.route.template
        if services.settings.require_auth and not match.route.public:
            services.auth.require_actor(actor)
        reply = match.handler(
            RequestContext(
                method=method,
                path=path,
                params=match.params,
                query=request.query_params,
                body=body,
                services=services,
                actor=actor,
                authorization=authorization,
            )
        )
    except SupportError as exc:
        return _error_response(request, exc.status_code, exc.code, exc.message)
    except ValidationError as exc:
        return _error_response(request, 400, "VALIDATION_ERROR", _validation_message(exc))
    except Exception:
        logger.exception("Unhandled error while serving %s %s", method, path)
        return _error_response(request, 500, "INTERNAL_ERROR", "Internal server error")
    return JSONResponse(reply.body(), status_code=reply.status_code)


def create_app(
    settings: Settings | None = None, *, services: Services | None = None
) -> FastAPI:
    """Build a fully wired application.

    ``services`` may be supplied to share or pre-populate a store; otherwise a
    fresh in-memory one is created from ``settings``.
    """

    if services is None:
        services = build_services(settings or get_settings())
    settings = services.settings

    # The route table is the only HTTP surface; no generated docs or schema.
    app = FastAPI(
        title=settings.service_name,
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    init_logging(app)
    app.state.settings = settings
    app.state.services = services
    app.state.routes = build_route_table()

    limiter = Limiter(
        key_func=get_client_ip,
        default_limits=[settings.rate_limit_default] if settings.rate_limit_default else [],
        enabled=bool(settings.rate_limit_default),
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limited)
    app.add_exception_handler(StarletteHTTPException, _unrouted)
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Must be registered ahead of the catch-all route.
    if settings.metrics_enabled:
        Instrumentator(registry=CollectorRegistry()).instrument(app).expose(
            app, include_in_schema=False, endpoint="/api/metrics"
        )

    app.add_api_route(
        "/{path:path}",
        dispatch,
        methods=DISPATCH_METHODS,
        include_in_schema=False,
    )
    logger.info(
        "%s %s ready (auth %s)",
        settings.service_name,
        __version__,
        "required" if settings.require_auth else "optional",
    )
    return app


app = create_app()
