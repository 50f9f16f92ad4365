"""Liveness probe and service description."""

from __future__ import annotations

from ..__version__ import __version__
from ..core import utcnow
from ..routing import Reply, RequestContext, RouteTable

router = RouteTable()

ENDPOINTS = {
    "auth": "/api/auth",
    "conversations": "/api/conversations",
    "customers": "/api/customers",
    "resolutions": "/api/resolutions",
    "health": "/health",
    "metrics": "/api/metrics",
}


@router.get("/health", public=True)
def health(ctx: RequestContext) -> Reply:
    """Always 200 while the process is serving requests."""

    return Reply(
        {
            "status": "healthy",
            "timestamp": utcnow().isoformat(),
            "uptime": ctx.services.uptime,
            "version": __version__,
        }
    )


@router.get("/api", public=True)
def describe(ctx: RequestContext) -> Reply:
    endpoints = dict(ENDPOINTS)
    if not ctx.services.settings.metrics_enabled:
        endpoints.pop("metrics")
    return Reply(
        {
            "name": ctx.services.settings.service_name,
            "version": __version__,
            "endpoints": endpoints,
        }
    )
