"""Method + path dispatch table with ``:param`` templates.

Matching works in two steps:

1. An exact lookup of ``"METHOD /literal/path"`` among templates that carry no
   parameters. Literal routes therefore always win over templated ones.
2. A scan, in registration order, of the templates registered for the same
   method. A template is rejected when its segment count differs from the
   request's; otherwise each literal segment must equal the request segment
   and each ``:name`` segment binds the request segment. The first template
   matching every segment wins.

Paths are not normalised: a trailing slash or a doubled slash produces an
empty segment, which only an equally empty literal segment matches. Parameters
never bind an empty segment, so ``/api/conversations/`` does not reach the
``/api/conversations/:id`` handler.

The dispatcher matches the still percent-encoded path, so an encoded slash
stays inside its segment. Bound values are percent-decoded.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from urllib.parse import unquote

from .schemas import Pagination, success_body

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .container import Services
    from .security.users import Actor

PARAM_MARKER = ":"

Handler = Callable[["RequestContext"], "Reply"]


def split_path(path: str) -> tuple[str, ...]:
    return tuple(path.split("/"))


@dataclass(frozen=True)
class Route:
    method: str
    template: str
    handler: Handler
    public: bool = False
    segments: tuple[str, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "segments", split_path(self.template))

    @property
    def key(self) -> str:
        return f"{self.method} {self.template}"

    @property
    def is_literal(self) -> bool:
        return not any(s.startswith(PARAM_MARKER) for s in self.segments)

    def bind(self, segments: tuple[str, ...]) -> dict[str, str] | None:
        if len(segments) != len(self.segments):
            return None
        params: dict[str, str] = {}
        for expected, actual in zip(self.segments, segments):
            if expected.startswith(PARAM_MARKER):
                if not actual:
                    return None
                params[expected[len(PARAM_MARKER):]] = unquote(actual)
            elif expected != actual:
                return None
        return params


@dataclass(frozen=True)
class RouteMatch:
    route: Route
    params: dict[str, str]

    @property
    def handler(self) -> Handler:
        return self.route.handler


class RouteTable:
    """Ordered collection of routes, optionally sharing a path prefix."""

    def __init__(self, prefix: str = "") -> None:
        self._prefix = prefix
        self._routes: list[Route] = []
        self._exact: dict[str, Route] = {}

    @property
    def routes(self) -> list[Route]:
        return list(self._routes)

    def add(
        self, method: str, template: str, handler: Handler, *, public: bool = False
    ) -> Route:
        route = Route(method.upper(), self._prefix + template, handler, public=public)
        if any(existing.key == route.key for existing in self._routes):
            raise ValueError(f"Route {route.key} is already registered")
        self._routes.append(route)
        if route.is_literal:
            self._exact[route.key] = route
        return route

    def route(
        self, method: str, template: str, *, public: bool = False
    ) -> Callable[[Handler], Handler]:
        def decorator(handler: Handler) -> Handler:
            self.add(method, template, handler, public=public)
            return handler

        return decorator

    def get(self, template: str, **kwargs: Any) -> Callable[[Handler], Handler]:
        return self.route("GET", template, **kwargs)

    def post(self, template: str, **kwargs: Any) -> Callable[[Handler], Handler]:
        return self.route("POST", template, **kwargs)

    def patch(self, template: str, **kwargs: Any) -> Callable[[Handler], Handler]:
        return self.route("PATCH", template, **kwargs)

    def include(self, other: RouteTable) -> None:
        """Append every route of ``other``, keeping its registration order."""

        for route in other.routes:
            self.add(route.method, route.template, route.handler, public=route.public)

    def match(self, method: str, path: str) -> RouteMatch | None:
        method = method.upper()
        exact = self._exact.get(f"{method} {path}")
        if exact is not None:
            return RouteMatch(exact, {})
        segments = split_path(path)
        for route in self._routes:
            if route.method != method:
                continue
            params = route.bind(segments)
            if params is not None:
                return RouteMatch(route, params)
        return None


def parse_body(raw: bytes) -> dict[str, Any]:
    """Decode a JSON object body; anything unparsable becomes ``{}``."""

    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except (ValueError, UnicodeDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


@dataclass
class RequestContext:
    """Everything a handler may read about the current request."""

    method: str
    path: str
    params: dict[str, str]
    query: Mapping[str, str]
    body: dict[str, Any]
    services: Services
    actor: Actor | None = None
    authorization: str | None = None

    def query_list(self, name: str) -> list[str] | None:
        """Split a comma separated query value; ``None`` when absent or blank."""

        raw = self.query.get(name)
        if raw is None:
            return None
        values = [item.strip() for item in raw.split(",") if item.strip()]
        return values or None

    def query_int(self, name: str, default: int) -> int:
        raw = self.query.get(name)
        if raw is None:
            return default
        try:
            value = int(raw)
        except ValueError:
            return default
        return value if value > 0 else default

    def page(self) -> tuple[int, int]:
        settings = self.services.settings
        page = self.query_int("page", 1)
        page_size = self.query_int("pageSize", settings.default_page_size)
        return page, min(page_size, settings.max_page_size)


@dataclass
class Reply:
    data: Any
    status_code: int = 200
    pagination: Pagination | None = None

    @classmethod
    def page_of(
        cls, items: list[Any], *, page: int, page_size: int, total: int
    ) -> Reply:
        return cls(
            items,
            pagination=Pagination(page=page, page_size=page_size, total_items=total),
        )

    def body(self) -> dict[str, Any]:
        return success_body(self.data, self.pagination)


def paginate(items: list[Any], page: int, page_size: int) -> list[Any]:
    start = (page - 1) * page_size
    return items[start : start + page_size]


__all__ = [
    "Handler",
    "PARAM_MARKER",
    "Reply",
    "RequestContext",
    "Route",
    "RouteMatch",
    "RouteTable",
    "paginate",
    "parse_body",
    "split_path",
]
