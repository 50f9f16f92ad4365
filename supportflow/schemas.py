"""Shared pydantic base model, severity scale and response envelope."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model serialised with camelCase keys on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Severity(str, Enum):
    P0 = "P0"  # critical: money, security, trust
    P1 = "P1"
    P2 = "P2"
    P3 = "P3"  # informational


SEVERITY_ORDER: dict[str, int] = {"P0": 0, "P1": 1, "P2": 2, "P3": 3}


def severity_rank(value: Severity | str | None) -> int:
    """Sort key placing P0 first and anything unknown after P3."""

    if isinstance(value, Severity):
        value = value.value
    return SEVERITY_ORDER.get(value or "", len(SEVERITY_ORDER))


class Pagination(ApiModel):
    page: int
    page_size: int
    total_items: int


def success_body(data: Any, pagination: Pagination | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": True, "data": data}
    if pagination is not None:
        body["pagination"] = pagination.to_json()
    return body


def error_body(code: str, message: str) -> dict[str, Any]:
    return {"success": False, "error": {"code": code, "message": message}}


__all__ = [
    "ApiModel",
    "Pagination",
    "SEVERITY_ORDER",
    "Severity",
    "error_body",
    "severity_rank",
    "success_body",
]
