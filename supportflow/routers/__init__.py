"""Route tables for every API area, assembled in dispatch order."""

from __future__ import annotations

from ..routing import RouteTable
from . import auth_api, conversations, customers, resolutions, system


def build_route_table() -> RouteTable:
    table = RouteTable()
    for module in (system, auth_api, conversations, customers, resolutions):
        table.include(module.router)
    return table


__all__ = ["build_route_table"]
