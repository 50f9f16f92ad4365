from __future__ import annotations

from ..routing import Reply, RequestContext, RouteTable

router = RouteTable(prefix="/api/auth")


@router.post("/login", public=True)
def login(ctx: RequestContext) -> Reply:
    """Exchange e-mail and password for a bearer token."""

    email = ctx.body.get("email")
    password = ctx.body.get("password")
    result = ctx.services.auth.login(
        email if isinstance(email, str) else "",
        password if isinstance(password, str) else "",
    )
    return Reply(result.to_json())


@router.post("/logout")
def logout(ctx: RequestContext) -> Reply:
    revoked = ctx.services.auth.logout(ctx.authorization)
    return Reply({"revoked": revoked})


@router.get("/me")
def me(ctx: RequestContext) -> Reply:
    actor = ctx.services.auth.require_actor(ctx.actor)
    return Reply(actor.to_json())
