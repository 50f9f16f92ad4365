"""Resolution workflow API routes."""

from __future__ import annotations

from ..resolutions import schemas as resolution_schemas
from ..routing import Reply, RequestContext, RouteTable, paginate

router = RouteTable(prefix="/api/resolutions")


@router.get("")
def list_resolutions(ctx: RequestContext) -> Reply:
    page, page_size = ctx.page()
    items = ctx.services.resolutions.list_resolutions(
        statuses=ctx.query_list("status"),
        priorities=ctx.query_list("priority"),
    )
    return Reply.page_of(
        [r.to_json() for r in paginate(items, page, page_size)],
        page=page,
        page_size=page_size,
        total=len(items),
    )


@router.post("")
def create_resolution(ctx: RequestContext) -> Reply:
    """Open a resolution directly for a conversation that has none yet."""

    payload = resolution_schemas.ResolutionCreate.model_validate(ctx.body)
    resolution = ctx.services.resolutions.create_resolution(payload)
    return Reply(resolution.to_json(), status_code=201)


@router.get("/:id")
def get_resolution(ctx: RequestContext) -> Reply:
    resolution = ctx.services.resolutions.get_resolution(ctx.params["id"])
    return Reply(resolution.to_json())


@router.patch("/:id/status")
def update_status(ctx: RequestContext) -> Reply:
    payload = resolution_schemas.StatusUpdate.model_validate(ctx.body)
    resolution = ctx.services.resolutions.update_status(ctx.params["id"], payload)
    return Reply(resolution.to_json())


@router.post("/:id/resolve")
def resolve_resolution(ctx: RequestContext) -> Reply:
    payload = resolution_schemas.ResolveResolutionRequest.model_validate(ctx.body)
    resolution = ctx.services.resolutions.resolve(ctx.params["id"], payload)
    return Reply(resolution.to_json())
