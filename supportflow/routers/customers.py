"""Customer API routes."""

from __future__ import annotations

from ..customers import schemas as customer_schemas
from ..routing import Reply, RequestContext, RouteTable, paginate

router = RouteTable(prefix="/api/customers")


@router.get("")
def list_customers(ctx: RequestContext) -> Reply:
    page, page_size = ctx.page()
    items = ctx.services.customers.list_customers(tiers=ctx.query_list("tier"))
    return Reply.page_of(
        [c.to_json() for c in paginate(items, page, page_size)],
        page=page,
        page_size=page_size,
        total=len(items),
    )


@router.post("")
def create_customer(ctx: RequestContext) -> Reply:
    payload = customer_schemas.CustomerCreate.model_validate(ctx.body)
    customer = ctx.services.customers.create_customer(payload)
    return Reply(customer.to_json(), status_code=201)


@router.get("/:id")
def get_customer(ctx: RequestContext) -> Reply:
    customer = ctx.services.customers.get_customer(ctx.params["id"])
    return Reply(customer.to_json())


@router.get("/:id/conversations")
def customer_conversations(ctx: RequestContext) -> Reply:
    """Conversations owned by the customer, most severe first."""

    customer = ctx.services.customers.get_customer(ctx.params["id"])
    items = ctx.services.conversations.list_conversations(customer_id=customer.id)
    return Reply([c.to_json() for c in items])
