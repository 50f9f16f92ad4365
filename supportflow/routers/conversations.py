"""Conversation lifecycle API routes."""

from __future__ import annotations

from ..conversations import schemas as convo_schemas
from ..routing import Reply, RequestContext, RouteTable, paginate

router = RouteTable(prefix="/api/conversations")


@router.get("")
def list_conversations(ctx: RequestContext) -> Reply:
    """List conversations filtered by ``state``/``severity``/``channel`` (csv)."""

    page, page_size = ctx.page()
    items = ctx.services.conversations.list_conversations(
        states=ctx.query_list("state"),
        severities=ctx.query_list("severity"),
        channels=ctx.query_list("channel"),
    )
    return Reply.page_of(
        [c.to_json() for c in paginate(items, page, page_size)],
        page=page,
        page_size=page_size,
        total=len(items),
    )


@router.post("")
def create_conversation(ctx: RequestContext) -> Reply:
    payload = convo_schemas.ConversationCreate.model_validate(ctx.body)
    conversation = ctx.services.conversations.create_conversation(payload)
    return Reply(conversation.to_json(), status_code=201)


@router.get("/:id")
def get_conversation(ctx: RequestContext) -> Reply:
    """Return the conversation with its messages in chronological order."""

    detail = ctx.services.conversations.get_conversation(ctx.params["id"])
    return Reply(detail.to_json())


@router.get("/:id/messages")
def list_messages(ctx: RequestContext) -> Reply:
    messages = ctx.services.conversations.list_messages(ctx.params["id"])
    return Reply([m.to_json() for m in messages])


@router.post("/:id/messages")
def post_message(ctx: RequestContext) -> Reply:
    payload = convo_schemas.MessageCreate.model_validate(ctx.body)
    message = ctx.services.conversations.post_message(
        ctx.params["id"], payload, actor=ctx.actor
    )
    return Reply(message.to_json(), status_code=201)


@router.post("/:id/assign")
def assign_conversation(ctx: RequestContext) -> Reply:
    payload = convo_schemas.AssignRequest.model_validate(ctx.body)
    conversation = ctx.services.conversations.assign(
        ctx.params["id"], payload, actor=ctx.actor
    )
    return Reply(conversation.to_json())


@router.post("/:id/escalate")
def escalate_conversation(ctx: RequestContext) -> Reply:
    """Escalate, optionally spawning a resolution record."""

    payload = convo_schemas.EscalationRequest.model_validate(ctx.body)
    result = ctx.services.conversations.escalate(ctx.params["id"], payload)
    return Reply(result.to_json())


@router.post("/:id/resolve")
def resolve_conversation(ctx: RequestContext) -> Reply:
    payload = convo_schemas.ResolveRequest.model_validate(ctx.body)
    conversation = ctx.services.conversations.resolve(ctx.params["id"], payload)
    return Reply(conversation.to_json())
