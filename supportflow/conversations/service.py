"""Conversation lifecycle: the state machine behind the conversation API.

States move ``open`` -> ``awaiting_customer`` / ``awaiting_agent`` as agents and
customers take turns, to ``escalated`` when specialised handling is needed and
finally to ``resolved``. ``resolved`` is terminal: later messages or
assignments are recorded but never move the conversation out of it, and
escalating a resolved conversation is refused.

Every message written goes through :meth:`ConversationService._append_message`
so ``message_count`` always equals the stored sequence length.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from ..core import (
    ConflictError,
    InvalidRequestError,
    NotFoundError,
    Settings,
    new_id,
    utcnow,
)
from ..schemas import Severity, severity_rank
from . import schemas
from .schemas import (
    DEFAULT_CHANNEL,
    INTERNAL_CHANNEL,
    ConversationState,
    MessageDirection,
    SenderType,
    Sentiment,
)

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..customers.service import CustomerService
    from ..resolutions.service import ResolutionService
    from ..security.users import Actor
    from ..store import EntityStore

logger = logging.getLogger(__name__)

# (direction, sender) pairs that hand the turn to the other party.
_TURN_TRANSITIONS = {
    (MessageDirection.OUTBOUND, SenderType.AGENT): ConversationState.AWAITING_CUSTOMER,
    (MessageDirection.INBOUND, SenderType.CUSTOMER): ConversationState.AWAITING_AGENT,
}


class ConversationService:
    """Coordinates conversation state, message bookkeeping and escalation."""

    def __init__(
        self,
        store: EntityStore,
        customers: CustomerService,
        resolutions: ResolutionService,
        settings: Settings,
    ) -> None:
        self._store = store
        self._customers = customers
        self._resolutions = resolutions
        self._settings = settings

    # ------------------------------------------------------------------
    # Queries

    def list_conversations(
        self,
        states: list[str] | None = None,
        severities: list[str] | None = None,
        channels: list[str] | None = None,
        customer_id: str | None = None,
    ) -> list[schemas.Conversation]:
        """Filter (OR within a field, AND across fields) and order by severity."""

        items = self._store.conversations.list()
        if customer_id is not None:
            items = [c for c in items if c.customer_id == customer_id]
        if states:
            items = [c for c in items if c.state.value in states]
        if severities:
            items = [c for c in items if c.severity.value in severities]
        if channels:
            items = [c for c in items if c.current_channel in channels]
        return sorted(items, key=lambda c: severity_rank(c.severity))

    def get_conversation(self, conversation_id: str) -> schemas.ConversationDetail:
        conversation = self._require(conversation_id)
        return schemas.ConversationDetail(
            **conversation.model_dump(),
            messages=self._store.messages.list_for(conversation_id),
        )

    def list_messages(self, conversation_id: str) -> list[schemas.Message]:
        self._require(conversation_id)
        return self._store.messages.list_for(conversation_id)

    # ------------------------------------------------------------------
    # Actions

    def create_conversation(
        self, payload: schemas.ConversationCreate
    ) -> schemas.Conversation:
        customer = self._customers.ensure_customer(
            payload.customer_id,
            name=payload.customer_name,
            email=payload.customer_email,
        )
        channel = payload.channel or DEFAULT_CHANNEL
        now = utcnow()
        conversation = schemas.Conversation(
            id=new_id("conv"),
            customer_id=customer.id,
            customer_name=payload.customer_name or customer.name,
            customer_email=payload.customer_email or customer.email,
            state=ConversationState.OPEN,
            severity=payload.severity or Severity.P2,
            sentiment=payload.sentiment or Sentiment.NEUTRAL,
            current_channel=channel,
            channels_used=[channel],
            assigned_team_id=self._settings.default_support_team,
            subject=payload.subject or "New conversation",
            tags=list(dict.fromkeys(payload.tags)),
            intent=payload.intent,
            sla=schemas.SlaTimers(
                first_response_due_at=now
                + timedelta(minutes=self._settings.sla_first_response_minutes),
                resolution_due_at=now
                + timedelta(minutes=self._settings.sla_resolution_minutes),
            ),
            created_at=now,
            updated_at=now,
            last_message_at=now,
        )
        if payload.initial_message:
            self._append_message(
                conversation,
                channel=channel,
                direction=MessageDirection.INBOUND,
                sender_type=SenderType.CUSTOMER,
                sender_id=customer.id,
                sender_name=conversation.customer_name or "Customer",
                content=payload.initial_message,
                status="delivered",
                at=now,
            )
        self._store.conversations.save(conversation)
        logger.info(
            "Conversation %s opened for customer %s on %s",
            conversation.id,
            conversation.customer_id,
            channel,
        )
        return conversation

    def post_message(
        self,
        conversation_id: str,
        payload: schemas.MessageCreate,
        actor: Actor | None = None,
    ) -> schemas.Message:
        conversation = self._require(conversation_id)
        # Omitted fields are stored as an outbound agent message but never move the turn.
        direction = payload.direction or MessageDirection.OUTBOUND
        sender_type = payload.sender_type or SenderType.AGENT
        sender_id = payload.sender_id
        if sender_id is None and actor is not None and sender_type == SenderType.AGENT:
            sender_id = actor.user_id
        if sender_type == SenderType.AGENT:
            sender_name = actor.name if actor is not None else "Support Agent"
        elif sender_type == SenderType.CUSTOMER:
            sender_name = conversation.customer_name
        else:
            sender_name = None
        now = utcnow()
        message = self._append_message(
            conversation,
            channel=payload.channel or conversation.current_channel,
            direction=direction,
            sender_type=sender_type,
            sender_id=sender_id,
            sender_name=sender_name,
            content=payload.content,
            content_type=payload.content_type,
            status="sent",
            at=now,
        )
        target = None
        if payload.direction is not None and payload.sender_type is not None:
            target = _TURN_TRANSITIONS.get((payload.direction, payload.sender_type))
        if target is not None:
            self._transition(conversation, target)
        self._store.conversations.save(conversation)
        return message

    def assign(
        self,
        conversation_id: str,
        payload: schemas.AssignRequest,
        actor: Actor | None = None,
    ) -> schemas.Conversation:
        conversation = self._require(conversation_id)
        agent_id = payload.agent_id or (actor.user_id if actor is not None else None)
        if not agent_id:
            raise InvalidRequestError("agentId is required")
        conversation.assigned_agent_id = agent_id
        if payload.team_id:
            conversation.assigned_team_id = payload.team_id
        self._transition(conversation, ConversationState.AWAITING_AGENT)
        conversation.updated_at = utcnow()
        self._store.conversations.save(conversation)
        logger.info("Conversation %s assigned to %s", conversation.id, agent_id)
        return conversation

    def escalate(
        self, conversation_id: str, payload: schemas.EscalationRequest
    ) -> schemas.EscalationResult:
        conversation = self._require(conversation_id)
        if conversation.state == ConversationState.RESOLVED:
            raise ConflictError(
                f"Conversation {conversation.id} is resolved and cannot be escalated"
            )
        now = utcnow()
        self._transition(conversation, ConversationState.ESCALATED)
        conversation.updated_at = now
        if payload.create_resolution and not conversation.resolution_id:
            self._resolutions.open_for(
                conversation,
                event="Resolution created from escalation",
                description=payload.reason or "Escalated from conversation",
                priority=payload.priority,
            )
        self._append_message(
            conversation,
            channel=INTERNAL_CHANNEL,
            direction=MessageDirection.INTERNAL,
            sender_type=SenderType.SYSTEM,
            content=f"Conversation escalated. Reason: {payload.reason or 'No reason provided'}",
            status="delivered",
            at=now,
        )
        self._store.conversations.save(conversation)
        return schemas.EscalationResult(
            conversation=conversation,
            resolution_id=conversation.resolution_id,
        )

    def resolve(
        self, conversation_id: str, payload: schemas.ResolveRequest
    ) -> schemas.Conversation:
        conversation = self._require(conversation_id)
        now = utcnow()
        self._transition(conversation, ConversationState.RESOLVED)
        conversation.resolved_at = now
        conversation.updated_at = now
        notes = f" Notes: {payload.resolution_notes}" if payload.resolution_notes else ""
        self._append_message(
            conversation,
            channel=INTERNAL_CHANNEL,
            direction=MessageDirection.INTERNAL,
            sender_type=SenderType.SYSTEM,
            content=f"Conversation resolved.{notes}",
            status="delivered",
            at=now,
        )
        self._store.conversations.save(conversation)
        return conversation

    # ------------------------------------------------------------------
    # Helpers

    def _require(self, conversation_id: str) -> schemas.Conversation:
        conversation = self._store.conversations.get(conversation_id)
        if conversation is None:
            raise NotFoundError("Conversation", conversation_id)
        return conversation

    def _transition(
        self, conversation: schemas.Conversation, target: ConversationState
    ) -> None:
        previous = conversation.state
        if previous == target:
            return
        if previous == ConversationState.RESOLVED:
            logger.debug(
                "Conversation %s is resolved; ignoring move to %s",
                conversation.id,
                target.value,
            )
            return
        conversation.state = target
        logger.info(
            "Conversation %s state %s -> %s",
            conversation.id,
            previous.value,
            target.value,
        )

    def _append_message(
        self,
        conversation: schemas.Conversation,
        *,
        channel: str,
        direction: MessageDirection,
        sender_type: SenderType,
        content: str,
        at: datetime,
        sender_id: str | None = None,
        sender_name: str | None = None,
        content_type: str = "text",
        status: str = "sent",
    ) -> schemas.Message:
        message = schemas.Message(
            id=new_id("msg"),
            conversation_id=conversation.id,
            channel=channel,
            direction=direction,
            sender_type=sender_type,
            sender_id=sender_id,
            sender_name=sender_name,
            content=content,
            content_type=content_type,
            status=status,
            created_at=at,
        )
        self._store.messages.append(message)
        conversation.message_count = self._store.messages.count_for(conversation.id)
        conversation.last_message_at = at
        conversation.updated_at = at
        if channel != INTERNAL_CHANNEL:
            conversation.current_channel = channel
            if channel not in conversation.channels_used:
                conversation.channels_used.append(channel)
        return message
