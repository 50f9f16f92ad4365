"""Pydantic schemas for conversations and their messages."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import ConfigDict, Field

from ..schemas import ApiModel, Severity


class ConversationState(str, Enum):
    OPEN = "open"
    AWAITING_CUSTOMER = "awaiting_customer"
    AWAITING_AGENT = "awaiting_agent"
    ESCALATED = "escalated"
    RESOLVED = "resolved"


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"
    ANGRY = "angry"


class MessageDirection(str, Enum):
    INBOUND = "inbound"
    OUTBOUND = "outbound"
    INTERNAL = "internal"


class SenderType(str, Enum):
    CUSTOMER = "customer"
    AGENT = "agent"
    SYSTEM = "system"


INTERNAL_CHANNEL = "internal"
DEFAULT_CHANNEL = "web_chat"


class SlaTimers(ApiModel):
    first_response_due_at: datetime
    resolution_due_at: datetime
    breached: bool = False


class Conversation(ApiModel):
    id: str
    customer_id: str
    customer_name: str | None = None
    customer_email: str | None = None
    state: ConversationState = ConversationState.OPEN
    severity: Severity = Severity.P2
    sentiment: Sentiment = Sentiment.NEUTRAL
    intent: str | None = None
    current_channel: str = DEFAULT_CHANNEL
    channels_used: list[str] = Field(default_factory=list)
    assigned_agent_id: str | None = None
    assigned_team_id: str | None = None
    subject: str = "New conversation"
    tags: list[str] = Field(default_factory=list)
    sla: SlaTimers
    resolution_id: str | None = None
    message_count: int = 0
    created_at: datetime
    updated_at: datetime
    last_message_at: datetime | None = None
    resolved_at: datetime | None = None


class Message(ApiModel):
    model_config = ConfigDict(frozen=True)

    id: str
    conversation_id: str
    channel: str
    direction: MessageDirection
    sender_type: SenderType
    sender_id: str | None = None
    sender_name: str | None = None
    content: str
    content_type: str = "text"
    status: str = "sent"
    created_at: datetime


class ConversationDetail(Conversation):
    messages: list[Message] = Field(default_factory=list)


class EscalationResult(ApiModel):
    conversation: Conversation
    resolution_id: str | None = None


# Request payloads ------------------------------------------------------------


class ConversationCreate(ApiModel):
    customer_id: str | None = None
    customer_name: str | None = None
    customer_email: str | None = None
    channel: str | None = None
    subject: str | None = None
    initial_message: str | None = None
    severity: Severity | None = None
    sentiment: Sentiment | None = None
    intent: str | None = None
    tags: list[str] = Field(default_factory=list)


class MessageCreate(ApiModel):
    content: str = Field(..., min_length=1)
    channel: str | None = None
    direction: MessageDirection | None = None
    sender_type: SenderType | None = None
    sender_id: str | None = None
    content_type: str = "text"


class AssignRequest(ApiModel):
    agent_id: str | None = None
    team_id: str | None = None


class EscalationRequest(ApiModel):
    reason: str | None = None
    create_resolution: bool = False
    priority: Severity | None = None


class ResolveRequest(ApiModel):
    resolution_notes: str | None = None
