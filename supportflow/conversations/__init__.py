"""Conversation lifecycle services and schemas."""

from . import schemas
from .schemas import ConversationState, MessageDirection, SenderType
from .service import ConversationService

__all__ = [
    "ConversationService",
    "ConversationState",
    "MessageDirection",
    "SenderType",
    "schemas",
]
