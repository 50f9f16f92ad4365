"""Storage for conversations and their message sequences."""
from __future__ import annotations

from typing import Dict, List, Optional, Protocol

from . import schemas


class ConversationRepository(Protocol):
    """Abstraction for persisting conversations."""

    def get(self, conversation_id: str) -> Optional[schemas.Conversation]: ...

    def save(self, conversation: schemas.Conversation) -> schemas.Conversation: ...

    def list(self) -> List[schemas.Conversation]: ...


class MessageRepository(Protocol):
    """Append-only message sequences keyed by conversation."""

    def append(self, message: schemas.Message) -> schemas.Message: ...

    def list_for(self, conversation_id: str) -> List[schemas.Message]: ...

    def count_for(self, conversation_id: str) -> int: ...


class InMemoryConversationRepository:
    """Process-local implementation of :class:`ConversationRepository`.

    Stored objects are copies, so a caller must ``save`` a mutated
    conversation for the change to become visible.
    """

    def __init__(self) -> None:
        self._conversations: Dict[str, schemas.Conversation] = {}

    def get(self, conversation_id: str) -> Optional[schemas.Conversation]:
        conversation = self._conversations.get(conversation_id)
        return conversation.model_copy(deep=True) if conversation else None

    def save(self, conversation: schemas.Conversation) -> schemas.Conversation:
        self._conversations[conversation.id] = conversation.model_copy(deep=True)
        return conversation

    def list(self) -> List[schemas.Conversation]:
        return [c.model_copy(deep=True) for c in self._conversations.values()]


class InMemoryMessageRepository:
    """Process-local implementation of :class:`MessageRepository`."""

    def __init__(self) -> None:
        self._messages: Dict[str, List[schemas.Message]] = {}

    def append(self, message: schemas.Message) -> schemas.Message:
        self._messages.setdefault(message.conversation_id, []).append(message)
        return message

    def list_for(self, conversation_id: str) -> List[schemas.Message]:
        return list(self._messages.get(conversation_id, []))

    def count_for(self, conversation_id: str) -> int:
        return len(self._messages.get(conversation_id, []))
