"""Resolution workflow: creation, status changes and terminal resolve."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..conversations.schemas import Conversation
from ..core import (
    ConflictError,
    InvalidRequestError,
    NotFoundError,
    Settings,
    new_id,
    utcnow,
)
from ..schemas import Severity
from . import schemas
from .schemas import ResolutionStatus, TimelineEntry

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..store import EntityStore

logger = logging.getLogger(__name__)


def _unique(values: list[str]) -> list[str]:
    return list(dict.fromkeys(v for v in values if v))


class ResolutionService:
    """Owns the lifecycle of :class:`~.schemas.Resolution` records.

    Status transitions are free-form. Every change appends exactly one
    timeline entry; reaching ``resolved`` also stamps ``resolved_at``.
    """

    def __init__(self, store: EntityStore, settings: Settings) -> None:
        self._store = store
        self._settings = settings

    # ------------------------------------------------------------------
    # Queries

    def list_resolutions(
        self,
        statuses: list[str] | None = None,
        priorities: list[str] | None = None,
    ) -> list[schemas.Resolution]:
        items = self._store.resolutions.list()
        if statuses:
            items = [r for r in items if r.status.value in statuses]
        if priorities:
            items = [r for r in items if r.priority.value in priorities]
        return items

    def get_resolution(self, resolution_id: str) -> schemas.Resolution:
        resolution = self._store.resolutions.get(resolution_id)
        if resolution is None:
            raise NotFoundError("Resolution", resolution_id)
        return resolution

    # ------------------------------------------------------------------
    # Creation

    def open_for(
        self,
        conversation: Conversation,
        *,
        event: str,
        description: str,
        priority: Severity | None = None,
        title: str | None = None,
        issue_type: str | None = None,
        assigned_team_id: str | None = None,
        assigned_engineer_id: str | None = None,
        affected_systems: list[str] | None = None,
    ) -> schemas.Resolution:
        """Create a resolution owned by ``conversation`` and link it back.

        The conversation object is updated in place; persisting it is left to
        the caller, which usually has other changes to save alongside.
        """

        now = utcnow()
        resolution = schemas.Resolution(
            id=new_id("res"),
            conversation_id=conversation.id,
            customer_id=conversation.customer_id,
            title=title or conversation.subject,
            description=description,
            issue_type=issue_type or conversation.intent or "unknown",
            priority=priority or conversation.severity,
            status=ResolutionStatus.INVESTIGATING,
            assigned_team_id=assigned_team_id or self._settings.default_engineering_team,
            assigned_engineer_id=assigned_engineer_id,
            affected_systems=_unique(affected_systems or []),
            timeline=[TimelineEntry(timestamp=now, event=event)],
            created_at=now,
            updated_at=now,
        )
        self._store.resolutions.save(resolution)
        conversation.resolution_id = resolution.id
        logger.info(
            "Resolution %s opened for conversation %s (%s)",
            resolution.id,
            conversation.id,
            resolution.priority.value,
        )
        return resolution

    def create_resolution(self, payload: schemas.ResolutionCreate) -> schemas.Resolution:
        if not payload.conversation_id:
            raise InvalidRequestError("conversationId is required")
        conversation = self._store.conversations.get(payload.conversation_id)
        if conversation is None:
            raise NotFoundError("Conversation", payload.conversation_id)
        if conversation.resolution_id:
            raise ConflictError(
                f"Conversation {conversation.id} already has resolution "
                f"{conversation.resolution_id}"
            )
        resolution = self.open_for(
            conversation,
            event="Resolution created",
            description=payload.description or "Created from conversation",
            priority=payload.priority,
            title=payload.title,
            issue_type=payload.issue_type,
            assigned_team_id=payload.assigned_team_id,
            assigned_engineer_id=payload.assigned_engineer_id,
            affected_systems=payload.affected_systems,
        )
        conversation.updated_at = resolution.created_at
        self._store.conversations.save(conversation)
        return resolution

    # ------------------------------------------------------------------
    # Workflow

    def update_status(
        self, resolution_id: str, payload: schemas.StatusUpdate
    ) -> schemas.Resolution:
        resolution = self.get_resolution(resolution_id)
        now = utcnow()
        if payload.status is not None and payload.status != resolution.status:
            previous = resolution.status
            resolution.status = payload.status
            resolution.timeline.append(
                TimelineEntry(
                    timestamp=now,
                    event=f"Status changed from {previous.value} to {payload.status.value}",
                )
            )
            if payload.status == ResolutionStatus.RESOLVED:
                resolution.resolved_at = now
            elif previous == ResolutionStatus.RESOLVED:
                resolution.resolved_at = None
            logger.info(
                "Resolution %s status %s -> %s",
                resolution.id,
                previous.value,
                payload.status.value,
            )
        if payload.root_cause is not None:
            resolution.root_cause = payload.root_cause
        if payload.affected_systems is not None:
            resolution.affected_systems = _unique(payload.affected_systems)
        if payload.assigned_engineer_id is not None:
            resolution.assigned_engineer_id = payload.assigned_engineer_id
        resolution.updated_at = now
        return self._store.resolutions.save(resolution)

    def resolve(
        self, resolution_id: str, payload: schemas.ResolveResolutionRequest
    ) -> schemas.Resolution:
        """Mark the resolution resolved.

        Calling this again on a resolved record re-stamps ``resolved_at`` and
        ``updated_at`` and appends another timeline entry.
        """

        resolution = self.get_resolution(resolution_id)
        now = utcnow()
        resolution.status = ResolutionStatus.RESOLVED
        resolution.resolved_at = now
        resolution.updated_at = now
        if payload.resolution_notes:
            resolution.resolution_notes = payload.resolution_notes
        if payload.root_cause:
            resolution.root_cause = payload.root_cause
        resolution.timeline.append(
            TimelineEntry(timestamp=now, event="Resolution marked as resolved")
        )
        logger.info("Resolution %s resolved", resolution.id)
        return self._store.resolutions.save(resolution)
