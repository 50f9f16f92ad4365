"""Pydantic schemas for resolution records."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import ConfigDict, Field

from ..schemas import ApiModel, Severity


class ResolutionStatus(str, Enum):
    INVESTIGATING = "investigating"
    AWAITING_FIX = "awaiting_fix"
    FIX_IN_PROGRESS = "fix_in_progress"
    AWAITING_DEPLOY = "awaiting_deploy"
    DEPLOYED = "deployed"
    MONITORING = "monitoring"
    RESOLVED = "resolved"
    WONT_FIX = "wont_fix"
    DUPLICATE = "duplicate"


class TimelineEntry(ApiModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    event: str


class Resolution(ApiModel):
    id: str
    conversation_id: str
    customer_id: str
    title: str
    description: str
    issue_type: str = "unknown"
    priority: Severity = Severity.P2
    status: ResolutionStatus = ResolutionStatus.INVESTIGATING
    assigned_team_id: str | None = None
    assigned_engineer_id: str | None = None
    root_cause: str | None = None
    affected_systems: list[str] = Field(default_factory=list)
    resolution_notes: str | None = None
    timeline: list[TimelineEntry] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    resolved_at: datetime | None = None


# Request payloads ------------------------------------------------------------


class ResolutionCreate(ApiModel):
    conversation_id: str | None = None
    title: str | None = None
    description: str | None = None
    issue_type: str | None = None
    priority: Severity | None = None
    assigned_team_id: str | None = None
    assigned_engineer_id: str | None = None
    affected_systems: list[str] = Field(default_factory=list)


class StatusUpdate(ApiModel):
    status: ResolutionStatus | None = None
    root_cause: str | None = None
    affected_systems: list[str] | None = None
    assigned_engineer_id: str | None = None


class ResolveResolutionRequest(ApiModel):
    resolution_notes: str | None = None
    root_cause: str | None = None
