"""Data models for correlated incidents."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator


class AlertSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AlertStatus(str, Enum):
    ACTIVE = "active"
    INVESTIGATING = "investigating"  # manual triage only, never entered automatically
    HEALING = "healing"
    RESOLVED = "resolved"


class AlertDraft(BaseModel):
    """Candidate incident proposed by the correlation service."""

    title: str
    description: str = ""
    severity: AlertSeverity = AlertSeverity.MEDIUM
    affected_service: str
    suggested_fix: str = ""
    related_log_ids: list[str] = []

    @field_validator("severity", mode="before")
    @classmethod
    def _lower_severity(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class Alert(BaseModel):
    """A correlated incident and its healing progress.

    Alerts are immutable; the alert store swaps in a new copy on every change.
    """

    model_config = {"frozen": True}

    id: str = Field(default_factory=lambda: f"alert-{uuid4().hex[:12]}")
    title: str
    description: str = ""
    severity: AlertSeverity
    status: AlertStatus = AlertStatus.ACTIVE
    affected_service: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    agent_thoughts: tuple[str, ...] = ()
    fix_action: str | None = None
    suggested_fix: str = ""
    related_log_ids: tuple[str, ...] = ()

    @classmethod
    def from_draft(cls, draft: AlertDraft, known_log_ids: set[str]) -> Alert:
        """Materialize a draft, dropping links to logs that do not exist yet."""
        related = tuple(dict.fromkeys(i for i in draft.related_log_ids if i in known_log_ids))
        return cls(
            title=draft.title,
            description=draft.description,
            severity=draft.severity,
            affected_service=draft.affected_service,
            suggested_fix=draft.suggested_fix,
            related_log_ids=related,
        )
