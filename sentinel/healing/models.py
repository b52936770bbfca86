"""Data models for the healing sequence."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

FALLBACK_NARRATIVE = "Agent process failed."
FALLBACK_ACTION = "Manual intervention required"


class Diagnosis(BaseModel):
    """Root-cause narrative and remediation reported by the diagnosis service."""

    narrative: str
    action: str
    succeeded: bool = False

    @classmethod
    def fallback(cls) -> Diagnosis:
        return cls(narrative=FALLBACK_NARRATIVE, action=FALLBACK_ACTION, succeeded=False)


class HealingPhase(str, Enum):
    QUEUED = "queued"
    THINKING = "thinking"
    DIAGNOSING = "diagnosing"
    ACTING = "acting"
    STALLED = "stalled"
    DONE = "done"
