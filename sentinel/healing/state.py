"""Healing state — the typed state object that flows through the healing graph."""

from __future__ import annotations

from typing import TypedDict

from sentinel.healing.models import Diagnosis


class HealingState(TypedDict, total=False):
    # Input
    alert_id: str

    # Diagnosis
    diagnosis: Diagnosis
    diagnosis_failed: bool

    # Output
    outcome: str  # "resolved", "stalled"
