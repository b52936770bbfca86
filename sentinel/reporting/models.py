"""Data models for dashboard reporting."""

from __future__ import annotations

from pydantic import BaseModel


class ServiceErrorCount(BaseModel):
    service: str
    errors: int


class HealthSummary(BaseModel):
    """Aggregate view of both stores for the dashboard."""

    total_logs: int = 0
    error_count: int = 0
    warning_count: int = 0
    healthy_count: int = 0
    open_alerts: int = 0
    healing_alerts: int = 0
    resolved_alerts: int = 0
    level_counts: dict[str, int] = {}
    errors_by_service: list[ServiceErrorCount] = []
