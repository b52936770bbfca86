"""Dashboard summary — counts over the log and alert stores."""

from __future__ import annotations

from collections import Counter

from sentinel.detection.models import Alert, AlertStatus
from sentinel.ingestion.models import LogLevel, LogRecord
from sentinel.reporting.models import HealthSummary, ServiceErrorCount


def summarize(logs: list[LogRecord], alerts: list[Alert]) -> HealthSummary:
    levels = Counter(r.level for r in logs)
    errors_by_service = Counter(r.service for r in logs if r.is_failure)

    return HealthSummary(
        total_logs=len(logs),
        error_count=levels[LogLevel.ERROR] + levels[LogLevel.CRITICAL],
        warning_count=levels[LogLevel.WARNING],
        healthy_count=levels[LogLevel.INFO] + levels[LogLevel.SUCCESS],
        open_alerts=sum(1 for a in alerts if a.status != AlertStatus.RESOLVED),
        healing_alerts=sum(1 for a in alerts if a.status == AlertStatus.HEALING),
        resolved_alerts=sum(1 for a in alerts if a.status == AlertStatus.RESOLVED),
        level_counts={level.value: levels[level] for level in LogLevel},
        errors_by_service=[
            ServiceErrorCount(service=service, errors=count)
            for service, count in errors_by_service.most_common()
        ],
    )
