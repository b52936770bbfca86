"""Filter/correlation view — the slice of the log store that explains an alert."""

from __future__ import annotations

from sentinel.detection.models import Alert
from sentinel.ingestion.models import LogRecord


def related_logs(alert: Alert, all_logs: list[LogRecord]) -> list[LogRecord]:
    """Return the logs linked to ``alert``, in log store order.

    Explicit links win. Without them, fall back to the problem-level logs of
    the affected service. If neither finds anything, no filter is applied
    and the full log list is returned.
    """
    if alert.related_log_ids:
        wanted = set(alert.related_log_ids)
        matched = [r for r in all_logs if r.id in wanted]
    else:
        matched = [
            r for r in all_logs
            if r.service == alert.affected_service and r.is_problem
        ]
    return matched if matched else list(all_logs)
