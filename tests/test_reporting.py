"""
Unit tests for the synthetic scenario and dashboard summary.
"""
import random
from datetime import datetime, timezone

from sentinel.detection.models import Alert, AlertStatus
from sentinel.ingestion.models import LogLevel
from sentinel.ingestion.scenarios import SERVICES, generate_enterprise_logs, heartbeat_record
from sentinel.reporting.summary import summarize

from conftest import make_log


def test_enterprise_scenario_is_sorted_and_unique():
    now = datetime(2024, 3, 31, 12, 0, tzinfo=timezone.utc)
    logs = generate_enterprise_logs(now=now, rng=random.Random(7))

    timestamps = [r.timestamp for r in logs]
    assert timestamps == sorted(timestamps)
    assert len({r.id for r in logs}) == len(logs)
    assert all(r.id.startswith("ent-") for r in logs)
    assert all(r.timestamp <= now for r in logs)
    assert {r.service for r in logs} <= set(SERVICES)


def test_enterprise_scenario_contains_the_cascade():
    logs = generate_enterprise_logs(rng=random.Random(1))

    critical = [r for r in logs if r.level == LogLevel.CRITICAL]
    assert [r.service for r in critical] == ["Snowflake"]
    errors = {r.service for r in logs if r.level == LogLevel.ERROR}
    assert errors == {"AWS Glue", "Informatica", "SAP", "Snowflake"}
    assert all(r.raw and r.service in r.raw for r in logs)


def test_heartbeat_record():
    record = heartbeat_record()
    assert record.level == LogLevel.INFO
    assert record.service == "System Monitor"


def test_summarize_counts():
    logs = [
        make_log("a", service="SAP", level=LogLevel.ERROR),
        make_log("b", service="SAP", level=LogLevel.CRITICAL),
        make_log("c", service="Kafka", level=LogLevel.ERROR),
        make_log("d", service="Kafka", level=LogLevel.WARNING),
        make_log("e", level=LogLevel.INFO),
        make_log("f", level=LogLevel.SUCCESS),
    ]
    alerts = [
        Alert(title="a", severity="high", affected_service="SAP"),
        Alert(title="b", severity="low", affected_service="Kafka", status=AlertStatus.HEALING),
        Alert(title="c", severity="low", affected_service="Kafka", status=AlertStatus.RESOLVED),
    ]

    summary = summarize(logs, alerts)

    assert summary.total_logs == 6
    assert summary.error_count == 3
    assert summary.warning_count == 1
    assert summary.healthy_count == 2
    assert summary.open_alerts == 2
    assert summary.healing_alerts == 1
    assert summary.resolved_alerts == 1
    assert summary.level_counts["SUCCESS"] == 1
    assert [(s.service, s.errors) for s in summary.errors_by_service] == [("SAP", 2), ("Kafka", 1)]


def test_summarize_empty():
    summary = summarize([], [])
    assert summary.total_logs == 0
    assert summary.errors_by_service == []
