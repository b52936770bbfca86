"""
Unit tests for the related-log view.
"""
from sentinel.detection.models import Alert
from sentinel.ingestion.models import LogLevel
from sentinel.reporting.related import related_logs

from conftest import make_log


def test_explicit_links_keep_store_order():
    logs = [make_log("log-1"), make_log("log-2"), make_log("log-3")]
    alert = Alert(title="t", severity="high", affected_service="Kafka", related_log_ids=("log-3", "log-1"))

    assert [r.id for r in related_logs(alert, logs)] == ["log-1", "log-3"]


def test_fallback_uses_service_problem_logs():
    logs = [
        make_log("log-1", service="Kafka", level=LogLevel.WARNING),
        make_log("log-2", service="Kafka", level=LogLevel.INFO),
        make_log("log-3", service="SAP", level=LogLevel.ERROR),
    ]
    alert = Alert(title="lag", severity="medium", affected_service="Kafka")

    assert [r.id for r in related_logs(alert, logs)] == ["log-1"]


def test_fallback_includes_error_and_critical():
    logs = [
        make_log("log-1", service="Snowflake", level=LogLevel.CRITICAL),
        make_log("log-2", service="Snowflake", level=LogLevel.SUCCESS),
        make_log("log-3", service="Snowflake", level=LogLevel.ERROR),
    ]
    alert = Alert(title="stale", severity="critical", affected_service="Snowflake")

    assert [r.id for r in related_logs(alert, logs)] == ["log-1", "log-3"]


def test_no_match_means_no_filter():
    logs = [make_log("log-1", service="SAP"), make_log("log-2", service="Kafka")]
    alert = Alert(title="t", severity="low", affected_service="Informatica")

    assert related_logs(alert, logs) == logs


def test_dangling_links_mean_no_filter():
    logs = [make_log("log-1"), make_log("log-2")]
    alert = Alert(title="t", severity="low", affected_service="Kafka", related_log_ids=("gone",))

    assert related_logs(alert, logs) == logs


def test_empty_store():
    alert = Alert(title="t", severity="low", affected_service="Kafka")
    assert related_logs(alert, []) == []
