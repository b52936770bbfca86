"""Prometheus metrics definitions."""

from prometheus_client import Counter, Gauge, Histogram, generate_latest, CONTENT_TYPE_LATEST

http_request_duration = Histogram(
    "http_request_duration_seconds",
    "Duration of HTTP requests in seconds",
    labelnames=["method", "endpoint", "status_code"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

http_requests_total = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    labelnames=["method", "endpoint", "status_code"],
)

logs_ingested_total = Counter(
    "sentinel_logs_ingested_total",
    "Log records appended to the log store",
    labelnames=["source"],
)

detection_runs_total = Counter(
    "sentinel_detection_runs_total",
    "Incident detection passes that reached the correlation service",
    labelnames=["outcome"],
)

alerts_created_total = Counter(
    "sentinel_alerts_created_total",
    "Alerts materialized into the alert store",
    labelnames=["severity"],
)

healing_outcomes_total = Counter(
    "sentinel_healing_outcomes_total",
    "Finished healing sequences by outcome",
    labelnames=["outcome"],
)

healing_in_flight = Gauge(
    "sentinel_healing_in_flight",
    "Healing sequences currently running",
)

collaborator_failures_total = Counter(
    "sentinel_collaborator_failures_total",
    "Inference collaborator calls replaced by a fallback result",
    labelnames=["collaborator"],
)

diagnosis_duration = Histogram(
    "sentinel_diagnosis_duration_seconds",
    "Latency of diagnosis service calls",
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)


def get_metrics() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST
