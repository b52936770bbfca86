"""Synthetic log sources — the enterprise demo scenario and live heartbeats."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

from sentinel.ingestion.models import LogLevel, LogRecord, new_log_id

SERVICES = [
    "Salesforce",
    "Amazon Connect",
    "Kafka",
    "Informatica",
    "AWS Glue",
    "Snowflake",
    "SAP",
    "Sales System",
]

HEARTBEAT_SERVICE = "System Monitor"

# "End of quarter data pipeline failure": a batch upload backs up Kafka,
# Glue runs out of memory and every downstream consumer starves.
# (minutes ago, service, level, message)
_INCIDENT_TIMELINE = [
    (180, "Sales System", LogLevel.INFO,
     "Initiating End-of-Quarter Batch Upload (Projected: 2.5M records)."),
    (179, "Salesforce", LogLevel.INFO, "Bulk API Job 7502 created. Status: Uploading"),
    (170, "Kafka", LogLevel.INFO, "Topic `sales-raw` partition 0 leader re-election initiated."),
    (165, "Kafka", LogLevel.WARNING,
     "Consumer Group `glue-ingest-prod` lag increasing. Current lag: 50,000 msgs."),
    (160, "AWS Glue", LogLevel.INFO,
     "Job run `glue-sales-bronze` started. WorkerType: G.2X. "
     "Args: [--conf, spark.executor.memory=8g]"),
    (155, "Amazon Connect", LogLevel.WARNING,
     "High latency detected in Contact Flow `Sales_Support`. Average handle time +15%."),
    (150, "AWS Glue", LogLevel.WARNING,
     "Container memory limit exceeded. Shuffle spill to disk is critical."),
    (149, "AWS Glue", LogLevel.ERROR,
     "Job run failed. Error: Java Heap Space / OOM. Driver unresponsive. YARN killed container."),
    (140, "Informatica", LogLevel.INFO, "Workflow `wkf_silver_enrich` triggered by schedule."),
    (139, "Informatica", LogLevel.ERROR,
     "Dependency Error: S3 Bucket `sales-bronze-output` is empty. Manifest not found."),
    (130, "SAP", LogLevel.ERROR,
     "IDoc inbound processing failed. Mandatory field `ORDER_ID` missing from payload "
     "(Data not enriched)."),
    (120, "Snowflake", LogLevel.CRITICAL, "Pipe `SALES_PIPE` status: STALLED. File count pending: 0."),
    (119, "Snowflake", LogLevel.ERROR,
     "Data Freshness SLA breached for table `FACT_SALES`. Last update > 4 hours."),
    (118, "Snowflake", LogLevel.WARNING,
     'Executive Dashboard Query: "Select * from FACT_SALES" returned stale data.'),
    (10, "Salesforce", LogLevel.INFO, "API usage normal."),
    (5, "Amazon Connect", LogLevel.INFO, "Metric data exported successfully."),
]


def _record(now: datetime, minutes_ago: int, service: str, level: LogLevel, message: str) -> LogRecord:
    ts = now - timedelta(minutes=minutes_ago)
    return LogRecord(
        id=new_log_id("ent"),
        timestamp=ts,
        service=service,
        level=level,
        message=message,
        raw=f"{ts.isoformat()} [{level.value}] {service}: {message}",
    )


def generate_enterprise_logs(
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> list[LogRecord]:
    """Build 24h of background health checks plus the pipeline failure cascade, oldest first."""
    now = now or datetime.now(timezone.utc)
    rng = rng or random.Random()

    logs = []
    for minutes_ago in range(1440, 0, -60):
        for service in SERVICES:
            if rng.random() > 0.7:
                logs.append(_record(
                    now, minutes_ago, service, LogLevel.INFO,
                    "Health check passed. Service availability: 99.9%",
                ))

    for minutes_ago, service, level, message in _INCIDENT_TIMELINE:
        logs.append(_record(now, minutes_ago, service, level, message))

    logs.sort(key=lambda r: r.timestamp)
    return logs


def heartbeat_record() -> LogRecord:
    return LogRecord(
        id=new_log_id("live"),
        service=HEARTBEAT_SERVICE,
        level=LogLevel.INFO,
        message="Heartbeat check passed. System metrics validated.",
    )
