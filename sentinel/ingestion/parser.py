"""Log parser — uses the LLM to turn unstructured log text into LogRecords."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import ValidationError

from sentinel.ingestion.models import LogRecord, ParsedLogLine, new_log_id
from sentinel.llm import reply_text

logger = logging.getLogger("sentinel.ingestion")

_SYSTEM_PROMPT = """\
You are a log normalization engine for a data platform (Snowflake, SAP, Salesforce, \
AWS Glue, Kafka, Informatica, Amazon Connect). Parse the raw log lines you are given \
into structured entries, one entry per input line, in input order.

Respond ONLY with a JSON array matching this schema:
[
  {
    "timestamp": "ISO 8601 timestamp if possible, otherwise the original text",
    "service": "name of the service or component",
    "level": "INFO | WARNING | ERROR | CRITICAL | SUCCESS",
    "message": "clean text description"
  }
]

If the level is ambiguous, infer it from the message content.
"""


def _parse_ts(raw: str) -> datetime:
    if not raw:
        return datetime.now(timezone.utc)
    try:
        ts = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return datetime.now(timezone.utc)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def _to_record(line: ParsedLogLine, raw_line: str) -> LogRecord:
    return LogRecord(
        id=new_log_id("parsed"),
        timestamp=_parse_ts(line.timestamp),
        service=line.service,
        level=line.level,
        message=line.message,
        raw=raw_line,
    )


async def parse_logs(llm: BaseChatModel | None, text: str) -> list[LogRecord]:
    """Parse raw log text into records. Never raises; returns [] on any failure."""
    if llm is None:
        logger.warning("Log parser unavailable: no LLM configured")
        return []
    if not text.strip():
        return []

    try:
        response = await llm.ainvoke([
            SystemMessage(content=_SYSTEM_PROMPT),
            HumanMessage(content=f"Raw logs:\n{text}"),
        ])
        parsed = json.loads(reply_text(response))
    except Exception:
        logger.exception("Log parsing failed")
        return []

    if not isinstance(parsed, list):
        logger.warning("Log parser returned %s instead of a list", type(parsed).__name__)
        return []

    raw_lines = text.split("\n")
    records = []
    for idx, item in enumerate(parsed):
        try:
            line = ParsedLogLine.model_validate(item)
        except ValidationError:
            logger.warning("Skipping malformed parsed log entry #%d: %s", idx, item)
            continue
        raw_line = raw_lines[idx] if idx < len(raw_lines) else ""
        records.append(_to_record(line, raw_line))

    logger.info("Parsed %d log records from %d raw lines", len(records), len(raw_lines))
    return records
