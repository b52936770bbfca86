"""Data models for log ingestion."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"
    SUCCESS = "SUCCESS"


# Levels that count as a problem signal for correlation and filtering.
PROBLEM_LEVELS = frozenset({LogLevel.WARNING, LogLevel.ERROR, LogLevel.CRITICAL})

# Levels that arm the incident detector.
FAILURE_LEVELS = frozenset({LogLevel.ERROR, LogLevel.CRITICAL})

_LEVEL_ALIASES = {
    "WARN": "WARNING",
    "ERR": "ERROR",
    "FATAL": "CRITICAL",
    "DEBUG": "INFO",
    "OK": "SUCCESS",
}


def new_log_id(prefix: str) -> str:
    return f"{prefix}-{uuid4().hex[:12]}"


class LogRecord(BaseModel):
    """A single structured observation from a monitored service."""

    model_config = {"frozen": True}

    id: str = Field(default_factory=lambda: new_log_id("log"))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    service: str
    level: LogLevel
    message: str
    raw: str | None = None

    @property
    def is_problem(self) -> bool:
        return self.level in PROBLEM_LEVELS

    @property
    def is_failure(self) -> bool:
        return self.level in FAILURE_LEVELS


class ParsedLogLine(BaseModel):
    """One entry of the parser's JSON reply, before ids and timestamps are assigned."""

    timestamp: str = ""
    service: str = "unknown"
    level: LogLevel = LogLevel.INFO
    message: str

    @field_validator("level", mode="before")
    @classmethod
    def _coerce_level(cls, value):
        if isinstance(value, str):
            value = value.strip().upper()
            return _LEVEL_ALIASES.get(value, value)
        return value


class LogBatch(BaseModel):
    """Pre-structured batch posted by an alternate log source."""

    records: list[LogRecord]
