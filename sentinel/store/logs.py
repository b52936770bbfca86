"""Append-only log store — the source of truth for detection and filtering."""

from __future__ import annotations

import logging
from typing import Iterable

from sentinel.ingestion.models import LogRecord
from sentinel.store.events import EventKind, Listener, StoreEvent

logger = logging.getLogger("sentinel.store")


class LogStore:
    """Ordered, append-only sequence of log records with unique ids."""

    def __init__(self) -> None:
        self._records: list[LogRecord] = []
        self._ids: set[str] = set()
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def append(self, records: Iterable[LogRecord]) -> list[LogRecord]:
        """Append records in order and return the ones accepted.

        Records whose id is already stored are skipped.
        """
        accepted = []
        for record in records:
            if record.id in self._ids:
                logger.warning("Skipping duplicate log id=%s", record.id)
                continue
            self._ids.add(record.id)
            accepted.append(record)

        if not accepted:
            return []

        self._records.extend(accepted)
        event = StoreEvent(kind=EventKind.LOGS_APPENDED, count=len(accepted))
        for listener in self._listeners:
            listener(event)
        return accepted

    def snapshot(self) -> list[LogRecord]:
        return list(self._records)

    def ids(self) -> set[str]:
        return set(self._ids)

    def __contains__(self, log_id: object) -> bool:
        return log_id in self._ids

    def __len__(self) -> int:
        return len(self._records)
