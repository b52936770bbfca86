"""Store change notifications consumed by the orchestrator's event queue."""

from __future__ import annotations

from enum import Enum
from typing import Callable

from pydantic import BaseModel


class EventKind(str, Enum):
    LOGS_APPENDED = "logs_appended"
    ALERT_CREATED = "alert_created"
    ALERT_UPDATED = "alert_updated"


class StoreEvent(BaseModel):
    kind: EventKind
    alert_id: str | None = None
    count: int = 0


Listener = Callable[[StoreEvent], None]
