# nocturne/services/activity.py
from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass
from typing import Callable, List

from nocturne.services.stories import now_ms
from nocturne.store.kv import LOGS_KEY, KeyValueStore, get_json, set_json

MAX_ENTRIES = 100


@dataclass(frozen=True)
class LogEntry:
    id: str
    timestamp: int
    action: str
    details: str

    def to_dict(self) -> dict:
        return asdict(self)


class ActivityLog:
    """Bounded audit trail, newest first. Only the latest 100 entries survive."""

    def __init__(self, store: KeyValueStore, clock: Callable[[], int] = now_ms):
        self._store = store
        self._clock = clock

    def list(self) -> List[LogEntry]:
        return [LogEntry(**item) for item in get_json(self._store, LOGS_KEY, [])]

    def append(self, action: str, details: str = "") -> LogEntry:
        entry = LogEntry(id=str(uuid.uuid4()), timestamp=self._clock(), action=action, details=details)
        with self._store.lock:
            entries = [entry] + self.list()
            set_json(self._store, LOGS_KEY, [e.to_dict() for e in entries[:MAX_ENTRIES]])
        return entry

    def clear(self) -> None:
        self._store.delete(LOGS_KEY)
