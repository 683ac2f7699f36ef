# nocturne/store/kv.py
"""
Synchronous string key-value store.

Every component persists through one of these. Values are opaque strings;
JSON encoding is the caller's business (see get_json / set_json).
Services hold `store.lock` around any read-modify-write of a key.
"""
from __future__ import annotations

import json
import logging
import threading
from typing import Any, Optional, Protocol

from sqlalchemy.orm import Session

from nocturne.models.kv_entry import KVEntry

logger = logging.getLogger(__name__)

# ---- Keys ----
STORIES_KEY = "nocturne_stories"
PASSCODE_KEY = "nocturne_passcode"
SUBTITLE_KEY = "nocturne_subtitle"
BG_IMAGE_KEY = "nocturne_bg_image"
THEME_KEY = "nocturne_theme"
BALANCE_KEY = "nocturne_balance"
LINKED_CARD_KEY = "nocturne_linked_card"
FOUNDER_KEY = "nocturne_founder"
LOGS_KEY = "nocturne_logs"


class KeyValueStore(Protocol):
    lock: threading.RLock

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    """Dict-backed store for tests and throwaway dev servers."""

    def __init__(self, initial: Optional[dict] = None):
        self._data: dict[str, str] = dict(initial or {})
        self.lock = threading.RLock()

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class SqlStore:
    """
    Durable store on the kv_entries table. One short session per call;
    a write is committed before set() returns.
    """

    def __init__(self, session_factory):
        self._session_factory = session_factory
        self.lock = threading.RLock()

    def get(self, key: str) -> Optional[str]:
        db: Session = self._session_factory()
        try:
            row = db.get(KVEntry, key)
            return row.value if row else None
        finally:
            db.close()

    def set(self, key: str, value: str) -> None:
        # get-then-add is an upsert only while no other writer is in between
        with self.lock:
            db: Session = self._session_factory()
            try:
                row = db.get(KVEntry, key)
                if row:
                    row.value = value
                else:
                    db.add(KVEntry(key=key, value=value))
                db.commit()
            finally:
                db.close()

    def delete(self, key: str) -> None:
        with self.lock:
            db: Session = self._session_factory()
            try:
                db.query(KVEntry).filter(KVEntry.key == key).delete()
                db.commit()
            finally:
                db.close()


def get_json(store: KeyValueStore, key: str, default: Any = None) -> Any:
    raw = store.get(key)
    if raw is None:
        return default
    return json.loads(raw)


def set_json(store: KeyValueStore, key: str, value: Any) -> None:
    store.set(key, json.dumps(value, ensure_ascii=False))
