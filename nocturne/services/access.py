# nocturne/services/access.py
"""
Access gate: one shared passcode guarding the owner role.

Until a passcode is set the literal credential "void" opens the gate.
Stored value is the hex SHA-256 of the passcode (no salt). There is no
rate limiting or lockout.
"""
from __future__ import annotations

import asyncio
import hashlib
import hmac
import logging
from enum import Enum

from nocturne.errors import PermissionDenied
from nocturne.store.kv import PASSCODE_KEY, KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_PASSCODE = "void"


class Role(str, Enum):
    OWNER = "OWNER"
    GUEST = "GUEST"


def hash_passcode(code: str) -> str:
    return hashlib.sha256(code.encode("utf-8")).hexdigest()


def ensure_owner(role: Role, action: str = "this action") -> None:
    """The one authorization check. Everything owner-only goes through here."""
    if role is not Role.OWNER:
        logger.warning("Denied %s to role=%s", action, getattr(role, "value", role))
        raise PermissionDenied("Only the Curator may perform this action.")


class AccessGate:
    def __init__(self, store: KeyValueStore):
        self._store = store

    def has_passcode(self) -> bool:
        return bool(self._store.get(PASSCODE_KEY))

    async def verify(self, candidate: str) -> bool:
        stored = self._store.get(PASSCODE_KEY)
        if not stored:
            return candidate == DEFAULT_PASSCODE
        digest = await asyncio.to_thread(hash_passcode, candidate or "")
        return hmac.compare_digest(digest.encode("utf-8"), stored.encode("utf-8"))

    async def set_passcode(self, role: Role, new_code: str) -> bool:
        """Overwrite the passcode. Blank input is ignored and returns False."""
        ensure_owner(role, "passcode change")
        if not new_code or not new_code.strip():
            return False
        digest = await asyncio.to_thread(hash_passcode, new_code)
        self._store.set(PASSCODE_KEY, digest)
        logger.info("Passcode updated")
        return True
