# nocturne/services/__init__.py
from __future__ import annotations

from typing import Optional

from fastapi import Request

from nocturne.services.access import AccessGate
from nocturne.services.activity import ActivityLog
from nocturne.services.generation import StoryGenerator
from nocturne.services.moderation import ModerationWorkflow
from nocturne.services.settings import SettingsStore
from nocturne.services.stories import StoryRepository
from nocturne.services.treasury import TreasuryDesk, TreasuryLedger
from nocturne.store.kv import KeyValueStore


class Services:
    """Every component wired to one store. Components share nothing else."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        latency: float = 0.0,
        generator: Optional[StoryGenerator] = None,
    ):
        self.store = store
        self.activity = ActivityLog(store)
        self.stories = StoryRepository(store)
        self.moderation = ModerationWorkflow(self.stories, self.activity)
        self.gate = AccessGate(store)
        self.ledger = TreasuryLedger(store)
        self.treasury = TreasuryDesk(self.ledger, self.activity, latency=latency)
        self.settings = SettingsStore(store)
        self.generator = generator or StoryGenerator()


def get_services(request: Request) -> Services:
    """FastAPI dependency: the container built at startup."""
    return request.app.state.services
