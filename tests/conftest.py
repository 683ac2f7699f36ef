import os

# must be set before nocturne.config is imported
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("SEED_ON_STARTUP", "0")
os.environ.setdefault("SIMULATED_LATENCY_SEC", "0")
os.environ["GEMINI_API_KEY"] = ""
os.environ["API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient

from nocturne.main import create_app
from nocturne.services import Services
from nocturne.services.activity import ActivityLog
from nocturne.services.moderation import ModerationWorkflow
from nocturne.services.stories import StoryRepository
from nocturne.store.kv import MemoryStore


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int = 1) -> None:
        self.now += ms


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def activity(store, clock):
    return ActivityLog(store, clock=clock)


@pytest.fixture
def repo(store):
    return StoryRepository(store)


@pytest.fixture
def workflow(repo, activity, clock):
    return ModerationWorkflow(repo, activity, clock=clock)


@pytest.fixture
def services(store):
    return Services(store, latency=0)


@pytest.fixture
def app(store):
    return create_app(store, latency=0, seed=False)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def owner_client(app):
    with TestClient(app) as c:
        resp = c.post("/auth/login", json={"passcode": "void"})
        assert resp.status_code == 200
        yield c
