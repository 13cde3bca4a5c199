import pytest
from fastapi.testclient import TestClient

from app import create_app
from services.cache import CapabilityStatus, TTLCache
from services.datastore import Datastore
from services.rendezvous import RendezvousStore
from services.tiers import DurableTier, EphemeralTier, TierSelector

NAMESPACE = "test-instance-"


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return TTLCache(clock=clock)


@pytest.fixture
def datastore(tmp_path, clock):
    return Datastore(str(tmp_path / "rendezvous.sqlite3"), clock=clock)


@pytest.fixture
def store(cache, datastore):
    return RendezvousStore(
        selector=TierSelector(cache.capability_status),
        ephemeral=EphemeralTier(cache, namespace=NAMESPACE, ttl_seconds=300),
        durable=DurableTier(datastore),
    )


@pytest.fixture
def disable_cache(cache):
    def _disable():
        cache.set_capability_status(CapabilityStatus.DISABLED)

    return _disable


@pytest.fixture
def client(store):
    with TestClient(create_app(store)) as c:
        yield c
