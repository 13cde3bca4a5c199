"""Backing tiers for rendezvous bundles and the selector that picks one.

Both tiers expose the same async `put`/`get` pair so the store can treat
them interchangeably. Which one is live is decided per call.
"""

import json
import logging
from typing import Callable, Protocol

from errors import DecodeFailure, MalformedBundle
from services.cache import CapabilityStatus, TTLCache
from services.datastore import Datastore

logger = logging.getLogger(__name__)

Bundle = dict[str, str]

# The one field the durable tier can hold.
ADDRESS_FIELD = "ipaddr"

DATASTORE_ACK = "OK (Datastore)"


class TierSelector:
    """Ask the ephemeral backend whether it is usable right now.

    Anything other than an explicit DISABLED counts as available. A probe
    that raises is treated as DISABLED.
    """

    def __init__(self, probe: Callable[[], CapabilityStatus]):
        self._probe = probe

    def is_ephemeral_tier_available(self) -> bool:
        try:
            status = self._probe()
        except Exception as e:
            logger.warning("Ephemeral tier probe failed, using datastore: %s", e)
            return False
        return status is not CapabilityStatus.DISABLED


class RendezvousTier(Protocol):
    name: str

    async def put(self, key: str, bundle: Bundle) -> str: ...

    async def get(self, key: str) -> Bundle | None: ...


def encode_bundle(bundle: Bundle) -> str:
    return json.dumps(bundle, separators=(",", ":"))


def decode_bundle(record: object) -> Bundle:
    """Turn a cached record back into a bundle, preserving field order."""
    if not isinstance(record, str):
        raise DecodeFailure(f"expected str record, got {type(record).__name__}")
    try:
        value = json.loads(record)
    except json.JSONDecodeError as e:
        raise DecodeFailure(str(e)) from e
    if not isinstance(value, dict):
        raise DecodeFailure(f"expected object, got {type(value).__name__}")
    if not all(isinstance(k, str) and isinstance(v, str) for k, v in value.items()):
        raise DecodeFailure("bundle fields must be strings")
    return value


class EphemeralTier:
    """Whole bundles in the TTL cache, namespaced by the instance id."""

    name = "memcache"

    def __init__(self, cache: TTLCache, namespace: str, ttl_seconds: int = 300):
        self._cache = cache
        self._namespace = namespace
        self.ttl_seconds = ttl_seconds

    def cache_key(self, key: str) -> str:
        return f"{self._namespace}{key}"

    async def put(self, key: str, bundle: Bundle) -> str:
        record = encode_bundle(bundle)
        self._cache.set(self.cache_key(key), record, ttl_seconds=self.ttl_seconds)
        return record

    async def get(self, key: str) -> Bundle | None:
        record = self._cache.get(self.cache_key(key))
        if record is None:
            return None
        try:
            return decode_bundle(record)
        except DecodeFailure as e:
            logger.warning("Ignoring unreadable cache entry for %s: %s", key, e)
            return None


class DurableTier:
    """Address-only fallback in the datastore. Entries do not expire."""

    name = "datastore"

    def __init__(self, datastore: Datastore, address_field: str = ADDRESS_FIELD):
        self._datastore = datastore
        self.address_field = address_field

    async def init(self) -> None:
        await self._datastore.init()

    async def ping(self) -> bool:
        return await self._datastore.ping()

    async def put(self, key: str, bundle: Bundle) -> str:
        address = bundle.get(self.address_field)
        if address is None:
            raise MalformedBundle()
        await self._datastore.store_ip_address_by_key(key, address)
        return DATASTORE_ACK

    async def get(self, key: str) -> Bundle | None:
        address = await self._datastore.find_ip_address_by_key(key)
        if address is None:
            return None
        return {"key": key, self.address_field: address}
