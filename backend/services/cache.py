"""Simple in-memory TTL cache used as the ephemeral rendezvous tier.

Note: Each uvicorn worker has its own cache instance. Run the broker with a
single worker, otherwise a device may post to one worker and the editor
poll another.
"""

import enum
import time
from typing import Any, Callable


class CapabilityStatus(enum.Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"
    SCHEDULED_MAINTENANCE = "scheduled_maintenance"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str) -> "CapabilityStatus":
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN


class TTLCache:
    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        status: CapabilityStatus = CapabilityStatus.ENABLED,
    ):
        self._store: dict[str, tuple[float, Any]] = {}
        self._clock = clock
        self._status = status

    def get(self, key: str) -> Any | None:
        if key in self._store:
            expires_at, value = self._store[key]
            if self._clock() < expires_at:
                return value
            del self._store[key]
        return None

    def set(self, key: str, value: Any, ttl_seconds: int = 300) -> None:
        now = self._clock()
        # Keys are unique per session and rarely re-read after expiry.
        self._store = {k: entry for k, entry in self._store.items() if entry[0] > now}
        self._store[key] = (now + ttl_seconds, value)

    def __len__(self) -> int:
        return len(self._store)

    def capability_status(self) -> CapabilityStatus:
        """Report whether the cache is currently usable."""
        return self._status

    def set_capability_status(self, status: CapabilityStatus) -> None:
        self._status = status
