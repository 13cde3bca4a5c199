"""SQLite-backed durable tier for rendezvous addresses.

Only the address is persisted per key. Rows are never expired; `used` is
stamped on every write so stale rows can be found later.
"""

import logging
import os
import time
from dataclasses import dataclass
from typing import Callable

import aiosqlite

logger = logging.getLogger(__name__)

CREATE_SQL = """
CREATE TABLE IF NOT EXISTS rendezvous (
  key TEXT PRIMARY KEY,
  ipaddr TEXT NOT NULL,
  used REAL NOT NULL
);
"""


@dataclass(frozen=True)
class StoredEntry:
    key: str
    ipaddr: str
    used: float


class Datastore:
    def __init__(self, db_path: str, clock: Callable[[], float] = time.time):
        self.db_path = db_path
        self._clock = clock
        self._ready = False

    async def init(self) -> None:
        directory = os.path.dirname(self.db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        async with aiosqlite.connect(self.db_path) as db:
            await db.executescript(CREATE_SQL)
            await db.commit()
        self._ready = True

    async def _ensure_schema(self) -> None:
        if not self._ready:
            await self.init()

    async def find_entry(self, key: str) -> StoredEntry | None:
        await self._ensure_schema()
        async with aiosqlite.connect(self.db_path) as db:
            cur = await db.execute(
                "SELECT key, ipaddr, used FROM rendezvous WHERE key=?", (key,)
            )
            row = await cur.fetchone()
        if row is None:
            return None
        return StoredEntry(key=row[0], ipaddr=row[1], used=row[2])

    async def find_ip_address_by_key(self, key: str) -> str | None:
        entry = await self.find_entry(key)
        return entry.ipaddr if entry else None

    async def store_ip_address_by_key(self, key: str, ipaddr: str) -> None:
        await self._ensure_schema()
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                "INSERT INTO rendezvous(key, ipaddr, used) VALUES (?, ?, ?) "
                "ON CONFLICT(key) DO UPDATE SET ipaddr=excluded.ipaddr, used=excluded.used",
                (key, ipaddr, self._clock()),
            )
            await db.commit()
        logger.debug("Stored address for %s in datastore", key)

    async def ping(self) -> bool:
        """Cheap reachability check for the health route."""
        async with aiosqlite.connect(self.db_path) as db:
            cur = await db.execute("SELECT 1")
            await cur.fetchone()
        return True
