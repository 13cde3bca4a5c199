"""Async client for the rendezvous broker.

The device publishes its bundle; the editor polls for it by key until it
shows up or a deadline passes.
"""

import asyncio
import json
import logging
import time
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)


class RendezvousClient:
    def __init__(self, base_url: str, http_client: httpx.AsyncClient | None = None):
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=10.0)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def publish(self, bundle: dict[str, str]) -> str:
        """POST a bundle (must include `key`). Returns the broker's reply text."""
        resp = await self._client.post(f"{self.base_url}/", data=bundle)
        resp.raise_for_status()
        return resp.text.strip()

    async def fetch(self, key: str) -> dict[str, str] | None:
        resp = await self._client.get(f"{self.base_url}/{quote(key, safe='')}")
        resp.raise_for_status()
        body = resp.text.strip()
        if not body:
            return None
        return json.loads(body)

    async def wait_for(self, key: str, timeout: float = 30.0, interval: float = 1.0) -> dict[str, str]:
        """Poll until a bundle is available for `key`."""
        deadline = time.monotonic() + timeout
        while True:
            try:
                bundle = await self.fetch(key)
                if bundle is not None:
                    return bundle
            except httpx.HTTPError as e:
                logger.warning("Rendezvous fetch failed for %s: %s", key, e)
            if time.monotonic() + interval > deadline:
                raise TimeoutError(f"No rendezvous for {key} within {timeout}s")
            await asyncio.sleep(interval)
