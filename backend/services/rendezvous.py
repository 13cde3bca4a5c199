"""Rendezvous store: put/get a bundle through whichever tier is live.

The ephemeral tier is not a cache in front of the datastore. When it is
available the datastore is not touched at all, and vice versa, so a bundle
written to one tier is invisible once the selector switches to the other.
"""

import logging

from errors import MissingKey
from services.tiers import Bundle, DurableTier, EphemeralTier, RendezvousTier, TierSelector

logger = logging.getLogger(__name__)


class RendezvousStore:
    def __init__(self, selector: TierSelector, ephemeral: EphemeralTier, durable: DurableTier):
        self.selector = selector
        self.ephemeral = ephemeral
        self.durable = durable

    def live_tier(self) -> RendezvousTier:
        """Pick the tier for one operation. Never cached between calls."""
        if self.selector.is_ephemeral_tier_available():
            return self.ephemeral
        return self.durable

    async def put(self, key: str | None, bundle: Bundle) -> str:
        """Store `bundle` under `key`, replacing whatever was there.

        Returns the acknowledgement text for the caller.
        """
        if not key:
            raise MissingKey()
        tier = self.live_tier()
        ack = await tier.put(key, bundle)
        logger.info("Stored rendezvous %s via %s", key, tier.name)
        return ack

    async def get(self, key: str) -> Bundle | None:
        tier = self.live_tier()
        bundle = await tier.get(key)
        logger.debug("Fetched rendezvous %s via %s: %s", key, tier.name, "hit" if bundle else "miss")
        return bundle
