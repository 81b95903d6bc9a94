"""
Carrier directory with a short-lived, process-local cache.

Resolves which ShipEngine carrier accounts to rate-shop against. An explicit
SHIPENGINE_CARRIER_IDS override always wins; otherwise the enabled carriers are
listed from the provider. Either way the result is cached for the TTL.

The cache is an ordinary object owned by whoever builds it (the app's
dependency layer, or a test), not module state, so tests can drive expiry
through the injected clock.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from reefcultures.core.exceptions import NoCarriersConfigured, RateProviderError
from reefcultures.services.shipping.base import BaseCarrier

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 15 * 60


@dataclass(frozen=True)
class CarrierCacheEntry:
    carrier_ids: List[str]
    expires_at: float


class CarrierDirectory:
    """Cached lookup of the carrier accounts enabled for rate shopping."""

    def __init__(
        self,
        provider: BaseCarrier,
        override_ids: Optional[Sequence[str]] = None,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.provider = provider
        self.override_ids = [cid for cid in (override_ids or []) if cid]
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entry: Optional[CarrierCacheEntry] = None

    def invalidate(self) -> None:
        self._entry = None

    async def get_carrier_ids(self) -> List[str]:
        """
        Return the enabled carrier ids, refreshing the cache when it has expired.

        Raises:
            NoCarriersConfigured: If the provider call fails or no carrier is enabled
        """
        now = self.clock()
        entry = self._entry
        if entry is not None and entry.expires_at > now:
            return list(entry.carrier_ids)

        if self.override_ids:
            carrier_ids = list(self.override_ids)
            logger.info(f"Using {len(carrier_ids)} carrier ids from SHIPENGINE_CARRIER_IDS")
        else:
            carrier_ids = await self._fetch_enabled_carriers()

        # Replaced in one assignment; concurrent refreshes just overwrite each other
        self._entry = CarrierCacheEntry(carrier_ids=carrier_ids, expires_at=now + self.ttl_seconds)
        return list(carrier_ids)

    async def _fetch_enabled_carriers(self) -> List[str]:
        try:
            carriers = await self.provider.list_carriers()
        except RateProviderError as e:
            raise NoCarriersConfigured(
                f"Unable to fetch carriers ({e.message}). Set SHIPENGINE_CARRIER_IDS in env."
            ) from e

        carrier_ids = [
            str(carrier["carrier_id"])
            for carrier in carriers
            if isinstance(carrier, dict)
            and carrier.get("carrier_id")
            and carrier.get("is_enabled") is not False
        ]

        if not carrier_ids:
            raise NoCarriersConfigured(
                "No enabled carriers found. Enable USPS/UPS in ShipEngine or set SHIPENGINE_CARRIER_IDS."
            )

        logger.info(f"Refreshed carrier directory: {len(carrier_ids)} enabled carriers")
        return carrier_ids
