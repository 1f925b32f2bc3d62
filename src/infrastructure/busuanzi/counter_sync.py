"""Forced counter sync from Busuanzi into the counter store."""

import logging
from typing import TYPE_CHECKING

from src.domain.exceptions import BusuanziError, StorageError
from src.domain.models import CounterValue, Domain, SyncResult

if TYPE_CHECKING:
    from src.domain.protocols import CounterStore
    from src.infrastructure.busuanzi.client import BusuanziClient

logger = logging.getLogger(__name__)

# Stored counter name -> label used in error messages
TRACKED_COUNTERS = {"site_uv": "siteUv", "site_pv": "sitePv"}


class BusuanziCounterSync:
    """ExternalCounterSync backed by the Busuanzi JSONP endpoint.

    Remote values overwrite stored ones. Each tracked counter is written
    independently, so one failing counter does not block the other.
    """

    def __init__(self, client: "BusuanziClient", counter_store: "CounterStore"):
        self.client = client
        self.counter_store = counter_store

    async def force_sync_all(self, domain: Domain) -> SyncResult:
        try:
            counts = await self.client.fetch_counts(domain.name)
        except BusuanziError as e:
            logger.warning(f"Could not fetch Busuanzi counts for {domain.name}: {e}")
            return SyncResult(success=False, error=str(e))

        values: dict[str, CounterValue | None] = {}
        errors: list[str] = []

        for counter, label in TRACKED_COUNTERS.items():
            value = getattr(counts, counter)
            if value is None:
                values[counter] = None
                errors.append(f"{label} missing from Busuanzi response")
                continue

            try:
                await self.counter_store.set_counter(domain.name, counter, value)
            except StorageError as e:
                logger.error(f"Failed to store {counter} for {domain.name}: {e}")
                values[counter] = None
                errors.append(f"{label} could not be saved")
                continue

            values[counter] = CounterValue(value=value)

        return SyncResult(
            success=not errors,
            site_uv=values["site_uv"],
            site_pv=values["site_pv"],
            error="; ".join(errors) or None,
        )
