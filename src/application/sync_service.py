"""Sync orchestration for Busuanzi counter refreshes.

This is the application layer that gates a sync on identity, ownership and
verification, then delegates the refresh to the external counter source.
"""

import logging
from typing import TYPE_CHECKING

from src.domain.exceptions import (
    DomainNotFoundError,
    InternalSyncError,
    InvalidRequestError,
    SyncRequestError,
    UnauthorizedError,
)
from src.domain.models import (
    DEFAULT_PARTIAL_SYNC_MESSAGE,
    PartialSyncOutcome,
    SyncedOutcome,
    SyncedValues,
    SyncOutcome,
)
from src.shared.result import Err, Ok, Result

if TYPE_CHECKING:
    from src.domain.protocols import CounterStore, DomainStore, ExternalCounterSync

logger = logging.getLogger(__name__)


class SyncOrchestrator:
    """Authorizes and runs a forced counter sync for one domain.

    Stateless: every call re-pulls from the remote source and re-reads
    storage, so repeating a request is always safe.
    """

    def __init__(
        self,
        domain_store: "DomainStore",
        counter_store: "CounterStore",
        counter_sync: "ExternalCounterSync",
    ):
        """Initialize sync orchestrator.

        Args:
            domain_store: Lookup of domains by name and owner
            counter_store: Storage of domain counters
            counter_sync: External counter source (Busuanzi)
        """
        self.domain_store = domain_store
        self.counter_store = counter_store
        self.counter_sync = counter_sync

    async def request_sync(
        self, caller_id: str | None, domain_name: str | None
    ) -> Result[SyncOutcome, SyncRequestError]:
        """Sync the counters of a domain owned by the caller.

        Preconditions are checked in order and the first failure is returned:
        authenticated caller, domain name present, domain owned by caller,
        domain verified.

        Args:
            caller_id: Identifier of the authenticated user (None if anonymous)
            domain_name: Name of the domain to sync

        Returns:
            Ok(SyncedOutcome) if every counter was refreshed
            Ok(PartialSyncOutcome) if the remote source was incomplete
            Err(SyncRequestError) if the request was rejected or faulted
        """
        if not caller_id:
            return Err(UnauthorizedError())

        if not domain_name or not domain_name.strip():
            return Err(InvalidRequestError("Domain name is required"))

        try:
            return await self._sync(caller_id, domain_name.strip())
        except Exception:
            logger.error(
                f"Unexpected error syncing domain {domain_name!r} for user {caller_id}",
                exc_info=True,
            )
            return Err(InternalSyncError())

    async def _sync(
        self, caller_id: str, domain_name: str
    ) -> Result[SyncOutcome, SyncRequestError]:
        domain = await self.domain_store.find_by_name_and_owner(domain_name, caller_id)
        if domain is None:
            return Err(DomainNotFoundError())

        if not domain.verified:
            return Err(InvalidRequestError("Domain must be verified before syncing data"))

        logger.info(f"Starting Busuanzi sync for domain: {domain.name} (user={caller_id})")

        sync_result = await self.counter_sync.force_sync_all(domain)
        synced_values = SyncedValues.from_sync_result(sync_result)

        if not sync_result.success:
            logger.warning(
                f"Busuanzi sync partially failed for domain: {domain.name} "
                f"(user={caller_id}, error={sync_result.error!r}, "
                f"site_uv={sync_result.site_uv}, site_pv={sync_result.site_pv})"
            )
            return Ok(
                PartialSyncOutcome(
                    domain_name=domain.name,
                    details=synced_values,
                    message=sync_result.error or DEFAULT_PARTIAL_SYNC_MESSAGE,
                )
            )

        # Read after the sync so the snapshot reflects its writes
        counters = await self.counter_store.read_snapshot(domain.name)

        logger.info(
            f"Busuanzi sync completed for domain: {domain.name} (user={caller_id}, "
            f"site_uv={counters.site_uv}, site_pv={counters.site_pv})"
        )

        return Ok(
            SyncedOutcome(
                domain_name=domain.name,
                counters=counters,
                synced_values=synced_values,
            )
        )
