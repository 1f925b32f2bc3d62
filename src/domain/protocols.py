"""Protocol definitions for dependency inversion.

These protocols define interfaces that infrastructure implementations must satisfy.
The orchestrator depends on these abstractions, so tests substitute doubles freely.
"""

from typing import Protocol

from src.domain.models import CounterSnapshot, Domain, SessionRecord, SyncResult


class DomainStore(Protocol):
    """Protocol for domain lookups."""

    async def find_by_name_and_owner(self, name: str, owner_id: str) -> Domain | None:
        """Find a domain by name that belongs to the given owner.

        Existence and ownership are checked in one lookup, so a domain
        owned by someone else is indistinguishable from a missing one.

        Args:
            name: Domain name
            owner_id: Identifier of the expected owner

        Returns:
            The domain, or None if absent or owned by another user

        Raises:
            StorageError: If the store cannot be read
        """
        ...


class CounterStore(Protocol):
    """Protocol for counter persistence."""

    async def read_snapshot(self, domain_name: str) -> CounterSnapshot:
        """Read the current counters of a domain.

        Returns:
            Stored counters (all zero when nothing was recorded yet)

        Raises:
            StorageError: If the store cannot be read
        """
        ...

    async def set_counter(self, domain_name: str, counter: str, value: int) -> None:
        """Overwrite one site-wide counter (``site_uv`` or ``site_pv``).

        Raises:
            StorageError: If the store cannot be written
        """
        ...


class ExternalCounterSync(Protocol):
    """Protocol for refreshing counters from the external counting service."""

    async def force_sync_all(self, domain: Domain) -> SyncResult:
        """Pull site_uv and site_pv for the domain and store them.

        Remote failures are reported in the returned SyncResult, not raised.

        Args:
            domain: Verified domain to refresh

        Returns:
            SyncResult with per-counter values and an error summary
        """
        ...


class SessionStore(Protocol):
    """Protocol for session token lookups."""

    async def find_session(self, token: str) -> SessionRecord | None:
        """Find a stored session by token.

        Returns:
            The session record, or None if the token is unknown
        """
        ...
