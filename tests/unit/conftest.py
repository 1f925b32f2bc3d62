"""Test configuration and fixtures.

Provides:
- Mocked collaborators of the sync orchestrator
- Sample domains, counters and sync results
"""

from unittest.mock import AsyncMock

import pytest

from src.domain.models import CounterSnapshot, CounterValue, Domain, SyncResult

# ============================================================================
# Sample Data
# ============================================================================


@pytest.fixture
def caller_id() -> str:
    """Identifier of the authenticated caller."""
    return "user-1"


@pytest.fixture
def verified_domain(caller_id: str) -> Domain:
    """Verified domain owned by the caller."""
    return Domain(name="example.com", owner_id=caller_id, verified=True)


@pytest.fixture
def unverified_domain(caller_id: str) -> Domain:
    """Unverified domain owned by the caller."""
    return Domain(name="example.com", owner_id=caller_id, verified=False)


@pytest.fixture
def sample_snapshot() -> CounterSnapshot:
    """Stored counters after a successful sync."""
    return CounterSnapshot(site_uv=100, site_pv=500, page_pv={"/": 42})


@pytest.fixture
def full_sync_result() -> SyncResult:
    """Sync result where both counters were refreshed."""
    return SyncResult(
        success=True,
        site_uv=CounterValue(value=100),
        site_pv=CounterValue(value=500),
    )


@pytest.fixture
def partial_sync_result() -> SyncResult:
    """Sync result where only site_uv was refreshed."""
    return SyncResult(
        success=False,
        site_uv=CounterValue(value=100),
        site_pv=None,
        error="timeout",
    )


# ============================================================================
# Mock Collaborators
# ============================================================================


@pytest.fixture
def mock_domain_store(verified_domain: Domain) -> AsyncMock:
    """Create mock domain store returning the verified domain."""
    mock = AsyncMock()
    mock.find_by_name_and_owner = AsyncMock(return_value=verified_domain)
    return mock


@pytest.fixture
def mock_counter_store(sample_snapshot: CounterSnapshot) -> AsyncMock:
    """Create mock counter store."""
    mock = AsyncMock()
    mock.read_snapshot = AsyncMock(return_value=sample_snapshot)
    mock.set_counter = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def mock_counter_sync(full_sync_result: SyncResult) -> AsyncMock:
    """Create mock external counter sync reporting full success."""
    mock = AsyncMock()
    mock.force_sync_all = AsyncMock(return_value=full_sync_result)
    return mock
