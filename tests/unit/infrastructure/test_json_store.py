"""Tests for JsonFileStore.

Tests cover:
- Domain lookup by name and owner
- Counter reads and forced writes
- Session issue and lookup
- Corrupt or unwritable files
"""

import asyncio
import json
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from src.domain.exceptions import StorageError
from src.domain.models import CounterSnapshot, Domain
from src.infrastructure.storage.json_store import JsonFileStore


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "store.json"


@pytest.fixture
def store(store_path: Path) -> JsonFileStore:
    return JsonFileStore(str(store_path))


class TestDomains:
    """Tests for domain records."""

    @pytest.mark.asyncio
    async def test_find_owned_domain(self, store: JsonFileStore) -> None:
        """Test a saved domain is found for its owner."""
        domain = Domain(name="example.com", owner_id="user-1", verified=True)
        await store.save_domain(domain)

        assert await store.find_by_name_and_owner("example.com", "user-1") == domain

    @pytest.mark.asyncio
    async def test_other_owner_gets_none(self, store: JsonFileStore) -> None:
        """Test a domain owned by someone else is not returned."""
        await store.save_domain(Domain(name="example.com", owner_id="user-1"))

        assert await store.find_by_name_and_owner("example.com", "user-2") is None

    @pytest.mark.asyncio
    async def test_missing_file_reads_empty(self, store: JsonFileStore, store_path: Path) -> None:
        """Test a store without a file behaves as empty."""
        assert not store_path.exists()
        assert await store.find_by_name_and_owner("example.com", "user-1") is None

    @pytest.mark.asyncio
    async def test_existence_checked_without_blocking(
        self, store: JsonFileStore, store_path: Path, mocker
    ) -> None:
        """Test the file presence check goes through aiofiles."""
        store_path.write_text(
            json.dumps({"domains": {"example.com": {"owner_id": "user-1", "verified": True}}})
        )
        exists = mocker.patch(
            "src.infrastructure.storage.json_store.aiofiles.os.path.exists",
            new=AsyncMock(return_value=False),
        )

        assert await store.find_by_name_and_owner("example.com", "user-1") is None
        exists.assert_awaited_once_with(store_path)

    @pytest.mark.asyncio
    async def test_picks_up_external_writes(self, store: JsonFileStore, store_path: Path) -> None:
        """Test records written by another process are visible immediately."""
        store_path.write_text(
            json.dumps({"domains": {"example.com": {"owner_id": "user-1", "verified": True}}})
        )

        domain = await store.find_by_name_and_owner("example.com", "user-1")

        assert domain is not None
        assert domain.verified is True


class TestCounters:
    """Tests for counter records."""

    @pytest.mark.asyncio
    async def test_unknown_domain_snapshot_is_empty(self, store: JsonFileStore) -> None:
        """Test reading counters of a domain with no data returns zeros."""
        assert await store.read_snapshot("example.com") == CounterSnapshot()

    @pytest.mark.asyncio
    async def test_set_counter_overwrites(self, store: JsonFileStore) -> None:
        """Test forced writes replace stored values and stamp updated_at."""
        await store.set_counter("example.com", "site_uv", 10)
        await store.set_counter("example.com", "site_uv", 7)
        await store.set_counter("example.com", "site_pv", 40)

        snapshot = await store.read_snapshot("example.com")

        assert snapshot.site_uv == 7
        assert snapshot.site_pv == 40
        assert snapshot.updated_at is not None

    @pytest.mark.asyncio
    async def test_set_counter_keeps_page_counters(
        self, store: JsonFileStore, store_path: Path
    ) -> None:
        """Test site counter writes leave per-page counters untouched."""
        store_path.write_text(
            json.dumps({"counters": {"example.com": {"site_uv": 1, "page_pv": {"/a": 5}}}})
        )

        await store.set_counter("example.com", "site_pv", 9)
        snapshot = await store.read_snapshot("example.com")

        assert snapshot.page_pv == {"/a": 5}
        assert snapshot.site_uv == 1
        assert snapshot.site_pv == 9

    @pytest.mark.asyncio
    async def test_unknown_counter_rejected(self, store: JsonFileStore) -> None:
        """Test only site counters can be set."""
        with pytest.raises(ValueError, match="Unknown counter"):
            await store.set_counter("example.com", "page_pv", 1)

    @pytest.mark.asyncio
    async def test_concurrent_writes_are_not_lost(self, store: JsonFileStore) -> None:
        """Test concurrent writers to different domains all land."""
        await asyncio.gather(
            *(store.set_counter(f"site{i}.com", "site_pv", i) for i in range(10))
        )

        for i in range(10):
            assert (await store.read_snapshot(f"site{i}.com")).site_pv == i


class TestSessions:
    """Tests for session records."""

    @pytest.mark.asyncio
    async def test_create_and_find_session(self, store: JsonFileStore) -> None:
        """Test an issued session can be looked up by token."""
        session = await store.create_session("user-1", ttl_seconds=60)

        found = await store.find_session(session.token)

        assert found is not None
        assert found.user_id == "user-1"
        assert found.expires_at == session.expires_at

    @pytest.mark.asyncio
    async def test_session_without_ttl_never_expires(self, store: JsonFileStore) -> None:
        """Test sessions without a TTL have no expiry."""
        session = await store.create_session("user-1")

        found = await store.find_session(session.token)

        assert found is not None
        assert found.expires_at is None

    @pytest.mark.asyncio
    async def test_unknown_token(self, store: JsonFileStore) -> None:
        """Test an unknown token returns None."""
        assert await store.find_session("nope") is None


class TestStorageErrors:
    """Tests for unreadable and unwritable stores."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["{broken", "[1, 2]"])
    async def test_corrupt_file(
        self, store: JsonFileStore, store_path: Path, content: str
    ) -> None:
        """Test a corrupt file raises StorageError."""
        store_path.write_text(content)

        with pytest.raises(StorageError):
            await store.read_snapshot("example.com")

    @pytest.mark.asyncio
    async def test_empty_file_reads_empty(self, store: JsonFileStore, store_path: Path) -> None:
        """Test an empty file behaves like a missing one."""
        store_path.write_text("")

        assert await store.find_session("token") is None

    @pytest.mark.asyncio
    async def test_write_failure(self, store: JsonFileStore, mocker) -> None:
        """Test a failed write raises StorageError and leaves no temp file."""
        mocker.patch(
            "src.infrastructure.storage.json_store.aiofiles.os.rename",
            side_effect=OSError("read-only file system"),
        )

        with pytest.raises(StorageError, match="read-only"):
            await store.set_counter("example.com", "site_uv", 1)

        assert not store.path.with_suffix(".tmp").exists()
