"""
JSON document store for domains, counters and sessions.

The whole state lives in one JSON file:

    {
      "domains":  {"example.com": {"owner_id": "u1", "verified": true}},
      "counters": {"example.com": {"site_uv": 10, "site_pv": 42,
                                   "page_pv": {"/": 3}, "updated_at": "..."}},
      "sessions": {"<token>": {"user_id": "u1", "expires_at": null}}
    }

Features:
- Async file I/O via aiofiles (no event loop blocking)
- Atomic writes (temp file + rename), so readers never see a torn file
- Read-modify-write cycles serialized with an asyncio.Lock
- The file is re-read on every call, so records written by other processes
  (registration, verification) are picked up without a restart
"""

import asyncio
import json
import logging
import secrets
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os

from src.domain.exceptions import StorageError
from src.domain.models import CounterSnapshot, Domain, SessionRecord

logger = logging.getLogger(__name__)

SITE_COUNTERS = ("site_uv", "site_pv")


def _empty_document() -> dict[str, Any]:
    return {"domains": {}, "counters": {}, "sessions": {}}


class JsonFileStore:
    """
    File-backed store implementing DomainStore, CounterStore and SessionStore.

    Attributes:
        path: Location of the JSON document
    """

    def __init__(self, path: str) -> None:
        self.path = Path(path)
        self._lock = asyncio.Lock()

        self.path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Initialized JsonFileStore: file={self.path}")

    # ------------------------------------------------------------------
    # File access
    # ------------------------------------------------------------------

    async def _load(self) -> dict[str, Any]:
        if not await aiofiles.os.path.exists(self.path):
            return _empty_document()

        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                raw = await f.read()
        except OSError as e:
            raise StorageError(f"Failed to read store file {self.path}: {e}") from e

        if not raw.strip():
            return _empty_document()

        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Store file {self.path} is not valid JSON: {e}") from e

        if not isinstance(document, dict):
            raise StorageError(f"Store file {self.path} must contain a JSON object")

        for section in ("domains", "counters", "sessions"):
            document.setdefault(section, {})
        return document

    async def _atomic_write(self, document: dict[str, Any]) -> None:
        temp_path = self.path.with_suffix(".tmp")
        try:
            async with aiofiles.open(temp_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(document, indent=2, sort_keys=True))
            await aiofiles.os.rename(str(temp_path), str(self.path))
        except OSError as e:
            if temp_path.exists():
                try:
                    await aiofiles.os.remove(str(temp_path))
                except OSError:
                    logger.warning(f"Could not remove temp file {temp_path}")
            raise StorageError(f"Failed to write store file {self.path}: {e}") from e

    # ------------------------------------------------------------------
    # Domains
    # ------------------------------------------------------------------

    async def find_by_name_and_owner(self, name: str, owner_id: str) -> Domain | None:
        document = await self._load()
        record = document["domains"].get(name)
        if record is None or record.get("owner_id") != owner_id:
            return None
        return Domain(name=name, owner_id=record["owner_id"], verified=record.get("verified", False))

    async def save_domain(self, domain: Domain) -> None:
        """Insert or replace a domain record."""
        async with self._lock:
            document = await self._load()
            document["domains"][domain.name] = {
                "owner_id": domain.owner_id,
                "verified": domain.verified,
            }
            await self._atomic_write(document)

    # ------------------------------------------------------------------
    # Counters
    # ------------------------------------------------------------------

    async def read_snapshot(self, domain_name: str) -> CounterSnapshot:
        document = await self._load()
        record = document["counters"].get(domain_name)
        if record is None:
            return CounterSnapshot()
        return CounterSnapshot.model_validate(record)

    async def set_counter(self, domain_name: str, counter: str, value: int) -> None:
        if counter not in SITE_COUNTERS:
            raise ValueError(f"Unknown counter {counter!r}, expected one of {SITE_COUNTERS}")

        async with self._lock:
            document = await self._load()
            record = document["counters"].setdefault(
                domain_name, {"site_uv": 0, "site_pv": 0, "page_pv": {}}
            )
            record[counter] = value
            record["updated_at"] = datetime.now(timezone.utc).isoformat()
            await self._atomic_write(document)

        logger.debug(f"Stored {counter}={value} for {domain_name}")

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def find_session(self, token: str) -> SessionRecord | None:
        document = await self._load()
        record = document["sessions"].get(token)
        if record is None:
            return None
        return SessionRecord(token=token, **record)

    async def create_session(self, user_id: str, ttl_seconds: int | None = None) -> SessionRecord:
        """Issue a new session token for a user.

        Args:
            user_id: Identifier of the user
            ttl_seconds: Lifetime of the session (None = never expires)

        Returns:
            The stored session record
        """
        expires_at = None
        if ttl_seconds is not None:
            expires_at = datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds)

        session = SessionRecord(
            token=secrets.token_urlsafe(32), user_id=user_id, expires_at=expires_at
        )

        async with self._lock:
            document = await self._load()
            document["sessions"][session.token] = {
                "user_id": session.user_id,
                "expires_at": expires_at.isoformat() if expires_at else None,
            }
            await self._atomic_write(document)

        return session
