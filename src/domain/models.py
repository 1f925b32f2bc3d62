"""Domain models for counter synchronization.

All models use Pydantic for validation, serialization, and type safety.
"""

from datetime import datetime
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PARTIAL_SYNC_MESSAGE = (
    "Some data failed to sync from Busuanzi. The service may be temporarily unavailable."
)

# ============================================================================
# Identity
# ============================================================================


class SessionUser(BaseModel):
    """User attached to an authenticated session."""

    id: str | None = Field(default=None, description="Identifier of the signed-in user")

    model_config = ConfigDict(frozen=True)


class AuthSession(BaseModel):
    """Session resolved for the current request."""

    user: SessionUser

    model_config = ConfigDict(frozen=True)


class SessionRecord(BaseModel):
    """Stored session token."""

    token: str
    user_id: str
    expires_at: datetime | None = Field(
        default=None, description="Expiry timestamp (None = never expires)"
    )

    model_config = ConfigDict(frozen=True)


# ============================================================================
# Domains and counters
# ============================================================================


class Domain(BaseModel):
    """A user-registered website tracked for page-view counting."""

    name: str = Field(min_length=1, description="Domain name (unique key)")
    owner_id: str = Field(description="Identifier of the owning user")
    verified: bool = Field(default=False, description="Whether ownership was verified")

    model_config = ConfigDict(frozen=True)


class CounterValue(BaseModel):
    """Single counter value fetched from the remote source."""

    value: int = Field(ge=0)

    model_config = ConfigDict(frozen=True)


class CounterSnapshot(BaseModel):
    """Stored counter state of a domain."""

    site_uv: int = Field(default=0, ge=0, description="Site-wide unique visitors")
    site_pv: int = Field(default=0, ge=0, description="Site-wide page views")
    page_pv: dict[str, int] = Field(default_factory=dict, description="Page views per path")
    updated_at: datetime | None = Field(default=None, description="Last counter write")

    model_config = ConfigDict(frozen=True)


class SyncResult(BaseModel):
    """Outcome of one attempt to pull counters from the remote source."""

    success: bool = Field(description="True only if every tracked counter was refreshed")
    site_uv: CounterValue | None = None
    site_pv: CounterValue | None = None
    error: str | None = Field(default=None, description="Reason the attempt was incomplete")

    model_config = ConfigDict(frozen=True)


# ============================================================================
# Sync outcomes
# ============================================================================


class SyncedValues(BaseModel):
    """Values produced by a sync attempt for the tracked counters."""

    site_uv: CounterValue | None = None
    site_pv: CounterValue | None = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_sync_result(cls, result: SyncResult) -> "SyncedValues":
        return cls(site_uv=result.site_uv, site_pv=result.site_pv)


class SyncedOutcome(BaseModel):
    """Every tracked counter was refreshed."""

    synced: Literal[True] = True
    domain_name: str
    counters: CounterSnapshot = Field(description="Counter state read after the sync")
    synced_values: SyncedValues

    model_config = ConfigDict(frozen=True)


class PartialSyncOutcome(BaseModel):
    """The request was valid but the remote source did not refresh every counter."""

    synced: Literal[False] = False
    domain_name: str
    details: SyncedValues
    message: str = DEFAULT_PARTIAL_SYNC_MESSAGE

    model_config = ConfigDict(frozen=True)


SyncOutcome = Union[SyncedOutcome, PartialSyncOutcome]
