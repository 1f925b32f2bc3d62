"""API request/response models.

Separate from domain models so the wire format (camelCase keys, response
envelope) can evolve independently.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.domain.models import CounterSnapshot, SyncedValues, SyncOutcome, SyncedOutcome

SYNC_SUCCESS_MESSAGE = "Data synced successfully from Busuanzi"


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SyncRequest(CamelModel):
    """Request model for forcing a Busuanzi sync of one domain."""

    domain_name: str | None = Field(
        default=None,
        description="Name of a verified domain owned by the caller",
        examples=["example.com"],
    )


class CounterValueModel(CamelModel):
    """A single counter value pulled from Busuanzi."""

    value: int = Field(ge=0, description="Counter value reported by Busuanzi")


class SyncedValuesModel(CamelModel):
    """Values produced by the sync attempt (null when a counter failed)."""

    site_uv: CounterValueModel | None = Field(default=None, description="Unique visitors")
    site_pv: CounterValueModel | None = Field(default=None, description="Page views")

    @classmethod
    def from_domain(cls, values: SyncedValues) -> "SyncedValuesModel":
        return cls(
            site_uv=CounterValueModel(value=values.site_uv.value) if values.site_uv else None,
            site_pv=CounterValueModel(value=values.site_pv.value) if values.site_pv else None,
        )


class CountersModel(CamelModel):
    """Counter state of the domain as stored after the sync."""

    site_uv: int = Field(ge=0, description="Site-wide unique visitors")
    site_pv: int = Field(ge=0, description="Site-wide page views")
    page_pv: dict[str, int] = Field(default_factory=dict, description="Page views per path")
    updated_at: datetime | None = Field(default=None, description="Last counter update")

    @classmethod
    def from_domain(cls, snapshot: CounterSnapshot) -> "CountersModel":
        return cls(
            site_uv=snapshot.site_uv,
            site_pv=snapshot.site_pv,
            page_pv=dict(snapshot.page_pv),
            updated_at=snapshot.updated_at,
        )


class SyncedData(CamelModel):
    """Payload when every counter was refreshed."""

    synced: Literal[True] = True
    domain_name: str
    counters: CountersModel
    synced_values: SyncedValuesModel


class PartialSyncData(CamelModel):
    """Payload when Busuanzi did not refresh every counter."""

    synced: Literal[False] = False
    domain_name: str
    details: SyncedValuesModel


class SyncResponse(CamelModel):
    """Envelope returned by the sync endpoint for both full and partial syncs."""

    success: bool = Field(default=True, description="The request itself was accepted")
    message: str = Field(description="Human-readable outcome")
    data: SyncedData | PartialSyncData

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "success": True,
                    "message": SYNC_SUCCESS_MESSAGE,
                    "data": {
                        "synced": True,
                        "domainName": "example.com",
                        "counters": {
                            "siteUv": 100,
                            "sitePv": 500,
                            "pagePv": {},
                            "updatedAt": "2026-01-01T00:00:00+00:00",
                        },
                        "syncedValues": {"siteUv": {"value": 100}, "sitePv": {"value": 500}},
                    },
                },
                {
                    "success": True,
                    "message": "timeout",
                    "data": {
                        "synced": False,
                        "domainName": "example.com",
                        "details": {"siteUv": {"value": 100}, "sitePv": None},
                    },
                },
            ]
        },
    )

    @classmethod
    def from_domain(cls, outcome: SyncOutcome) -> "SyncResponse":
        """Convert a domain sync outcome to the API response.

        Args:
            outcome: SyncedOutcome or PartialSyncOutcome

        Returns:
            API SyncResponse
        """
        if isinstance(outcome, SyncedOutcome):
            return cls(
                message=SYNC_SUCCESS_MESSAGE,
                data=SyncedData(
                    domain_name=outcome.domain_name,
                    counters=CountersModel.from_domain(outcome.counters),
                    synced_values=SyncedValuesModel.from_domain(outcome.synced_values),
                ),
            )

        return cls(
            message=outcome.message,
            data=PartialSyncData(
                domain_name=outcome.domain_name,
                details=SyncedValuesModel.from_domain(outcome.details),
            ),
        )


class ErrorResponse(BaseModel):
    """Error body returned for rejected requests."""

    detail: str = Field(
        description="Human-readable reason the request was rejected",
        examples=["Domain not found or does not belong to you"],
    )
