"""
Busuanzi HTTP client.

Busuanzi exposes its counters only through a JSONP endpoint meant to be
called from a browser. The counted site is identified by the ``Referer``
header, and the payload is wrapped in a callback:

    try{BusuanziCallback_123({"site_uv":10,"page_pv":3,"version":2.4,"site_pv":42});}catch(e){}

Transient failures (transport errors, 429 and 5xx responses) are retried
with exponential backoff; anything else surfaces as ``BusuanziResponseError``.
"""

import json
import logging
import random
import re
from dataclasses import dataclass
from typing import Any

import httpx

from src.domain.exceptions import BusuanziError, BusuanziResponseError, BusuanziUnavailableError
from src.shared.retry import retry_with_backoff

logger = logging.getLogger(__name__)

_JSONP_PAYLOAD = re.compile(r"BusuanziCallback_\d+\((\{.*?\})\)", re.DOTALL)


@dataclass(frozen=True)
class BusuanziCounts:
    """Counters reported by Busuanzi for one site (None when absent)."""

    site_uv: int | None
    site_pv: int | None


def parse_jsonp(body: str) -> BusuanziCounts:
    """Extract counters from a Busuanzi JSONP body.

    Args:
        body: Raw response text

    Returns:
        Parsed counts; fields that are missing or not non-negative integers are None

    Raises:
        BusuanziResponseError: If the body carries no JSONP payload
    """
    match = _JSONP_PAYLOAD.search(body)
    if match is None:
        raise BusuanziResponseError(f"Unexpected Busuanzi response: {body[:120]!r}")

    try:
        payload = json.loads(match.group(1))
    except json.JSONDecodeError as e:
        raise BusuanziResponseError(f"Malformed Busuanzi payload: {e}") from e

    return BusuanziCounts(
        site_uv=_as_count(payload.get("site_uv")),
        site_pv=_as_count(payload.get("site_pv")),
    )


def _as_count(raw: Any) -> int | None:
    # bool is an int subclass
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        return None
    return raw


class BusuanziClient:
    """
    Async client for the Busuanzi JSONP endpoint.

    Attributes:
        _client: Shared httpx async client (connection pooling)
        _base_url: Busuanzi endpoint URL
        _max_retries: Retries for transient failures
        _initial_delay: First backoff delay in seconds
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        max_retries: int = 2,
        initial_delay: float = 0.5,
        user_agent: str = "Mozilla/5.0",
        client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url
        self._max_retries = max_retries
        self._initial_delay = initial_delay
        self._client = client or httpx.AsyncClient(
            timeout=timeout, headers={"User-Agent": user_agent}
        )

        logger.info(
            f"Initialized BusuanziClient - url: {base_url}, timeout: {timeout}s, "
            f"max_retries: {max_retries}"
        )

    async def fetch_counts(self, host: str) -> BusuanziCounts:
        """
        Fetch the site counters for a host.

        Args:
            host: Domain name registered with Busuanzi

        Returns:
            Counters reported by Busuanzi

        Raises:
            BusuanziError: If Busuanzi is unreachable after retries or answers badly
        """
        fetch = retry_with_backoff(
            max_retries=self._max_retries,
            initial_delay=self._initial_delay,
            exceptions=(httpx.TransportError, BusuanziUnavailableError),
        )(self._fetch_once)

        try:
            body = await fetch(host)
        except httpx.TransportError as e:
            raise BusuanziError(f"Busuanzi is unreachable: {e}") from e

        counts = parse_jsonp(body)
        logger.debug(f"Busuanzi counts for {host}: {counts}")
        return counts

    async def _fetch_once(self, host: str) -> str:
        callback = f"BusuanziCallback_{random.randint(10**11, 10**12 - 1)}"
        response = await self._client.get(
            self._base_url,
            params={"jsonpCallback": callback},
            headers={"Referer": f"https://{host}/"},
        )

        if response.status_code == 429 or response.status_code >= 500:
            raise BusuanziUnavailableError(
                f"Busuanzi returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        if response.status_code != 200:
            raise BusuanziResponseError(f"Busuanzi returned HTTP {response.status_code}")

        return response.text

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
