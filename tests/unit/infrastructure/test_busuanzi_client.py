"""Tests for BusuanziClient.

Tests cover:
- JSONP payload parsing
- Request shape (Referer, callback parameter)
- Retry on transport errors, 429 and 5xx
- Non-retried failures (4xx, garbage bodies)
"""

import httpx
import pytest

from src.domain.exceptions import BusuanziError, BusuanziResponseError, BusuanziUnavailableError
from src.infrastructure.busuanzi.client import BusuanziClient, BusuanziCounts, parse_jsonp

BASE_URL = "https://busuanzi.test/busuanzi"


def jsonp(payload: str, callback: str = "BusuanziCallback_123456789012") -> str:
    return f"try{{{callback}({payload});}}catch(e){{}}"


def make_client(handler, max_retries: int = 2) -> BusuanziClient:
    transport = httpx.MockTransport(handler)
    return BusuanziClient(
        base_url=BASE_URL,
        max_retries=max_retries,
        initial_delay=0.0,
        client=httpx.AsyncClient(transport=transport),
    )


class TestParseJsonp:
    """Tests for JSONP parsing."""

    def test_parses_counts(self) -> None:
        """Test a regular payload is parsed."""
        body = jsonp('{"site_uv":100,"page_pv":7,"version":2.4,"site_pv":500}')

        assert parse_jsonp(body) == BusuanziCounts(site_uv=100, site_pv=500)

    def test_missing_and_invalid_fields_are_none(self) -> None:
        """Test fields that are absent, negative or not integers become None."""
        body = jsonp('{"site_uv":"100","site_pv":-3,"page_pv":7}')

        assert parse_jsonp(body) == BusuanziCounts(site_uv=None, site_pv=None)

    def test_boolean_is_not_a_count(self) -> None:
        """Test JSON booleans are rejected even though bool subclasses int."""
        assert parse_jsonp(jsonp('{"site_uv":true,"site_pv":2}')).site_uv is None

    def test_partial_payload(self) -> None:
        """Test one counter can be present without the other."""
        counts = parse_jsonp(jsonp('{"site_uv":100}'))
        assert counts.site_uv == 100
        assert counts.site_pv is None

    @pytest.mark.parametrize(
        "body",
        ["", "<html>blocked</html>", jsonp("{not json}")],
    )
    def test_garbage_rejected(self, body: str) -> None:
        """Test bodies without a JSONP payload raise BusuanziResponseError."""
        with pytest.raises(BusuanziResponseError):
            parse_jsonp(body)


class TestBusuanziClient:
    """Tests for HTTP behaviour of BusuanziClient."""

    @pytest.mark.asyncio
    async def test_fetch_counts(self) -> None:
        """Test a successful fetch sends Referer and callback."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            callback = request.url.params["jsonpCallback"]
            return httpx.Response(200, text=jsonp('{"site_uv":1,"site_pv":2}', callback))

        client = make_client(handler)
        counts = await client.fetch_counts("example.com")

        assert counts.site_uv == 1
        assert counts.site_pv == 2
        assert len(seen) == 1
        assert seen[0].headers["Referer"] == "https://example.com/"
        assert seen[0].url.params["jsonpCallback"].startswith("BusuanziCallback_")
        await client.aclose()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [429, 500, 503])
    async def test_retries_transient_status(self, status_code: int) -> None:
        """Test 429 and 5xx responses are retried."""
        responses = [
            httpx.Response(status_code),
            httpx.Response(200, text=jsonp('{"site_uv":1,"site_pv":2}')),
        ]

        def handler(request: httpx.Request) -> httpx.Response:
            return responses.pop(0)

        client = make_client(handler)
        counts = await client.fetch_counts("example.com")

        assert counts.site_pv == 2
        assert responses == []

    @pytest.mark.asyncio
    async def test_gives_up_after_retries(self) -> None:
        """Test a persistently failing Busuanzi raises BusuanziUnavailableError."""
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(502)

        client = make_client(handler, max_retries=2)

        with pytest.raises(BusuanziUnavailableError) as exc_info:
            await client.fetch_counts("example.com")

        assert exc_info.value.status_code == 502
        assert calls == 3

    @pytest.mark.asyncio
    async def test_transport_error_wrapped(self) -> None:
        """Test unreachable Busuanzi raises BusuanziError after retries."""
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            raise httpx.ConnectTimeout("timed out", request=request)

        client = make_client(handler, max_retries=1)

        with pytest.raises(BusuanziError, match="unreachable"):
            await client.fetch_counts("example.com")

        assert calls == 2

    @pytest.mark.asyncio
    async def test_client_error_not_retried(self) -> None:
        """Test a 403 is a response error and is not retried."""
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(403)

        client = make_client(handler)

        with pytest.raises(BusuanziResponseError, match="403"):
            await client.fetch_counts("example.com")

        assert calls == 1
