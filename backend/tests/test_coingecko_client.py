from decimal import Decimal

import httpx
import pytest

from prophyt.adapters.coingecko import CoinGeckoClient
from prophyt.adapters.errors import PriceFeedError


def _client(handler) -> CoinGeckoClient:  # type: ignore[no-untyped-def]
    return CoinGeckoClient(transport=httpx.MockTransport(handler))


async def test_fetch_price_parses_simple_price_payload() -> None:
    seen: dict[str, httpx.Request] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(200, json={"sui": {"usd": 3.21}})

    quote = await _client(handler).fetch_price("sui", "usd")

    assert quote.price == Decimal("3.21")
    assert quote.asset == "sui"
    assert quote.source == "coingecko"
    assert quote.fetched_at.tzinfo is not None
    request = seen["request"]
    assert request.url.path.endswith("/simple/price")
    assert request.url.params["ids"] == "sui"
    assert request.url.params["vs_currencies"] == "usd"


async def test_fetch_price_sends_api_key(monkeypatch) -> None:
    from prophyt.adapters import coingecko

    monkeypatch.setattr(coingecko.get_settings(), "price_feed_api_key", "demo-key")
    seen: dict[str, str | None] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["key"] = request.headers.get("x-cg-demo-api-key")
        return httpx.Response(200, json={"sui": {"usd": 1}})

    await _client(handler).fetch_price("sui")
    assert seen["key"] == "demo-key"


async def test_fetch_price_raises_on_http_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, text="rate limited")

    with pytest.raises(PriceFeedError) as excinfo:
        await _client(handler).fetch_price("sui")
    assert "HTTP 429" in excinfo.value.reason
    assert excinfo.value.asset == "sui"


async def test_fetch_price_raises_on_missing_asset() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={})

    with pytest.raises(PriceFeedError):
        await _client(handler).fetch_price("sui")


async def test_fetch_price_raises_on_non_json() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    with pytest.raises(PriceFeedError):
        await _client(handler).fetch_price("sui")


async def test_fetch_price_wraps_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(PriceFeedError) as excinfo:
        await _client(handler).fetch_price("sui")
    assert "Timeout" in excinfo.value.reason
