"""CoinGecko price feed client."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation

import httpx

from prophyt.adapters.errors import PriceFeedError
from prophyt.core.config import get_settings

logger = logging.getLogger(__name__)

SOURCE = "coingecko"


@dataclass(frozen=True)
class PriceQuote:
    asset: str
    vs_currency: str
    price: Decimal
    fetched_at: datetime
    source: str = SOURCE


class CoinGeckoClient:
    """Fetches the spot price of one asset from the CoinGecko simple-price API.

    Configuration is read from the application Settings object:
    - ``price_feed_base_url``: base URL for the CoinGecko v3 API.
    - ``price_feed_api_key``: optional demo/pro key sent as ``x-cg-demo-api-key``.
    - ``price_feed_timeout_seconds``: per-request timeout.
    """

    def __init__(self, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        settings = get_settings()
        self._base_url: str = settings.price_feed_base_url.rstrip("/")
        self._api_key: str = settings.price_feed_api_key
        self._timeout: float = settings.price_feed_timeout_seconds
        self._transport = transport

    async def fetch_price(self, asset: str, vs_currency: str = "usd") -> PriceQuote:
        """Fetch the current price of *asset* quoted in *vs_currency*.

        Raises PriceFeedError on network/HTTP errors or a malformed payload.
        """
        url = f"{self._base_url}/simple/price"
        params = {"ids": asset, "vs_currencies": vs_currency}
        headers: dict[str, str] = {"Accept": "application/json"}
        if self._api_key:
            headers["x-cg-demo-api-key"] = self._api_key

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(url, params=params, headers=headers)
        except httpx.TimeoutException as exc:
            logger.warning(
                "CoinGecko request timed out",
                extra={"asset": asset, "timeout": self._timeout},
            )
            raise PriceFeedError("COINGECKO", asset, f"Timeout after {self._timeout}s") from exc
        except httpx.HTTPError as exc:
            logger.warning(
                "CoinGecko request failed",
                extra={"asset": asset, "error": str(exc)},
            )
            raise PriceFeedError("COINGECKO", asset, str(exc)) from exc

        if response.status_code != 200:
            body_snippet = response.text[:200]
            logger.warning(
                "CoinGecko non-200 response",
                extra={
                    "asset": asset,
                    "status": response.status_code,
                    "body_snippet": body_snippet,
                },
            )
            raise PriceFeedError("COINGECKO", asset, f"HTTP {response.status_code}: {body_snippet}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise PriceFeedError("COINGECKO", asset, "Response body is not JSON") from exc

        # Shape: {"sui": {"usd": 1.23}}
        entry = payload.get(asset) if isinstance(payload, dict) else None
        raw_price = entry.get(vs_currency) if isinstance(entry, dict) else None
        if raw_price is None:
            raise PriceFeedError("COINGECKO", asset, f"No {vs_currency} price in response")

        try:
            price = Decimal(str(raw_price))
        except InvalidOperation as exc:
            raise PriceFeedError("COINGECKO", asset, f"Unparseable price {raw_price!r}") from exc
        if not price.is_finite() or price < 0:
            raise PriceFeedError("COINGECKO", asset, f"Invalid price {raw_price!r}")

        return PriceQuote(
            asset=asset,
            vs_currency=vs_currency,
            price=price,
            fetched_at=datetime.now(UTC),
        )
