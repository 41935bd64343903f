"""Typed errors for price feed clients."""

from __future__ import annotations


class PriceFeedError(Exception):
    """Raised when a price feed request fails or returns an unusable payload.

    Attributes:
        source: Feed name (e.g. "COINGECKO").
        asset: The asset identifier that was queried.
        reason: Human-readable error description.
    """

    def __init__(self, source: str, asset: str, reason: str) -> None:
        self.source = source
        self.asset = asset
        self.reason = reason
        super().__init__(f"[{source}] asset={asset}: {reason}")
