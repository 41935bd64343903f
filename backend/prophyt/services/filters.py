"""Typed query filters built from already-validated request parameters.

Handlers never splice optional keys into a query themselves: they build one of
these immutable structs and hand it to a query service, which turns it into
SQL predicates.
"""

from __future__ import annotations

from dataclasses import dataclass

ALL_STATUSES = "all"
DEFAULT_MARKET_STATUS = "active"


@dataclass(frozen=True)
class Pagination:
    limit: int
    offset: int


@dataclass(frozen=True)
class MarketFilter:
    status: str | None = None
    protocol_id: str | None = None


@dataclass(frozen=True)
class BetFilter:
    market_id: str | None = None
    bettor: str | None = None


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def build_pagination(limit: int, offset: int, *, max_limit: int) -> Pagination:
    return Pagination(limit=max(0, min(limit, max_limit)), offset=max(0, offset))


def build_market_filter(status: str | None, protocol_id: str | None) -> MarketFilter:
    # Only an absent parameter means "active"; an empty one lists every status.
    if status is None:
        cleaned_status = DEFAULT_MARKET_STATUS
    else:
        cleaned_status = _clean(status)
        if cleaned_status is not None and cleaned_status.lower() == ALL_STATUSES:
            cleaned_status = None
    return MarketFilter(status=cleaned_status, protocol_id=_clean(protocol_id))


def build_bet_filter(market_id: str | None, bettor: str | None) -> BetFilter:
    return BetFilter(market_id=_clean(market_id), bettor=_clean(bettor))
