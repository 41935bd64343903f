from datetime import UTC, datetime
from decimal import Decimal

from prophyt.models.bet import Bet
from prophyt.models.market import Market
from prophyt.models.market_resolved_event import MarketResolvedEvent
from prophyt.models.oracle_price import OraclePrice
from prophyt.models.protocol import Protocol
from prophyt.models.winnings_claimed import WinningsClaimed
from prophyt.models.yield_deposit import YieldDeposit


def amount_str(value: Decimal | int | float | None, default: str | None = "0") -> str | None:
    if value is None:
        return default
    if isinstance(value, Decimal):
        # Exact digits; Decimal.normalize() rounds to 28 places.
        text = format(value, "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text
    return str(value)


def iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    # SQLite hands back naive datetimes; everything is stored as UTC.
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


def serialize_protocol(protocol: Protocol | None) -> dict | None:
    if protocol is None:
        return None
    return {
        "id": protocol.id,
        "name": protocol.name,
        "displayName": protocol.display_name,
        "protocolType": protocol.protocol_type,
        "description": protocol.description,
        "websiteUrl": protocol.website_url,
        "isActive": protocol.is_active,
        "createdAt": iso(protocol.created_at),
    }


def serialize_resolved_event(event: MarketResolvedEvent | None) -> dict | None:
    if event is None:
        return None
    return {
        "id": event.id,
        "marketId": event.market_id,
        "outcome": event.outcome,
        "totalYieldEarned": amount_str(event.total_yield_earned),
        "txDigest": event.tx_digest,
        "resolvedAt": iso(event.resolved_at),
    }


def serialize_yield_deposit(deposit: YieldDeposit) -> dict:
    return {
        "id": deposit.id,
        "marketId": deposit.market_id,
        "protocolId": deposit.protocol_id,
        "amount": amount_str(deposit.amount),
        "txDigest": deposit.tx_digest,
        "depositedAt": iso(deposit.deposited_at),
    }


def serialize_winnings_claimed(claim: WinningsClaimed | None) -> dict | None:
    if claim is None:
        return None
    return {
        "id": claim.id,
        "betId": claim.bet_id,
        "marketId": claim.market_id,
        "winner": claim.winner,
        "winningAmount": amount_str(claim.winning_amount),
        "yieldShare": amount_str(claim.yield_share),
        "txDigest": claim.tx_digest,
        "claimedAt": iso(claim.claimed_at),
    }


def serialize_bet(bet: Bet) -> dict:
    return {
        "id": bet.id,
        "marketId": bet.market_id,
        "bettor": bet.bettor,
        "position": "yes" if bet.position else "no",
        "amount": amount_str(bet.amount),
        "txDigest": bet.tx_digest,
        "placedAt": iso(bet.placed_at),
    }


def serialize_market(market: Market, *, bet_count: int | None = None) -> dict:
    payload = {
        "id": market.id,
        "question": market.question,
        "description": market.description,
        "status": market.status,
        "protocolId": market.protocol_id,
        "endTime": iso(market.end_time),
        "totalYesAmount": amount_str(market.total_yes_amount),
        "totalNoAmount": amount_str(market.total_no_amount),
        "totalYieldEarned": amount_str(market.total_yield_earned),
        "createdAt": iso(market.created_at),
        "updatedAt": iso(market.updated_at),
    }
    # Relationships are noload by default; only emit the protocol when loaded.
    if "protocol" in market.__dict__:
        payload["protocol"] = serialize_protocol(market.protocol)
    if bet_count is not None:
        payload["_count"] = {"bets": bet_count}
    return payload


def serialize_bet_with_market(bet: Bet) -> dict:
    payload = serialize_bet(bet)
    if "market" in bet.__dict__:
        payload["market"] = serialize_market(bet.market) if bet.market is not None else None
    if "winnings_claimed" in bet.__dict__:
        payload["winningsClaimed"] = serialize_winnings_claimed(bet.winnings_claimed)
    return payload


def serialize_oracle_price(price: OraclePrice, *, stale: bool) -> dict:
    return {
        "asset": price.asset,
        "vsCurrency": price.vs_currency,
        "price": amount_str(price.price),
        "source": price.source,
        "fetchedAt": iso(price.fetched_at),
        "updatedAt": iso(price.updated_at),
        "stale": stale,
    }


def serialize_market_detail(
    market: Market,
    *,
    bet_count: int,
    recent_bets: list[Bet],
    resolved_event: MarketResolvedEvent | None,
    recent_deposits: list[YieldDeposit],
) -> dict:
    payload = serialize_market(market, bet_count=bet_count)
    payload["bets"] = [serialize_bet(bet) for bet in recent_bets]
    payload["marketResolvedEvent"] = serialize_resolved_event(resolved_event)
    payload["yieldDeposits"] = [serialize_yield_deposit(deposit) for deposit in recent_deposits]
    return payload
