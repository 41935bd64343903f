from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from prophyt.models.bet import Bet
from prophyt.models.market import Market
from prophyt.models.market_resolved_event import MarketResolvedEvent
from prophyt.models.yield_deposit import YieldDeposit
from prophyt.services.filters import MarketFilter, Pagination
from prophyt.services.serializers import serialize_market, serialize_market_detail

DETAIL_RECENT_BETS = 10
DETAIL_RECENT_DEPOSITS = 5


def _market_predicates(filters: MarketFilter) -> list:
    predicates = []
    if filters.status is not None:
        predicates.append(Market.status == filters.status)
    if filters.protocol_id is not None:
        predicates.append(Market.protocol_id == filters.protocol_id)
    return predicates


async def count_bets_by_market(db: AsyncSession, market_ids: list[str]) -> dict[str, int]:
    if not market_ids:
        return {}
    stmt = (
        select(Bet.market_id, func.count(Bet.id))
        .where(Bet.market_id.in_(market_ids))
        .group_by(Bet.market_id)
    )
    rows = (await db.execute(stmt)).all()
    return {market_id: count for market_id, count in rows}


async def list_markets(
    db: AsyncSession,
    filters: MarketFilter,
    page: Pagination,
) -> tuple[list[dict], int]:
    predicates = _market_predicates(filters)

    stmt = (
        select(Market)
        .where(*predicates)
        .options(selectinload(Market.protocol))
        .order_by(desc(Market.created_at), desc(Market.id))
        .limit(page.limit)
        .offset(page.offset)
    )
    markets = (await db.execute(stmt)).scalars().all()

    total_stmt = select(func.count()).select_from(Market).where(*predicates)
    total = (await db.execute(total_stmt)).scalar_one()

    bet_counts = await count_bets_by_market(db, [market.id for market in markets])
    data = [serialize_market(market, bet_count=bet_counts.get(market.id, 0)) for market in markets]
    return data, total


async def get_market_detail(db: AsyncSession, market_id: str) -> dict | None:
    stmt = select(Market).where(Market.id == market_id).options(selectinload(Market.protocol))
    market = (await db.execute(stmt)).scalar_one_or_none()
    if market is None:
        return None

    bets_stmt = (
        select(Bet)
        .where(Bet.market_id == market_id)
        .order_by(desc(Bet.placed_at), desc(Bet.id))
        .limit(DETAIL_RECENT_BETS)
    )
    recent_bets = (await db.execute(bets_stmt)).scalars().all()

    resolved_stmt = select(MarketResolvedEvent).where(MarketResolvedEvent.market_id == market_id)
    resolved_event = (await db.execute(resolved_stmt)).scalar_one_or_none()

    deposits_stmt = (
        select(YieldDeposit)
        .where(YieldDeposit.market_id == market_id)
        .order_by(desc(YieldDeposit.deposited_at), desc(YieldDeposit.id))
        .limit(DETAIL_RECENT_DEPOSITS)
    )
    recent_deposits = (await db.execute(deposits_stmt)).scalars().all()

    bet_counts = await count_bets_by_market(db, [market_id])
    return serialize_market_detail(
        market,
        bet_count=bet_counts.get(market_id, 0),
        recent_bets=list(recent_bets),
        resolved_event=resolved_event,
        recent_deposits=list(recent_deposits),
    )
