
from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from prophyt.models.bet import Bet
from prophyt.models.market import Market
from prophyt.models.winnings_claimed import WinningsClaimed
from prophyt.services.filters import BetFilter, Pagination
from prophyt.services.serializers import amount_str, serialize_bet_with_market


def _bet_predicates(filters: BetFilter) -> list:
    predicates = []
    if filters.market_id is not None:
        predicates.append(Bet.market_id == filters.market_id)
    if filters.bettor is not None:
        predicates.append(Bet.bettor == filters.bettor)
    return predicates


def _bet_load_options() -> list:
    return [
        selectinload(Bet.market).selectinload(Market.protocol),
        selectinload(Bet.winnings_claimed),
    ]


async def list_bets(
    db: AsyncSession,
    filters: BetFilter,
    page: Pagination,
) -> tuple[list[dict], int]:
    predicates = _bet_predicates(filters)

    stmt = (
        select(Bet)
        .where(*predicates)
        .options(*_bet_load_options())
        .order_by(desc(Bet.placed_at), desc(Bet.id))
        .limit(page.limit)
        .offset(page.offset)
    )
    bets = (await db.execute(stmt)).scalars().all()

    total_stmt = select(func.count()).select_from(Bet).where(*predicates)
    total = (await db.execute(total_stmt)).scalar_one()
    return [serialize_bet_with_market(bet) for bet in bets], total


async def list_user_bets(db: AsyncSession, address: str, page: Pagination) -> tuple[list[dict], int]:
    return await list_bets(db, BetFilter(bettor=address), page)


async def get_bet(db: AsyncSession, bet_id: str) -> dict | None:
    stmt = select(Bet).where(Bet.id == bet_id).options(*_bet_load_options())
    bet = (await db.execute(stmt)).scalar_one_or_none()
    if bet is None:
        return None
    return serialize_bet_with_market(bet)


async def get_user_stats(db: AsyncSession, address: str) -> dict:
    bet_stmt = select(func.count(Bet.id), func.sum(Bet.amount)).where(Bet.bettor == address)
    bet_count, total_staked = (await db.execute(bet_stmt)).one()

    claim_stmt = (
        select(
            func.count(WinningsClaimed.id),
            func.sum(WinningsClaimed.winning_amount),
            func.sum(WinningsClaimed.yield_share),
        )
        .join(Bet, Bet.id == WinningsClaimed.bet_id)
        .where(Bet.bettor == address)
    )
    claim_count, total_winnings, total_yield = (await db.execute(claim_stmt)).one()

    active_stmt = (
        select(func.count(func.distinct(Bet.market_id)))
        .join(Market, Market.id == Bet.market_id)
        .where(Bet.bettor == address, Market.status == "active")
    )
    active_markets = (await db.execute(active_stmt)).scalar_one()

    return {
        "address": address,
        "totalBets": int(bet_count or 0),
        "totalStaked": amount_str(total_staked),
        "activeMarkets": int(active_markets or 0),
        "claims": int(claim_count or 0),
        "totalWinnings": amount_str(total_winnings),
        "totalYieldShare": amount_str(total_yield),
    }