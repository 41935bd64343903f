from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from prophyt.api.deps import pagination_params
from prophyt.core.database import get_db
from prophyt.core.errors import NotFoundError, store_errors
from prophyt.schemas.envelope import PageMeta, ok
from prophyt.services.bets import get_bet, list_bets
from prophyt.services.filters import Pagination, build_bet_filter

router = APIRouter()


@router.get("")
async def list_bets_route(
    market_id: str | None = Query(None, alias="marketId", max_length=128),
    bettor: str | None = Query(None, max_length=128),
    page: Pagination = Depends(pagination_params(20)),
    db: AsyncSession = Depends(get_db),
) -> dict:
    filters = build_bet_filter(market_id, bettor)
    async with store_errors("Failed to fetch bets"):
        data, total = await list_bets(db, filters, page)
    return ok(data, PageMeta(total=total, limit=page.limit, offset=page.offset))


@router.get("/{bet_id}")
async def bet_detail_route(
    bet_id: str,
    db: AsyncSession = Depends(get_db),
) -> dict:
    async with store_errors("Failed to fetch bet"):
        bet = await get_bet(db, bet_id)
    if bet is None:
        raise NotFoundError("Bet not found")
    return ok(bet)
