from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from prophyt.api.deps import pagination_params
from prophyt.core.database import get_db
from prophyt.core.errors import store_errors
from prophyt.schemas.envelope import PageMeta, ok
from prophyt.services.bets import get_user_stats, list_user_bets
from prophyt.services.filters import Pagination

router = APIRouter()


@router.get("/{address}/bets")
async def user_bets_route(
    address: str,
    page: Pagination = Depends(pagination_params(50)),
    db: AsyncSession = Depends(get_db),
) -> dict:
    async with store_errors("Failed to fetch user bets"):
        data, total = await list_user_bets(db, address, page)
    return ok(data, PageMeta(total=total, limit=page.limit, offset=page.offset))


@router.get("/{address}/stats")
async def user_stats_route(
    address: str,
    db: AsyncSession = Depends(get_db),
) -> dict:
    async with store_errors("Failed to fetch user stats"):
        stats = await get_user_stats(db, address)
    return ok(stats)
