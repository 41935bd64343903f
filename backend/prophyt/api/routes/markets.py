from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from prophyt.api.deps import pagination_params
from prophyt.core.database import get_db
from prophyt.core.errors import NotFoundError, store_errors
from prophyt.schemas.envelope import PageMeta, ok
from prophyt.services.filters import Pagination, build_market_filter
from prophyt.services.markets import get_market_detail, list_markets

router = APIRouter()


@router.get("")
async def list_markets_route(
    status: str | None = Query(None, max_length=32),
    protocol_id: str | None = Query(None, alias="protocolId", max_length=128),
    page: Pagination = Depends(pagination_params(20)),
    db: AsyncSession = Depends(get_db),
) -> dict:
    filters = build_market_filter(status, protocol_id)
    async with store_errors("Failed to fetch markets"):
        data, total = await list_markets(db, filters, page)
    return ok(data, PageMeta(total=total, limit=page.limit, offset=page.offset))


@router.get("/{market_id}")
async def market_detail_route(
    market_id: str,
    db: AsyncSession = Depends(get_db),
) -> dict:
    async with store_errors("Failed to fetch market"):
        detail = await get_market_detail(db, market_id)
    if detail is None:
        raise NotFoundError("Market not found")
    return ok(detail)
