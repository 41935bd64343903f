from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from prophyt.core.database import get_db
from prophyt.core.errors import NotFoundError, store_errors
from prophyt.schemas.envelope import ok
from prophyt.services.charts import build_market_chart

router = APIRouter()


@router.get("/market/{market_id}")
async def market_chart_route(
    market_id: str,
    db: AsyncSession = Depends(get_db),
) -> dict:
    async with store_errors("Failed to fetch chart data"):
        chart = await build_market_chart(db, market_id)
    if chart is None:
        raise NotFoundError("Market not found")
    return ok(chart)
