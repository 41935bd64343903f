from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from prophyt.core.config import get_settings
from prophyt.core.database import get_db
from prophyt.core.errors import NotFoundError, store_errors
from prophyt.schemas.envelope import ok
from prophyt.services.oracle import get_latest_price_payload

router = APIRouter()
settings = get_settings()


@router.get("/price/latest")
async def latest_price_route(
    asset: str | None = Query(None, max_length=64),
    db: AsyncSession = Depends(get_db),
) -> dict:
    asset_id = (asset or "").strip().lower() or settings.price_feed_asset_id
    async with store_errors("Failed to fetch price"):
        payload = await get_latest_price_payload(
            db,
            asset_id,
            max_age_seconds=settings.price_stale_after_seconds,
        )
    if payload is None:
        raise NotFoundError("Price not available")
    return ok(payload)
