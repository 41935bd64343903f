from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from prophyt.core.database import get_db
from prophyt.core.errors import NotFoundError, store_errors
from prophyt.schemas.envelope import ok
from prophyt.services.protocols import get_protocol, list_protocols

router = APIRouter()


@router.get("")
async def list_protocols_route(
    active_only: bool = Query(False, alias="activeOnly"),
    db: AsyncSession = Depends(get_db),
) -> dict:
    async with store_errors("Failed to fetch protocols"):
        protocols = await list_protocols(db, active_only=active_only)
    return ok(protocols)


@router.get("/{protocol_id}")
async def protocol_detail_route(
    protocol_id: str,
    db: AsyncSession = Depends(get_db),
) -> dict:
    async with store_errors("Failed to fetch protocol"):
        protocol = await get_protocol(db, protocol_id)
    if protocol is None:
        raise NotFoundError("Protocol not found")
    return ok(protocol)
