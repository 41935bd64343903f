from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from prophyt.models.market import Market
from prophyt.models.protocol import Protocol
from prophyt.services.serializers import serialize_protocol


async def _market_counts(db: AsyncSession, protocol_ids: list[str]) -> dict[str, int]:
    if not protocol_ids:
        return {}
    stmt = (
        select(Market.protocol_id, func.count(Market.id))
        .where(Market.protocol_id.in_(protocol_ids))
        .group_by(Market.protocol_id)
    )
    return {protocol_id: count for protocol_id, count in (await db.execute(stmt)).all()}


def _with_count(protocol: Protocol, counts: dict[str, int]) -> dict:
    payload = serialize_protocol(protocol)
    payload["_count"] = {"markets": counts.get(protocol.id, 0)}
    return payload


async def list_protocols(db: AsyncSession, *, active_only: bool = False) -> list[dict]:
    stmt = select(Protocol).order_by(Protocol.name.asc())
    if active_only:
        stmt = stmt.where(Protocol.is_active.is_(True))
    protocols = (await db.execute(stmt)).scalars().all()
    counts = await _market_counts(db, [protocol.id for protocol in protocols])
    return [_with_count(protocol, counts) for protocol in protocols]


async def get_protocol(db: AsyncSession, protocol_id: str) -> dict | None:
    protocol = await db.get(Protocol, protocol_id)
    if protocol is None:
        return None
    counts = await _market_counts(db, [protocol.id])
    return _with_count(protocol, counts)
