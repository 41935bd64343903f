from datetime import UTC, datetime, timedelta
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from prophyt.core.database import upsert_insert
from prophyt.models.oracle_price import OraclePrice
from prophyt.services.serializers import serialize_oracle_price


def _aware(value: datetime) -> datetime:
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


def is_stale(price: OraclePrice, *, max_age_seconds: int, now: datetime | None = None) -> bool:
    now = now or datetime.now(UTC)
    return now - _aware(price.fetched_at) > timedelta(seconds=max_age_seconds)


async def get_latest_price(db: AsyncSession, asset: str) -> OraclePrice | None:
    stmt = select(OraclePrice).where(OraclePrice.asset == asset)
    return (await db.execute(stmt)).scalar_one_or_none()


async def get_latest_price_payload(
    db: AsyncSession,
    asset: str,
    *,
    max_age_seconds: int,
) -> dict | None:
    price = await get_latest_price(db, asset)
    if price is None:
        return None
    return serialize_oracle_price(price, stale=is_stale(price, max_age_seconds=max_age_seconds))


async def upsert_latest_price(
    db: AsyncSession,
    *,
    asset: str,
    vs_currency: str,
    price: Decimal,
    source: str,
    fetched_at: datetime,
) -> None:
    now = datetime.now(UTC)
    insert_stmt = upsert_insert(db, OraclePrice.__table__).values(
        asset=asset,
        vs_currency=vs_currency,
        price=price,
        source=source,
        fetched_at=fetched_at,
        updated_at=now,
    )
    stmt = insert_stmt.on_conflict_do_update(
        index_elements=["asset"],
        set_={
            "vs_currency": insert_stmt.excluded.vs_currency,
            "price": insert_stmt.excluded.price,
            "source": insert_stmt.excluded.source,
            "fetched_at": insert_stmt.excluded.fetched_at,
            "updated_at": now,
        },
    )
    await db.execute(stmt)
    await db.commit()
