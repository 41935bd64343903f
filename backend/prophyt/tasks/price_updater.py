import asyncio
import logging
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from typing import Literal

from redis.asyncio import Redis
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from prophyt.adapters.coingecko import CoinGeckoClient
from prophyt.adapters.errors import PriceFeedError
from prophyt.core.config import get_settings
from prophyt.core.database import AsyncSessionLocal
from prophyt.core.logging import setup_logging
from prophyt.services.oracle import get_latest_price, is_stale, upsert_latest_price

settings = get_settings()
logger = logging.getLogger(__name__)

LOCK_KEY = "prophyt:price-updater-lock"


@dataclass
class TickResult:
    status: Literal["updated", "failed", "skipped"]
    started_at: datetime
    price: Decimal | None = None
    error: str | None = None


@asynccontextmanager
async def redis_cycle_lock(redis: Redis | None, lock_key: str, ttl_seconds: int):
    if redis is None:
        yield True
        return

    lock_value = str(uuid.uuid4())
    try:
        acquired = await redis.set(lock_key, lock_value, ex=ttl_seconds, nx=True)
    except Exception:
        logger.exception("Failed to acquire redis lock")
        yield True
        return

    if not acquired:
        yield False
        return

    try:
        yield True
    finally:
        try:
            current = await redis.get(lock_key)
            if current == lock_value:
                await redis.delete(lock_key)
        except Exception:
            logger.exception("Failed to release redis lock")


def backoff_delay(consecutive_failures: int, *, interval_seconds: int, max_seconds: int) -> int:
    """Delay before the next tick: the base interval, doubled per consecutive failure, capped."""
    base = max(1, interval_seconds)
    if consecutive_failures <= 0:
        return base
    exponent = min(consecutive_failures, 32)
    return min(base * (2**exponent), max(base, max_seconds))


class PriceUpdater:
    """Single-flight periodic task that refreshes the stored oracle price.

    Ticks never overlap: ``run_once`` returns a ``skipped`` result when a tick is
    already in flight in this process, or when another process holds the Redis
    lock. A failed fetch leaves the stored price untouched; the next tick is
    delayed with exponential backoff, and an ERROR-level staleness alarm fires
    once per failure streak when the stored price is older than
    ``price_stale_after_seconds``.
    """

    def __init__(
        self,
        *,
        client: CoinGeckoClient | None = None,
        session_factory: async_sessionmaker[AsyncSession] = AsyncSessionLocal,
        redis: Redis | None = None,
    ) -> None:
        self._client = client or CoinGeckoClient()
        self._session_factory = session_factory
        self._redis = redis
        self._lock = asyncio.Lock()
        self._task: asyncio.Task | None = None
        self._stale_alarm_raised = False
        self.consecutive_failures = 0
        self.last_success_at: datetime | None = None

    @property
    def asset(self) -> str:
        return settings.price_feed_asset_id

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def next_delay(self) -> int:
        return backoff_delay(
            self.consecutive_failures,
            interval_seconds=settings.price_update_interval_seconds,
            max_seconds=settings.price_feed_backoff_max_seconds,
        )

    def lock_ttl_seconds(self) -> int:
        # Covers the whole tick, not just the fetch, and lapses by the next one.
        return max(settings.price_update_interval_seconds, int(settings.price_feed_timeout_seconds) + 5)

    async def run_once(self) -> TickResult:
        started_at = datetime.now(UTC)
        if self._lock.locked():
            logger.info("Skipping price update because a tick is in flight", extra={"asset": self.asset})
            return TickResult(status="skipped", started_at=started_at)

        async with self._lock:
            async with redis_cycle_lock(self._redis, LOCK_KEY, ttl_seconds=self.lock_ttl_seconds()) as acquired:
                if not acquired:
                    logger.info("Skipping price update because lock is held", extra={"asset": self.asset})
                    return TickResult(status="skipped", started_at=started_at)
                return await self._tick(started_at)

    async def _tick(self, started_at: datetime) -> TickResult:
        asset = self.asset
        vs_currency = settings.price_feed_vs_currency
        try:
            quote = await asyncio.wait_for(
                self._client.fetch_price(asset, vs_currency),
                timeout=settings.price_feed_timeout_seconds,
            )
        except (PriceFeedError, asyncio.TimeoutError) as exc:
            return await self._record_failure(started_at, exc)

        try:
            async with self._session_factory() as db:
                await upsert_latest_price(
                    db,
                    asset=quote.asset,
                    vs_currency=quote.vs_currency,
                    price=quote.price,
                    source=quote.source,
                    fetched_at=quote.fetched_at,
                )
        except SQLAlchemyError as exc:
            logger.exception("Failed to persist oracle price", extra={"asset": asset})
            return await self._record_failure(started_at, exc)

        if self.consecutive_failures:
            logger.info(
                "Price feed recovered",
                extra={"asset": asset, "failures_before_recovery": self.consecutive_failures},
            )
        self.consecutive_failures = 0
        self._stale_alarm_raised = False
        self.last_success_at = quote.fetched_at
        logger.info(
            "Oracle price updated",
            extra={"asset": asset, "vs_currency": vs_currency, "price": str(quote.price)},
        )
        return TickResult(status="updated", started_at=started_at, price=quote.price)

    async def _record_failure(self, started_at: datetime, exc: Exception) -> TickResult:
        self.consecutive_failures += 1
        reason = str(exc) or type(exc).__name__
        logger.warning(
            "Price update failed",
            extra={
                "asset": self.asset,
                "error": reason,
                "consecutive_failures": self.consecutive_failures,
                "next_delay_seconds": self.next_delay(),
            },
        )
        await self._check_staleness()
        return TickResult(status="failed", started_at=started_at, error=reason)

    async def _check_staleness(self) -> None:
        if self._stale_alarm_raised:
            return
        try:
            async with self._session_factory() as db:
                stored = await get_latest_price(db, self.asset)
        except SQLAlchemyError:
            logger.exception("Failed to read stored oracle price", extra={"asset": self.asset})
            return

        max_age = settings.price_stale_after_seconds
        if stored is not None and not is_stale(stored, max_age_seconds=max_age):
            return
        self._stale_alarm_raised = True
        logger.error(
            "Price feed stale",
            extra={
                "asset": self.asset,
                "stale_after_seconds": max_age,
                "last_fetched_at": stored.fetched_at.isoformat() if stored is not None else None,
                "consecutive_failures": self.consecutive_failures,
            },
        )

    async def run_forever(self) -> None:
        logger.info(
            "Starting price updater",
            extra={
                "asset": self.asset,
                "vs_currency": settings.price_feed_vs_currency,
                "interval_seconds": settings.price_update_interval_seconds,
                "backoff_max_seconds": settings.price_feed_backoff_max_seconds,
            },
        )
        while True:
            try:
                await self.run_once()
            except Exception:
                logger.exception("Price update cycle failed")
            await asyncio.sleep(self.next_delay())

    def start(self) -> asyncio.Task:
        if self.running:
            return self._task
        self._task = asyncio.create_task(self.run_forever(), name="price-updater")
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Price updater stopped", extra={"asset": self.asset})


async def main() -> None:
    setup_logging()

    redis: Redis | None = None
    try:
        redis = Redis.from_url(settings.redis_url, decode_responses=True)
        await redis.ping()
    except Exception:
        logger.exception("Redis unavailable, price updater running without lock")
        redis = None

    try:
        await PriceUpdater(redis=redis).run_forever()
    finally:
        if redis is not None:
            await redis.aclose()


if __name__ == "__main__":
    asyncio.run(main())
