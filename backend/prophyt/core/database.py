import logging
from collections.abc import AsyncGenerator

from sqlalchemy import Table
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from prophyt.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

resolved_database_url = settings.resolved_database_url
resolved_database_url_source = settings.resolved_database_url_source
logger.info(
    "Database URL resolved",
    extra={
        "database_url_source": resolved_database_url_source,
        "database_host": settings.postgres_host if resolved_database_url_source == "postgres_fallback" else None,
        "database_name": settings.postgres_db if resolved_database_url_source == "postgres_fallback" else None,
    },
)

engine = create_async_engine(resolved_database_url, future=True, pool_pre_ping=True)
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


def upsert_insert(session: AsyncSession, table: Table):
    """INSERT construct with ON CONFLICT support for the session's dialect."""
    if session.get_bind().dialect.name == "sqlite":
        return sqlite_insert(table)
    return pg_insert(table)
