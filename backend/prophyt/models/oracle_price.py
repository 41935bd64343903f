from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from prophyt.models.base import Base, utcnow


class OraclePrice(Base):
    """Latest known price per asset; the price updater upserts one row per asset."""

    __tablename__ = "oracle_prices"

    asset: Mapped[str] = mapped_column(String(64), primary_key=True)
    vs_currency: Mapped[str] = mapped_column(String(16), nullable=False, default="usd")
    price: Mapped[Decimal] = mapped_column(Numeric(precision=24, scale=10), nullable=False)
    source: Mapped[str] = mapped_column(String(32), nullable=False, default="coingecko")
    fetched_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
