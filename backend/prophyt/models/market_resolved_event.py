from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from prophyt.models.base import Base, TokenAmount, utcnow


class MarketResolvedEvent(Base):
    __tablename__ = "market_resolved_events"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    market_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("markets.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    outcome: Mapped[bool] = mapped_column(Boolean, nullable=False)
    total_yield_earned: Mapped[Decimal] = mapped_column(TokenAmount, nullable=False, default=0)
    tx_digest: Mapped[str | None] = mapped_column(String(128), nullable=True)
    resolved_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    market = relationship("Market", back_populates="resolved_event", lazy="noload")
