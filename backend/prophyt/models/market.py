from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from prophyt.models.base import Base, TimestampMixin, TokenAmount


class Market(Base, TimestampMixin):
    __tablename__ = "markets"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    question: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active", index=True)
    protocol_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("protocols.id"), nullable=False, index=True
    )
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    total_yes_amount: Mapped[Decimal] = mapped_column(TokenAmount, nullable=False, default=0)
    total_no_amount: Mapped[Decimal] = mapped_column(TokenAmount, nullable=False, default=0)
    total_yield_earned: Mapped[Decimal] = mapped_column(TokenAmount, nullable=False, default=0)

    protocol = relationship("Protocol", back_populates="markets", lazy="noload")
    bets = relationship("Bet", back_populates="market", lazy="noload")
    resolved_event = relationship(
        "MarketResolvedEvent",
        back_populates="market",
        uselist=False,
        lazy="noload",
    )
    yield_deposits = relationship("YieldDeposit", back_populates="market", lazy="noload")


Index("ix_markets_status_created_at", Market.status, Market.created_at)
