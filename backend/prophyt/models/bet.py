from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from prophyt.models.base import Base, TokenAmount, utcnow


class Bet(Base):
    __tablename__ = "bets"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    market_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("markets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    bettor: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    # True is a YES position
    position: Mapped[bool] = mapped_column(Boolean, nullable=False)
    amount: Mapped[Decimal] = mapped_column(TokenAmount, nullable=False)
    tx_digest: Mapped[str | None] = mapped_column(String(128), nullable=True)
    placed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )

    market = relationship("Market", back_populates="bets", lazy="noload")
    winnings_claimed = relationship(
        "WinningsClaimed",
        back_populates="bet",
        uselist=False,
        lazy="noload",
    )


Index("ix_bets_bettor_placed_at", Bet.bettor, Bet.placed_at)
Index("ix_bets_market_placed_at", Bet.market_id, Bet.placed_at)
