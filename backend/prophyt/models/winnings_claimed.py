from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from prophyt.models.base import Base, TokenAmount, utcnow


class WinningsClaimed(Base):
    __tablename__ = "winnings_claimed"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    bet_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("bets.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    market_id: Mapped[str] = mapped_column(String(128), ForeignKey("markets.id"), nullable=False, index=True)
    winner: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    winning_amount: Mapped[Decimal | None] = mapped_column(TokenAmount, nullable=True)
    yield_share: Mapped[Decimal | None] = mapped_column(TokenAmount, nullable=True)
    tx_digest: Mapped[str | None] = mapped_column(String(128), nullable=True)
    claimed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    bet = relationship("Bet", back_populates="winnings_claimed", lazy="noload")
