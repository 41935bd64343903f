from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from prophyt.models.base import Base, TokenAmount, utcnow


class YieldDeposit(Base):
    __tablename__ = "yield_deposits"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    market_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("markets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    protocol_id: Mapped[str] = mapped_column(String(128), ForeignKey("protocols.id"), nullable=False)
    amount: Mapped[Decimal] = mapped_column(TokenAmount, nullable=False)
    tx_digest: Mapped[str | None] = mapped_column(String(128), nullable=True)
    deposited_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )

    market = relationship("Market", back_populates="yield_deposits", lazy="noload")
