"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TOKEN_AMOUNT = sa.Numeric(precision=78, scale=0)


def upgrade() -> None:
    op.create_table(
        "protocols",
        sa.Column("id", sa.String(length=128), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("display_name", sa.String(length=120), nullable=True),
        sa.Column("protocol_type", sa.String(length=32), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("website_url", sa.String(length=255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_protocols_name", "protocols", ["name"], unique=True)
    op.create_index("ix_protocols_created_at", "protocols", ["created_at"], unique=False)

    op.create_table(
        "markets",
        sa.Column("id", sa.String(length=128), primary_key=True, nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("protocol_id", sa.String(length=128), sa.ForeignKey("protocols.id"), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("total_yes_amount", TOKEN_AMOUNT, nullable=False, server_default="0"),
        sa.Column("total_no_amount", TOKEN_AMOUNT, nullable=False, server_default="0"),
        sa.Column("total_yield_earned", TOKEN_AMOUNT, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_markets_status", "markets", ["status"], unique=False)
    op.create_index("ix_markets_protocol_id", "markets", ["protocol_id"], unique=False)
    op.create_index("ix_markets_created_at", "markets", ["created_at"], unique=False)
    op.create_index("ix_markets_status_created_at", "markets", ["status", "created_at"], unique=False)

    op.create_table(
        "bets",
        sa.Column("id", sa.String(length=128), primary_key=True, nullable=False),
        sa.Column(
            "market_id", sa.String(length=128), sa.ForeignKey("markets.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("bettor", sa.String(length=128), nullable=False),
        sa.Column("position", sa.Boolean(), nullable=False),
        sa.Column("amount", TOKEN_AMOUNT, nullable=False),
        sa.Column("tx_digest", sa.String(length=128), nullable=True),
        sa.Column("placed_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_bets_market_id", "bets", ["market_id"], unique=False)
    op.create_index("ix_bets_bettor", "bets", ["bettor"], unique=False)
    op.create_index("ix_bets_placed_at", "bets", ["placed_at"], unique=False)
    op.create_index("ix_bets_bettor_placed_at", "bets", ["bettor", "placed_at"], unique=False)
    op.create_index("ix_bets_market_placed_at", "bets", ["market_id", "placed_at"], unique=False)

    op.create_table(
        "winnings_claimed",
        sa.Column("id", sa.String(length=128), primary_key=True, nullable=False),
        sa.Column("bet_id", sa.String(length=128), sa.ForeignKey("bets.id", ondelete="CASCADE"), nullable=False),
        sa.Column("market_id", sa.String(length=128), sa.ForeignKey("markets.id"), nullable=False),
        sa.Column("winner", sa.String(length=128), nullable=False),
        sa.Column("winning_amount", TOKEN_AMOUNT, nullable=True),
        sa.Column("yield_share", TOKEN_AMOUNT, nullable=True),
        sa.Column("tx_digest", sa.String(length=128), nullable=True),
        sa.Column("claimed_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("bet_id"),
    )
    op.create_index("ix_winnings_claimed_market_id", "winnings_claimed", ["market_id"], unique=False)
    op.create_index("ix_winnings_claimed_winner", "winnings_claimed", ["winner"], unique=False)

    op.create_table(
        "market_resolved_events",
        sa.Column("id", sa.String(length=128), primary_key=True, nullable=False),
        sa.Column(
            "market_id", sa.String(length=128), sa.ForeignKey("markets.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("outcome", sa.Boolean(), nullable=False),
        sa.Column("total_yield_earned", TOKEN_AMOUNT, nullable=False, server_default="0"),
        sa.Column("tx_digest", sa.String(length=128), nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("market_id"),
    )

    op.create_table(
        "yield_deposits",
        sa.Column("id", sa.String(length=128), primary_key=True, nullable=False),
        sa.Column(
            "market_id", sa.String(length=128), sa.ForeignKey("markets.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("protocol_id", sa.String(length=128), sa.ForeignKey("protocols.id"), nullable=False),
        sa.Column("amount", TOKEN_AMOUNT, nullable=False),
        sa.Column("tx_digest", sa.String(length=128), nullable=True),
        sa.Column("deposited_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_yield_deposits_market_id", "yield_deposits", ["market_id"], unique=False)
    op.create_index("ix_yield_deposits_deposited_at", "yield_deposits", ["deposited_at"], unique=False)

    op.create_table(
        "oracle_prices",
        sa.Column("asset", sa.String(length=64), primary_key=True, nullable=False),
        sa.Column("vs_currency", sa.String(length=16), nullable=False, server_default="usd"),
        sa.Column("price", sa.Numeric(precision=24, scale=10), nullable=False),
        sa.Column("source", sa.String(length=32), nullable=False, server_default="coingecko"),
        sa.Column("fetched_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("oracle_prices")
    op.drop_index("ix_yield_deposits_deposited_at", table_name="yield_deposits")
    op.drop_index("ix_yield_deposits_market_id", table_name="yield_deposits")
    op.drop_table("yield_deposits")
    op.drop_table("market_resolved_events")
    op.drop_index("ix_winnings_claimed_winner", table_name="winnings_claimed")
    op.drop_index("ix_winnings_claimed_market_id", table_name="winnings_claimed")
    op.drop_table("winnings_claimed")
    op.drop_index("ix_bets_market_placed_at", table_name="bets")
    op.drop_index("ix_bets_bettor_placed_at", table_name="bets")
    op.drop_index("ix_bets_placed_at", table_name="bets")
    op.drop_index("ix_bets_bettor", table_name="bets")
    op.drop_index("ix_bets_market_id", table_name="bets")
    op.drop_table("bets")
    op.drop_index("ix_markets_status_created_at", table_name="markets")
    op.drop_index("ix_markets_created_at", table_name="markets")
    op.drop_index("ix_markets_protocol_id", table_name="markets")
    op.drop_index("ix_markets_status", table_name="markets")
    op.drop_table("markets")
    op.drop_index("ix_protocols_created_at", table_name="protocols")
    op.drop_index("ix_protocols_name", table_name="protocols")
    op.drop_table("protocols")
