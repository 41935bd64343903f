from prophyt.models.base import Base
from prophyt.models.bet import Bet
from prophyt.models.market import Market
from prophyt.models.market_resolved_event import MarketResolvedEvent
from prophyt.models.oracle_price import OraclePrice
from prophyt.models.protocol import Protocol
from prophyt.models.winnings_claimed import WinningsClaimed
from prophyt.models.yield_deposit import YieldDeposit

__all__ = [
    "Base",
    "Bet",
    "Market",
    "MarketResolvedEvent",
    "OraclePrice",
    "Protocol",
    "WinningsClaimed",
    "YieldDeposit",
]
