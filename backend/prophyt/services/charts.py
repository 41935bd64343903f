from decimal import Decimal, localcontext

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from prophyt.models.bet import Bet
from prophyt.models.market import Market
from prophyt.services.serializers import amount_str, iso

MAX_CHART_POINTS = 500
# Wide enough for sums of u128 amounts without rounding.
AMOUNT_PRECISION = 100


def _percentages(yes_total: Decimal, no_total: Decimal) -> tuple[float, float]:
    total = yes_total + no_total
    if total <= 0:
        return 50.0, 50.0
    yes_pct = round(float(yes_total * 100 / total), 2)
    return yes_pct, round(100.0 - yes_pct, 2)


def build_probability_series(bets: list[Bet]) -> list[dict]:
    """Cumulative YES/NO stake after each bet, oldest first."""
    yes_total = Decimal(0)
    no_total = Decimal(0)
    series: list[dict] = []
    with localcontext() as ctx:
        ctx.prec = AMOUNT_PRECISION
        for bet in bets:
            amount = Decimal(bet.amount or 0)
            if bet.position:
                yes_total += amount
            else:
                no_total += amount
            yes_pct, no_pct = _percentages(yes_total, no_total)
            series.append(
                {
                    "timestamp": iso(bet.placed_at),
                    "yesAmount": amount_str(yes_total),
                    "noAmount": amount_str(no_total),
                    "totalVolume": amount_str(yes_total + no_total),
                    "yesPercentage": yes_pct,
                    "noPercentage": no_pct,
                }
            )
    return series[-MAX_CHART_POINTS:]


async def build_market_chart(db: AsyncSession, market_id: str) -> dict | None:
    market = await db.get(Market, market_id)
    if market is None:
        return None

    stmt = select(Bet).where(Bet.market_id == market_id).order_by(Bet.placed_at.asc(), Bet.id.asc())
    bets = (await db.execute(stmt)).scalars().all()
    series = build_probability_series(list(bets))
    with localcontext() as ctx:
        ctx.prec = AMOUNT_PRECISION
        yes_pct, no_pct = _percentages(
            Decimal(market.total_yes_amount or 0),
            Decimal(market.total_no_amount or 0),
        )
    return {
        "marketId": market.id,
        "question": market.question,
        "status": market.status,
        "current": {"yesPercentage": yes_pct, "noPercentage": no_pct},
        "series": series,
    }
