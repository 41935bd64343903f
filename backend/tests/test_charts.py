from datetime import UTC, datetime, timedelta
from decimal import Decimal

from prophyt.models import Bet
from prophyt.services.charts import MAX_CHART_POINTS, build_probability_series

BASE_TIME = datetime(2026, 3, 1, tzinfo=UTC)


def _bet(i: int, position: bool, amount: int) -> Bet:
    return Bet(
        id=f"B{i}",
        market_id="M1",
        bettor="0xA",
        position=position,
        amount=Decimal(amount),
        placed_at=BASE_TIME + timedelta(minutes=i),
    )


def test_series_is_cumulative() -> None:
    series = build_probability_series([_bet(0, False, 100), _bet(1, True, 300)])
    assert series[0]["yesPercentage"] == 0.0
    assert series[0]["noPercentage"] == 100.0
    assert series[1]["yesAmount"] == "300"
    assert series[1]["noAmount"] == "100"
    assert series[1]["yesPercentage"] == 75.0
    assert series[1]["timestamp"] == "2026-03-01T00:01:00Z"


def test_series_handles_zero_stake() -> None:
    series = build_probability_series([_bet(0, True, 0)])
    assert series[0]["yesPercentage"] == 50.0
    assert series[0]["noPercentage"] == 50.0


def test_series_keeps_latest_points() -> None:
    bets = [_bet(i, True, 1) for i in range(MAX_CHART_POINTS + 10)]
    series = build_probability_series(bets)
    assert len(series) == MAX_CHART_POINTS
    assert series[-1]["totalVolume"] == str(MAX_CHART_POINTS + 10)


def test_series_sums_u128_amounts_exactly() -> None:
    u128_max = 340282366920938463463374607431768211455
    series = build_probability_series([_bet(0, True, u128_max), _bet(1, True, 1), _bet(2, False, u128_max)])
    assert series[1]["yesAmount"] == "340282366920938463463374607431768211456"
    assert series[2]["totalVolume"] == "680564733841876926926749214863536422911"
    assert series[2]["yesPercentage"] == 50.0
