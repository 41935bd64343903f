"""Integration tests for per-address endpoints."""
from datetime import UTC, datetime, timedelta
from decimal import Decimal

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from prophyt.models import Bet, Market, Protocol, WinningsClaimed

BASE_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
ADDRESS = "0xA"


async def _seed_market_with_bets(db_session: AsyncSession) -> None:
    db_session.add(Protocol(id="P1", name="navi"))
    db_session.add(
        Market(
            id="M1",
            question="Will SUI close above $5?",
            status="active",
            protocol_id="P1",
            created_at=BASE_TIME,
            updated_at=BASE_TIME,
        )
    )
    db_session.add_all(
        [
            Bet(id="B1", market_id="M1", bettor=ADDRESS, position=True, amount=Decimal("250"), placed_at=BASE_TIME),
            Bet(
                id="B2",
                market_id="M1",
                bettor=ADDRESS,
                position=False,
                amount=Decimal("750"),
                placed_at=BASE_TIME + timedelta(hours=1),
            ),
            Bet(
                id="B3",
                market_id="M1",
                bettor="0xB",
                position=True,
                amount=Decimal("5"),
                placed_at=BASE_TIME + timedelta(hours=2),
            ),
        ]
    )
    await db_session.flush()


async def test_user_bets_newest_first(async_client: AsyncClient, db_session: AsyncSession):
    await _seed_market_with_bets(db_session)
    await db_session.commit()

    resp = await async_client.get(f"/api/users/{ADDRESS}/bets")
    assert resp.status_code == 200
    body = resp.json()
    assert [bet["id"] for bet in body["data"]] == ["B2", "B1"]
    assert body["meta"] == {"total": 2, "limit": 50, "offset": 0}

    first = body["data"][0]
    assert first["position"] == "no"
    assert first["amount"] == "750"
    assert first["market"]["id"] == "M1"
    assert first["market"]["protocol"]["name"] == "navi"
    assert first["winningsClaimed"] is None


async def test_user_bets_pagination(async_client: AsyncClient, db_session: AsyncSession):
    await _seed_market_with_bets(db_session)
    await db_session.commit()

    resp = await async_client.get(f"/api/users/{ADDRESS}/bets?limit=1&offset=1")
    body = resp.json()
    assert [bet["id"] for bet in body["data"]] == ["B1"]
    assert body["meta"] == {"total": 2, "limit": 1, "offset": 1}


async def test_user_without_bets_gets_empty_page(async_client: AsyncClient, db_session: AsyncSession):
    resp = await async_client.get("/api/users/0xNOBODY/bets")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["data"] == []
    assert body["meta"]["total"] == 0


async def test_claimed_winnings_are_strings(async_client: AsyncClient, db_session: AsyncSession):
    await _seed_market_with_bets(db_session)
    db_session.add_all(
        [
            WinningsClaimed(
                id="W1",
                bet_id="B1",
                market_id="M1",
                winner=ADDRESS,
                winning_amount=Decimal("987654321"),
                yield_share=None,
                claimed_at=BASE_TIME + timedelta(days=2),
            ),
        ]
    )
    await db_session.commit()

    resp = await async_client.get(f"/api/users/{ADDRESS}/bets")
    bets = {bet["id"]: bet for bet in resp.json()["data"]}
    claim = bets["B1"]["winningsClaimed"]
    assert claim["winningAmount"] == "987654321"
    assert claim["yieldShare"] == "0"
    assert bets["B2"]["winningsClaimed"] is None


async def test_user_stats(async_client: AsyncClient, db_session: AsyncSession):
    await _seed_market_with_bets(db_session)
    db_session.add(
        WinningsClaimed(
            id="W1",
            bet_id="B1",
            market_id="M1",
            winner=ADDRESS,
            winning_amount=Decimal("400"),
            yield_share=Decimal("25"),
        )
    )
    await db_session.commit()

    resp = await async_client.get(f"/api/users/{ADDRESS}/stats")
    assert resp.status_code == 200
    assert resp.json()["data"] == {
        "address": ADDRESS,
        "totalBets": 2,
        "totalStaked": "1000",
        "activeMarkets": 1,
        "claims": 1,
        "totalWinnings": "400",
        "totalYieldShare": "25",
    }


async def test_user_stats_for_unknown_address(async_client: AsyncClient, db_session: AsyncSession):
    resp = await async_client.get("/api/users/0xNOBODY/stats")
    data = resp.json()["data"]
    assert data["totalBets"] == 0
    assert data["totalStaked"] == "0"
    assert data["claims"] == 0
    assert data["totalWinnings"] == "0"
