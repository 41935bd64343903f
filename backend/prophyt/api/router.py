from fastapi import APIRouter

from prophyt.api.routes import bets, charts, health, markets, oracle, protocols, users

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(markets.router, prefix="/markets", tags=["markets"])
api_router.include_router(bets.router, prefix="/bets", tags=["bets"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(protocols.router, prefix="/protocols", tags=["protocols"])
api_router.include_router(oracle.router, prefix="/oracle", tags=["oracle"])
api_router.include_router(charts.router, prefix="/charts", tags=["charts"])
