import logging
from typing import Optional
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from redis.asyncio import Redis
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from starlette.exceptions import HTTPException as StarletteHTTPException

from prophyt.api.router import api_router
from prophyt.core.config import get_settings
from prophyt.core.errors import ApiError
from prophyt.core.logging import setup_logging
from prophyt.schemas.envelope import fail
from prophyt.tasks.price_updater import PriceUpdater

settings = get_settings()

if settings.sentry_dsn:
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.app_env,
        traces_sample_rate=settings.sentry_traces_sample_rate,
        integrations=[FastApiIntegration(), SqlalchemyIntegration()],
        send_default_pii=False,
    )
logger = logging.getLogger(__name__)

ENDPOINTS = {
    "markets": "/api/markets",
    "bets": "/api/bets",
    "protocols": "/api/protocols",
    "oracle": "/api/oracle/price/latest",
    "users": "/api/users/:address/bets",
    "charts": "/api/charts/market/:id",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(
        "Database URL configuration active",
        extra={"database_url_source": settings.resolved_database_url_source},
    )
    redis: Optional[Redis] = None
    app.state.redis = None
    app.state.price_updater = None
    try:
        redis = Redis.from_url(settings.redis_url, decode_responses=True)
        await redis.ping()
        app.state.redis = redis
        logger.info("Redis connected")
    except Exception:
        redis = None
        logger.exception("Redis connection failed")

    if settings.price_updater_enabled:
        if redis is None:
            logger.warning("Price updater running without cross-process lock")
        updater = PriceUpdater(redis=redis)
        updater.start()
        app.state.price_updater = updater

    yield

    if app.state.price_updater is not None:
        await app.state.price_updater.stop()
    if redis is not None:
        await redis.aclose()


app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=fail(exc.message))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"field": ".".join(str(part) for part in err.get("loc", ())), "message": err.get("msg")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder(fail("Invalid request parameters", details)),
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    error = "Endpoint not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content=fail(error), headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Server error", extra={"path": request.url.path, "method": request.method})
    details = str(exc) if settings.expose_error_details else None
    return JSONResponse(status_code=500, content=fail("Internal server error", details))


@app.get("/")
async def root() -> dict:
    return {
        "message": f"{settings.app_name} is functional",
        "version": settings.app_version,
        "endpoints": ENDPOINTS,
    }


app.include_router(api_router, prefix="/api")


def run() -> None:
    import uvicorn

    uvicorn.run("prophyt.main:app", host=settings.app_host, port=settings.app_port)


if __name__ == "__main__":
    run()
