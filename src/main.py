"""Pickup Wallet API entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.pw_common.database import engine
from src.pw_common.errors import AppError, InternalError, RequestValidationFailedError
from src.pw_common.redis_client import close_redis, ping_redis
from src.pw_common.response import bind_request_id, error_response
from src.pw_game.api.router import router as game_router
from src.pw_gateway.middleware.request_log import RequestLogMiddleware
from src.pw_settlement.api.router import router as settlement_router
from src.pw_topup.api.router import get_topup_service
from src.pw_topup.api.router import router as topup_router
from src.pw_wallet.api.router import router as wallet_router

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB + Redis connections. Shutdown: close gateway client, dispose."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    await ping_redis()
    yield
    await get_topup_service().aclose()
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


def _render(request: Request, exc: AppError) -> JSONResponse:
    resp = bind_request_id(error_response(exc.code, exc.message, exc.details), request)
    return JSONResponse(status_code=exc.http_status, content=resp.model_dump())


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _render(request, exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _render(request, RequestValidationFailedError(jsonable_encoder(exc.errors())))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _render(request, InternalError())


app.include_router(wallet_router, prefix=API_PREFIX)
app.include_router(topup_router, prefix=API_PREFIX)
app.include_router(settlement_router, prefix=API_PREFIX)
app.include_router(game_router, prefix=API_PREFIX)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
