"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.pm_common.database import engine
from src.pm_common.errors import AppError, InvalidInputError
from src.pm_common.redis_client import close_redis, get_redis
from src.pm_common.response import error_response
from src.pm_gateway.middleware.request_log import RequestLogMiddleware
from src.pm_lifecycle.api.router import router as lifecycle_router
from src.pm_market.api.router import router as market_router
from src.pm_position.api.router import router as position_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify the configured DB / Redis connections. Shutdown: dispose."""
    # Startup
    if settings.STORE_BACKEND == "postgres":
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    if settings.LOCK_BACKEND == "redis":
        await get_redis()
    logger.info(
        "Started %s: store=%s locks=%s",
        settings.APP_NAME,
        settings.STORE_BACKEND,
        settings.LOCK_BACKEND,
    )
    yield
    # Shutdown
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


def _render(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(status_code=exc.http_status, content=resp.model_dump())


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("%s %s failed: [%d] %s", request.method, request.url.path, exc.code, exc.message)
    return _render(request, exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(p) for p in first.get("loc", ()))
    return _render(request, InvalidInputError(f"{location}: {first.get('msg', 'invalid request')}"))


app.include_router(lifecycle_router, prefix="/api/v1")
app.include_router(market_router, prefix="/api/v1")
app.include_router(position_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0", "store": settings.STORE_BACKEND}
