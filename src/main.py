"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from src.pm_agent.api.router import router as agent_router
from src.pm_combo.api.router import router as combo_router
from src.pm_common.database import check_connection, engine
from src.pm_common.errors import AppError
from src.pm_common.response import error_response
from src.pm_gateway.middleware.request_log import RequestLogMiddleware
from src.pm_market.api.router import router as market_router
from src.pm_market.api.stats_router import router as stats_router
from src.pm_order.api.router import router as order_router
from src.pm_position.api.router import router as position_router
from src.pm_social.api.router import router as feed_router, users_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB connection (postgres backend only). Shutdown: dispose."""
    # Startup
    if settings.STATE_BACKEND == "postgres":
        await check_connection()
    logger.info("%s started with %s state backend", settings.APP_NAME, settings.STATE_BACKEND)
    yield
    # Shutdown
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(market_router, prefix="/api/v1")
app.include_router(position_router, prefix="/api/v1")
app.include_router(combo_router, prefix="/api/v1")
app.include_router(order_router, prefix="/api/v1")
app.include_router(stats_router, prefix="/api/v1")
app.include_router(agent_router, prefix="/api/v1")
app.include_router(feed_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0", "backend": settings.STATE_BACKEND}
