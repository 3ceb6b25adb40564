"""marine-flooring - Crew record keeper backed by a Google Sheet."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from src.core.local_config import LocalConfigStore, resolve_script_url
from src.core.logging import configure_logfire, instrument_fastapi, instrument_httpx
from src.core.scheduler import ResyncScheduler
from src.core.sheet_client import SheetClient
from src.core.state import AppContext
from src.interface.router import router as terminal_router
from src.services import sync_service


logger = logging.getLogger(__name__)


def build_context(*, local_config: LocalConfigStore | None = None) -> AppContext:
    """Wire the sheet client, scheduler and durable config into a fresh context."""
    local_config = local_config or LocalConfigStore()
    script_url = resolve_script_url(local_config)
    logger.info("sheet_endpoint_resolved", extra={"url": script_url})
    return AppContext.initialize(
        store=SheetClient(script_url),
        scheduler=ResyncScheduler(),
        local_config=local_config,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Startup
    # Configure logging first so startup logs are captured
    configure_logfire()
    instrument_httpx()

    ctx = build_context()
    app.state.ctx = ctx
    ctx.scheduler.start()

    # Initial load; a failure leaves empty collections and a toast
    await sync_service.resync(ctx)
    yield
    # Shutdown
    ctx.scheduler.stop()


app = FastAPI(
    title="marine-flooring",
    description="Weekly flooring reports and pre-task safety plans for shipboard crews",
    version="0.1.0",
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

# Register routers
app.include_router(terminal_router)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "healthy"}, status_code=200)


@app.get("/health/sheet")
async def sheet_health_check() -> JSONResponse:
    """Check that the spreadsheet backend answers a ping."""
    ctx: AppContext = app.state.ctx
    try:
        ok = await ctx.store.ping()
    except Exception as e:
        logger.warning("sheet_ping_failed", extra={"error": str(e)})
        ok = False
    return JSONResponse(
        content={"status": "healthy" if ok else "unreachable"},
        status_code=200 if ok else 503,
    )
