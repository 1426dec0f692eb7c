# stockmgmt/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from stockmgmt import __version__
from stockmgmt.api.routers.health import router as health_router
from stockmgmt.api.routers.physical_inventories import router as physical_inventories_router
from stockmgmt.api.routers.valid_reasons import router as valid_reasons_router
from stockmgmt.core.config import get_settings
from stockmgmt.core.logging import setup_logging
from stockmgmt.http_problem_handlers import register_exception_handlers
from stockmgmt.metrics import router as metrics_router
from stockmgmt.services.referencedata.base import build_referencedata_client

logger = logging.getLogger("stockmgmt")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.REFERENCEDATA_LOG_LEVEL)
    # referencedata 客户端进程内共享；关闭时释放连接池
    app.state.referencedata_client = build_referencedata_client(settings)
    logger.info("referencedata client ready: %s", settings.REFERENCEDATA_URL)
    try:
        yield
    finally:
        await app.state.referencedata_client.aclose()


app = FastAPI(
    title="Stock Management",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

register_exception_handlers(app)

app.include_router(health_router)
app.include_router(metrics_router)
app.include_router(physical_inventories_router)
app.include_router(valid_reasons_router)
