# quidax_ticker/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
import uvicorn
from fastapi import FastAPI

from quidax_ticker.api.health import router as health_router
from quidax_ticker.api.tickers import router as tickers_router
from quidax_ticker.config.logging_config import configure_logging
from quidax_ticker.config.settings import Settings, get_settings
from quidax_ticker.services.quidax import QuidaxClient


logger = logging.getLogger("quidax_ticker.app")


def create_app(
    settings: Settings | None = None,
    quidax_client: QuidaxClient | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owns_client = app.state.quidax_client is None
        if owns_client:
            http = httpx.AsyncClient(
                timeout=settings.UPSTREAM_TIMEOUT_SECONDS,
                follow_redirects=True,
            )
            app.state.quidax_client = QuidaxClient(http, settings.QUIDAX_BASE_URL)

        logger.info(
            "ticker api started | upstream=%s | prefix=%s",
            app.state.quidax_client.base_url,
            settings.API_PREFIX or "/",
        )
        try:
            yield
        finally:
            if owns_client:
                await app.state.quidax_client.http.aclose()
                app.state.quidax_client = None
            logger.info("ticker api stopped")

    app = FastAPI(title="Quidax Ticker API", lifespan=lifespan)
    app.state.settings = settings
    # a client passed in belongs to the caller; otherwise lifespan builds one
    app.state.quidax_client = quidax_client

    # Routers
    app.include_router(health_router)
    app.include_router(tickers_router, prefix=settings.API_PREFIX)

    return app


app = create_app()


if __name__ == "__main__":
    s = get_settings()
    uvicorn.run(app, host=s.HOST, port=s.PORT, log_level=s.LOG_LEVEL.lower())
