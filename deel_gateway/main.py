"""FastAPI application entry point.

Start with:
    uvicorn deel_gateway.main:app --reload

Routes:
- POST /deel/webhook   — signed Deel webhook deliveries
- GET  /deel/contracts — contract listing proxied to the Deel API
- GET  /health
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI

from deel_gateway.config import get_settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
#  Lifespan: startup / shutdown
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: configure logging and check configuration."""
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Deel gateway starting up")

    if not settings.deel_webhook_signing_key:
        logger.error(
            "DEEL_WEBHOOK_SIGNING_KEY is not set — every webhook delivery will be rejected"
        )
    if not settings.deel_access_token:
        logger.warning("DEEL_ACCESS_TOKEN is not set — Deel API calls will fail")

    yield

    logger.info("Deel gateway shutting down")


# ---------------------------------------------------------------------------
#  FastAPI application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Deel Gateway",
    description="HTTP façade over the Deel API with verified webhook intake",
    version="0.1.0",
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
#  Router Registration
# ---------------------------------------------------------------------------

from deel_gateway.api.webhooks import router as webhook_router  # noqa: E402
from deel_gateway.api.contracts import router as contracts_router  # noqa: E402
from deel_gateway.api.health import router as health_router  # noqa: E402

app.include_router(webhook_router, prefix="/deel")
app.include_router(contracts_router, prefix="/deel")
app.include_router(health_router)
