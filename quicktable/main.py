from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quicktable.api import (
    availability_router,
    dashboard_router,
    reservations_router,
    restaurants_router,
)
from quicktable.config import get_settings
from quicktable.database import close_db, get_session_context, init_db
from quicktable.services.seed_service import SeedService

# Import all models to register them with Base BEFORE init_db
from quicktable.models import Reservation, Restaurant  # noqa: F401

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
LOGGER = logging.getLogger("quicktable")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown events."""
    # create_all() is idempotent
    try:
        await init_db()
        LOGGER.info("Database initialized")
    except Exception as e:
        LOGGER.error("Database initialization failed: %s", e)
        raise

    # Demo restaurant for a fresh development install
    if settings.is_development and settings.seed_default_restaurant:
        try:
            async with get_session_context() as session:
                result = await SeedService(session).ensure_default_data()
                if result.get("restaurants_created", 0) > 0:
                    LOGGER.info("Seeded default data: %s", result)
                else:
                    LOGGER.info("Default data already present; skipping seeding")
        except Exception as e:
            LOGGER.warning("Default data seeding failed: %s", e)

    if not settings.webhook_url:
        LOGGER.info("WEBHOOK_URL not set; reservation forwarding disabled")

    yield

    await close_db()


app = FastAPI(
    title="QuickTable",
    description="Table reservations with slot availability, chat deep links and spreadsheet forwarding",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS (needed for browser preflight requests)
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.get("/healthz")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "service": "quicktable"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "QuickTable",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/healthz",
    }


app.include_router(restaurants_router)
app.include_router(availability_router)
app.include_router(reservations_router)
app.include_router(dashboard_router)
