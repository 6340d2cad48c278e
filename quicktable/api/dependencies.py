"""Shared FastAPI dependencies and error mapping."""
from __future__ import annotations

import logging
from datetime import date

from fastapi import Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from quicktable.database import get_session
from quicktable.engine.availability import InvalidConfigurationError
from quicktable.services.booking_service import (
    BookingError,
    BookingService,
    DateOutOfRangeError,
    ReservationNotFoundError,
    RestaurantNotFoundError,
    SlotUnavailableError,
)
from quicktable.services.directory import StoreError
from quicktable.services.notifications import WebhookForwarder

logger = logging.getLogger(__name__)


def get_today() -> date:
    """Restaurant-local "today"; no timezone modelling."""
    return date.today()


def get_forwarder() -> WebhookForwarder:
    return WebhookForwarder()


async def get_booking_service(
    session: AsyncSession = Depends(get_session),
) -> BookingService:
    return BookingService(session)


def http_error(exc: Exception) -> HTTPException:
    """Translate service-layer exceptions into HTTP errors."""
    if isinstance(exc, (RestaurantNotFoundError, ReservationNotFoundError)):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, (SlotUnavailableError, StoreError)):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, (DateOutOfRangeError, InvalidConfigurationError, BookingError)):
        return HTTPException(status_code=422, detail=str(exc))
    logger.error("Unmapped service error: %s", exc, exc_info=exc)
    return HTTPException(status_code=500, detail="Internal error")
