"""
REST API endpoints for the restaurant directory.
"""
from __future__ import annotations

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from quicktable.api.dependencies import get_booking_service, get_today, http_error
from quicktable.database import get_session
from quicktable.engine.availability import InvalidConfigurationError
from quicktable.schemas.availability import BookableDateRead
from quicktable.schemas.restaurant import RestaurantRead, RestaurantRecord
from quicktable.services.booking_service import BookingService, RestaurantNotFoundError
from quicktable.services.directory import RestaurantDirectory, SlugConflictError

router = APIRouter(prefix="/api/v1", tags=["restaurants"])


@router.get("/restaurants", response_model=List[RestaurantRead])
async def list_restaurants(
    session: AsyncSession = Depends(get_session),
) -> List[RestaurantRead]:
    """Get all restaurants."""
    restaurants = await RestaurantDirectory(session).list()
    return [RestaurantRead.model_validate(r) for r in restaurants]


@router.get("/restaurants/{slug}", response_model=RestaurantRead)
async def get_restaurant(
    slug: str,
    session: AsyncSession = Depends(get_session),
) -> RestaurantRead:
    """Get a restaurant by its public slug."""
    restaurant = await RestaurantDirectory(session).find_by_slug(slug)

    if restaurant is None:
        raise HTTPException(status_code=404, detail="Restaurant not found")

    return RestaurantRead.model_validate(restaurant)


@router.put("/restaurants/{restaurant_id}", response_model=RestaurantRead)
async def save_restaurant(
    restaurant_id: str,
    data: RestaurantRecord,
    session: AsyncSession = Depends(get_session),
) -> RestaurantRead:
    """
    Replace (or create) the full restaurant record.

    The id in the path wins over any id in the body.
    """
    record = data.model_copy(update={"id": restaurant_id})
    try:
        restaurant = await RestaurantDirectory(session).save(record)
    except SlugConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return RestaurantRead.model_validate(restaurant)


@router.get("/restaurants/{slug}/dates", response_model=List[BookableDateRead])
async def list_bookable_dates(
    slug: str,
    today: date = Depends(get_today),
    service: BookingService = Depends(get_booking_service),
) -> List[BookableDateRead]:
    """
    Dates shown in the customer date picker, starting today.

    Closed weekdays and blocked dates are flagged rather than removed.
    """
    try:
        dates = await service.bookable_dates(slug, today)
    except (RestaurantNotFoundError, InvalidConfigurationError) as e:
        raise http_error(e)

    return [BookableDateRead.model_validate(d) for d in dates]
