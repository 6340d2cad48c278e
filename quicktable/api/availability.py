"""
REST API endpoint for slot availability.
"""
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from quicktable.api.dependencies import get_booking_service, http_error
from quicktable.engine.availability import InvalidConfigurationError, weekday_name
from quicktable.schemas.availability import AvailabilityResponse, SlotRead
from quicktable.services.booking_service import BookingService, RestaurantNotFoundError

router = APIRouter(prefix="/api/v1", tags=["availability"])


@router.get("/restaurants/{slug}/availability", response_model=AvailabilityResponse)
async def get_availability(
    slug: str,
    target_date: date = Query(..., alias="date", description="Date to check (YYYY-MM-DD)"),
    party_size: int = Query(2, ge=1, alias="partySize"),
    service: BookingService = Depends(get_booking_service),
) -> AvailabilityResponse:
    """
    Get bookable slots for a restaurant on a date.

    Read-only: the result is advisory and nothing is held.
    """
    try:
        result = await service.available_slots(slug, target_date, party_size)
    except (RestaurantNotFoundError, InvalidConfigurationError) as e:
        raise http_error(e)

    return AvailabilityResponse(
        restaurant_id=result.restaurant.id,
        slug=result.restaurant.slug,
        date=target_date,
        weekday=weekday_name(target_date),
        party_size=party_size,
        is_closed=result.is_closed,
        slots=[SlotRead.model_validate(s) for s in result.slots],
    )
