"""
REST API endpoints for reservations.

New and updated reservations are forwarded to the spreadsheet webhook
as a background task after the response is sent; delivery failures
never affect the stored record.
"""
from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from quicktable.api.dependencies import (
    get_booking_service,
    get_forwarder,
    get_today,
    http_error,
)
from quicktable.database import get_session
from quicktable.engine.availability import InvalidConfigurationError
from quicktable.schemas.reservation import (
    BookingResponse,
    ContactLinkResponse,
    ManualReservationCreate,
    ReservationCreate,
    ReservationRead,
    ReservationStatus,
    ReservationStatusUpdate,
)
from quicktable.services.booking_service import BookingError, BookingResult, BookingService
from quicktable.services.directory import ReservationStore, RestaurantDirectory, StoreError
from quicktable.services.notifications import WebhookForwarder

router = APIRouter(prefix="/api/v1", tags=["reservations"])


def _respond(
    result: BookingResult,
    background_tasks: BackgroundTasks,
    forwarder: WebhookForwarder,
) -> BookingResponse:
    reservation = ReservationRead.model_validate(result.reservation)
    background_tasks.add_task(forwarder.forward, reservation, result.restaurant.name)
    return BookingResponse(reservation=reservation, whatsapp_url=result.whatsapp_url)


@router.post(
    "/restaurants/{slug}/reservations",
    response_model=BookingResponse,
    status_code=201,
)
async def create_reservation(
    slug: str,
    data: ReservationCreate,
    background_tasks: BackgroundTasks,
    today: date = Depends(get_today),
    service: BookingService = Depends(get_booking_service),
    forwarder: WebhookForwarder = Depends(get_forwarder),
) -> BookingResponse:
    """
    Customer booking.

    Stored as pending; the response carries the WhatsApp link the
    customer opens to message the restaurant.
    """
    try:
        result = await service.book(slug, data, today)
    except (BookingError, StoreError, InvalidConfigurationError) as e:
        raise http_error(e)

    return _respond(result, background_tasks, forwarder)


@router.post(
    "/restaurants/{restaurant_id}/reservations/manual",
    response_model=BookingResponse,
    status_code=201,
)
async def create_manual_reservation(
    restaurant_id: str,
    data: ManualReservationCreate,
    background_tasks: BackgroundTasks,
    service: BookingService = Depends(get_booking_service),
    forwarder: WebhookForwarder = Depends(get_forwarder),
) -> BookingResponse:
    """Staff booking, stored as confirmed."""
    try:
        result = await service.book_manual(restaurant_id, data)
    except (BookingError, StoreError) as e:
        raise http_error(e)

    return _respond(result, background_tasks, forwarder)


@router.get(
    "/restaurants/{restaurant_id}/reservations",
    response_model=List[ReservationRead],
)
async def list_reservations(
    restaurant_id: str,
    on_date: Optional[date] = Query(None, alias="date", description="Filter by date"),
    status: Optional[ReservationStatus] = Query(None, description="Filter by status"),
    search: Optional[str] = Query(None, description="Match customer name or phone"),
    session: AsyncSession = Depends(get_session),
) -> List[ReservationRead]:
    """Get reservations for a restaurant, ordered by date and time."""
    if await RestaurantDirectory(session).get(restaurant_id) is None:
        raise HTTPException(status_code=404, detail="Restaurant not found")

    reservations = await ReservationStore(session).list(
        restaurant_id, on_date=on_date, status=status, search=search
    )
    return [ReservationRead.model_validate(r) for r in reservations]


@router.get("/reservations/{reservation_id}", response_model=ReservationRead)
async def get_reservation(
    reservation_id: str,
    session: AsyncSession = Depends(get_session),
) -> ReservationRead:
    """Get a reservation by ID."""
    reservation = await ReservationStore(session).get(reservation_id)

    if reservation is None:
        raise HTTPException(status_code=404, detail="Reservation not found")

    return ReservationRead.model_validate(reservation)


@router.patch("/reservations/{reservation_id}/status", response_model=ReservationRead)
async def update_reservation_status(
    reservation_id: str,
    data: ReservationStatusUpdate,
    background_tasks: BackgroundTasks,
    service: BookingService = Depends(get_booking_service),
    forwarder: WebhookForwarder = Depends(get_forwarder),
) -> ReservationRead:
    """Confirm, cancel or complete a reservation."""
    try:
        result = await service.change_status(reservation_id, data.status)
    except (BookingError, StoreError) as e:
        raise http_error(e)

    return _respond(result, background_tasks, forwarder).reservation


@router.get("/reservations/{reservation_id}/contact", response_model=ContactLinkResponse)
async def get_contact_link(
    reservation_id: str,
    service: BookingService = Depends(get_booking_service),
) -> ContactLinkResponse:
    """WhatsApp link for staff to message the guest about this reservation."""
    try:
        url = await service.contact_link(reservation_id)
    except BookingError as e:
        raise http_error(e)

    return ContactLinkResponse(reservation_id=reservation_id, whatsapp_url=url)
