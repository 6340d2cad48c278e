"""Service for the customer and staff booking flows."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from quicktable.config import Settings, get_settings
from quicktable.engine.availability import (
    AvailabilityPolicy,
    BookableDate,
    RestaurantSchedule,
    Slot,
    SlotStatus,
    bookable_dates,
    compute_slots,
)
from quicktable.models.reservation import Reservation
from quicktable.models.restaurant import Restaurant
from quicktable.schemas.reservation import (
    ManualReservationCreate,
    ReservationCreate,
    ReservationStatus,
)
from quicktable.services.directory import ReservationStore, RestaurantDirectory
from quicktable.services.notifications import (
    compose_booking_message,
    compose_confirmation_message,
    compose_contact_message,
    digits_only,
    whatsapp_link,
)

logger = logging.getLogger(__name__)


class BookingError(Exception):
    """Base exception for booking flow errors."""

    pass


class RestaurantNotFoundError(BookingError):
    pass


class ReservationNotFoundError(BookingError):
    pass


class DateOutOfRangeError(BookingError):
    """Raised when a date is in the past, too far ahead, blocked or closed."""

    pass


class SlotUnavailableError(BookingError):
    """Raised when the requested time is not offered or cannot fit the party."""

    pass


@dataclass
class AvailabilityResult:
    restaurant: Restaurant
    target_date: date
    party_size: int
    is_closed: bool
    slots: List[Slot]


@dataclass
class BookingResult:
    reservation: Reservation
    restaurant: Restaurant
    whatsapp_url: Optional[str]


def policy_from_settings(settings: Settings) -> AvailabilityPolicy:
    return AvailabilityPolicy(
        limited_threshold=settings.limited_threshold,
        count_cancelled=settings.count_cancelled_reservations,
        honor_blocked_dates=settings.honor_blocked_dates,
    )


class BookingService:
    """
    Booking flows on top of the record stores and the availability engine.

    Slot checks at booking time are advisory: nothing locks capacity
    between computing slots and inserting the reservation.
    """

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or get_settings()
        self.policy = policy_from_settings(self.settings)
        self.restaurants = RestaurantDirectory(session)
        self.reservations = ReservationStore(
            session, enforce_transitions=self.settings.enforce_status_transitions
        )

    async def get_restaurant(self, slug: str) -> Restaurant:
        restaurant = await self.restaurants.find_by_slug(slug)
        if restaurant is None:
            raise RestaurantNotFoundError(f"Restaurant {slug!r} not found")
        return restaurant

    async def get_restaurant_by_id(self, restaurant_id: str) -> Restaurant:
        restaurant = await self.restaurants.get(restaurant_id)
        if restaurant is None:
            raise RestaurantNotFoundError(f"Restaurant {restaurant_id} not found")
        return restaurant

    async def available_slots(
        self,
        slug: str,
        target_date: date,
        party_size: int,
    ) -> AvailabilityResult:
        """Slots for the customer picker on one date."""
        restaurant = await self.get_restaurant(slug)
        return await self._slots_for(restaurant, target_date, party_size)

    async def bookable_dates(self, slug: str, today: date) -> List[BookableDate]:
        restaurant = await self.get_restaurant(slug)
        return bookable_dates(
            restaurant,
            today,
            days=self.settings.booking_window_days,
            honor_blocked_dates=self.policy.honor_blocked_dates,
        )

    async def book(
        self,
        slug: str,
        request: ReservationCreate,
        today: date,
    ) -> BookingResult:
        """
        Customer booking: validate against current availability, then
        persist as pending.

        Raises:
            RestaurantNotFoundError: Unknown slug
            DateOutOfRangeError: Date in the past, beyond maxDaysAdvance,
                blocked or closed
            SlotUnavailableError: Time not offered that day or too full
                for the party
        """
        restaurant = await self.get_restaurant(slug)
        schedule = RestaurantSchedule.from_record(restaurant)

        if request.date < today:
            raise DateOutOfRangeError("Cannot book a date in the past")
        if request.date > today + timedelta(days=schedule.max_days_advance):
            raise DateOutOfRangeError(
                f"Bookings open at most {schedule.max_days_advance} days in advance"
            )

        availability = await self._slots_for(restaurant, request.date, request.party_size)
        if availability.is_closed:
            raise DateOutOfRangeError(f"{restaurant.name} is closed on {request.date}")

        slot = next((s for s in availability.slots if s.time == request.time), None)
        if slot is None:
            raise SlotUnavailableError(f"{request.time} is not a bookable time")
        if slot.status == SlotStatus.FULL:
            logger.info(
                "Rejected party of %d at %s %s %s: %d covers left",
                request.party_size,
                restaurant.slug,
                request.date,
                request.time,
                slot.available_capacity,
            )
            raise SlotUnavailableError(
                f"Not enough capacity at {request.time} for a party of {request.party_size}"
            )

        reservation = await self.reservations.create(
            self._new_reservation(restaurant, request, ReservationStatus.PENDING)
        )

        message = compose_booking_message(
            restaurant.name,
            reservation.date,
            reservation.time,
            reservation.party_size,
            reservation.customer_name,
            reservation.special_requests,
        )
        return BookingResult(
            reservation=reservation,
            restaurant=restaurant,
            whatsapp_url=whatsapp_link(restaurant.whatsapp_number, message),
        )

    async def book_manual(
        self,
        restaurant_id: str,
        request: ManualReservationCreate,
    ) -> BookingResult:
        """
        Staff booking: persisted as confirmed without availability checks.

        The deep link addresses the guest and is only built when a phone
        number was given.
        """
        restaurant = await self.get_restaurant_by_id(restaurant_id)
        reservation = await self.reservations.create(
            self._new_reservation(restaurant, request, ReservationStatus.CONFIRMED)
        )

        url = None
        if reservation.customer_phone:
            message = compose_confirmation_message(
                restaurant.name,
                reservation.date,
                reservation.time,
                reservation.party_size,
                reservation.customer_name,
            )
            url = whatsapp_link(reservation.customer_phone, message)

        return BookingResult(reservation=reservation, restaurant=restaurant, whatsapp_url=url)

    async def change_status(
        self,
        reservation_id: str,
        status: ReservationStatus,
    ) -> BookingResult:
        reservation = await self.reservations.update_status(reservation_id, status)
        if reservation is None:
            raise ReservationNotFoundError(f"Reservation {reservation_id} not found")
        restaurant = await self.get_restaurant_by_id(reservation.restaurant_id)
        return BookingResult(reservation=reservation, restaurant=restaurant, whatsapp_url=None)

    async def contact_link(self, reservation_id: str) -> str:
        """
        Deep link for staff to message the guest about a reservation.

        Falls back to the restaurant's own number when the guest left
        no phone.
        """
        reservation = await self.reservations.get(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(f"Reservation {reservation_id} not found")
        restaurant = await self.get_restaurant_by_id(reservation.restaurant_id)

        phone = digits_only(reservation.customer_phone) or restaurant.whatsapp_number
        message = compose_contact_message(
            restaurant.name,
            reservation.customer_name,
            reservation.date,
            reservation.time,
        )
        return whatsapp_link(phone, message)

    async def _slots_for(
        self,
        restaurant: Restaurant,
        target_date: date,
        party_size: int,
    ) -> AvailabilityResult:
        schedule = RestaurantSchedule.from_record(restaurant)
        on_date = await self.reservations.list(restaurant.id, on_date=target_date)
        slots = compute_slots(schedule, on_date, target_date, party_size, self.policy)
        return AvailabilityResult(
            restaurant=restaurant,
            target_date=target_date,
            party_size=party_size,
            is_closed=schedule.is_closed_on(target_date, self.policy.honor_blocked_dates),
            slots=slots,
        )

    @staticmethod
    def _new_reservation(
        restaurant: Restaurant,
        request: ReservationCreate,
        status: ReservationStatus,
    ) -> Reservation:
        return Reservation(
            id=request.id,
            restaurant_id=restaurant.id,
            customer_name=request.customer_name.strip(),
            customer_phone=request.customer_phone,
            date=request.date,
            time=request.time,
            party_size=request.party_size,
            special_requests=request.special_requests,
            status=status.value,
        )
