"""Service for aggregating admin dashboard data."""
from __future__ import annotations

from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from quicktable.models.reservation import Reservation
from quicktable.schemas.availability import DashboardSummary
from quicktable.schemas.reservation import ReservationRead, ReservationStatus
from quicktable.services.directory import ReservationStore


class DashboardService:
    """
    Service for the restaurant admin dashboard.

    Counts are derived from the same reservation records the
    availability engine reads; every status is included unless noted.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.reservations = ReservationStore(session)

    async def pending_count(self, restaurant_id: str) -> int:
        """Pending reservations across all dates."""
        result = await self.session.execute(
            select(func.count(Reservation.id)).where(
                Reservation.restaurant_id == restaurant_id,
                Reservation.status == ReservationStatus.PENDING.value,
            )
        )
        return int(result.scalar_one())

    async def summary(self, restaurant_id: str, today: date) -> DashboardSummary:
        """
        Get today's counters for a restaurant.

        Args:
            restaurant_id: The restaurant ID
            today: The restaurant-local date to summarize

        Returns:
            DashboardSummary with guest/booking counts and today's list
        """
        todays = await self.reservations.list(restaurant_id, on_date=today)

        return DashboardSummary(
            restaurant_id=restaurant_id,
            date=today,
            todays_guests=sum(r.party_size for r in todays),
            todays_bookings=len(todays),
            pending_count=await self.pending_count(restaurant_id),
            confirmed_today=sum(
                1 for r in todays if r.status == ReservationStatus.CONFIRMED.value
            ),
            reservations=[ReservationRead.model_validate(r) for r in todays],
        )
