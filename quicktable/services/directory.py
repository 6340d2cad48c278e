"""Record stores for restaurants and reservations."""
from __future__ import annotations

import logging
import secrets
import string
from datetime import date, datetime
from typing import Dict, FrozenSet, Optional, Sequence

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from quicktable.models.reservation import Reservation
from quicktable.models.restaurant import Restaurant
from quicktable.schemas.reservation import ReservationStatus
from quicktable.schemas.restaurant import RestaurantRecord

logger = logging.getLogger(__name__)

RESERVATION_ID_ALPHABET = string.ascii_lowercase + string.digits
RESERVATION_ID_LENGTH = 9

# Only consulted when transition enforcement is switched on
ALLOWED_TRANSITIONS: Dict[ReservationStatus, FrozenSet[ReservationStatus]] = {
    ReservationStatus.PENDING: frozenset(
        {ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED}
    ),
    ReservationStatus.CONFIRMED: frozenset(
        {ReservationStatus.COMPLETED, ReservationStatus.CANCELLED}
    ),
    ReservationStatus.CANCELLED: frozenset(),
    ReservationStatus.COMPLETED: frozenset(),
}


class StoreError(Exception):
    """Base exception for record store errors."""

    pass


class SlugConflictError(StoreError):
    """Raised when a slug is already used by another restaurant."""

    pass


class DuplicateReservationError(StoreError):
    """Raised when a reservation id is already taken."""

    pass


class InvalidStatusTransitionError(StoreError):
    """Raised when a status change is not allowed."""

    pass


def generate_reservation_id() -> str:
    """Short random id, the same shape the booking front end produces."""
    return "".join(
        secrets.choice(RESERVATION_ID_ALPHABET) for _ in range(RESERVATION_ID_LENGTH)
    )


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so the text matches literally (escape char is backslash)."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def check_transition(current: str, new: ReservationStatus) -> None:
    """Raise InvalidStatusTransitionError unless current -> new is allowed."""
    current_status = ReservationStatus(current)
    if new == current_status:
        return
    if new not in ALLOWED_TRANSITIONS[current_status]:
        raise InvalidStatusTransitionError(
            f"Cannot change reservation status from {current_status.value} to {new.value}"
        )


class RestaurantDirectory:
    """Lookup and full-record replace of restaurants."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, restaurant_id: str) -> Optional[Restaurant]:
        return await self.session.get(Restaurant, restaurant_id)

    async def find_by_slug(self, slug: str) -> Optional[Restaurant]:
        result = await self.session.execute(
            select(Restaurant).where(Restaurant.slug == slug)
        )
        return result.scalar_one_or_none()

    async def list(self) -> Sequence[Restaurant]:
        result = await self.session.execute(select(Restaurant).order_by(Restaurant.name))
        return result.scalars().all()

    async def save(self, record: RestaurantRecord) -> Restaurant:
        """
        Insert or fully replace a restaurant, keyed by id.

        Raises:
            SlugConflictError: If another restaurant already owns the slug
        """
        existing_slug = await self.find_by_slug(record.slug)
        if existing_slug is not None and existing_slug.id != record.id:
            raise SlugConflictError(f"Slug {record.slug!r} is already in use")

        values = record.to_orm_values()
        restaurant = await self.get(record.id) if record.id else None

        if restaurant is None:
            restaurant = Restaurant(**values)
            if record.id:
                restaurant.id = record.id
            self.session.add(restaurant)
            logger.info("Created restaurant %s (%s)", record.slug, record.id or "new id")
        else:
            for field, value in values.items():
                setattr(restaurant, field, value)
            logger.info("Replaced restaurant %s", restaurant.id)

        await self.session.commit()
        await self.session.refresh(restaurant)
        return restaurant


class ReservationStore:
    """Append-only reservation records with status updates."""

    def __init__(self, session: AsyncSession, enforce_transitions: bool = False):
        self.session = session
        self.enforce_transitions = enforce_transitions

    async def get(self, reservation_id: str) -> Optional[Reservation]:
        return await self.session.get(Reservation, reservation_id)

    async def list(
        self,
        restaurant_id: str,
        on_date: Optional[date] = None,
        status: Optional[ReservationStatus] = None,
        search: Optional[str] = None,
    ) -> Sequence[Reservation]:
        """
        Reservations for a restaurant, ordered by date and time.

        Optionally filtered by date, status, and a case-insensitive
        search over customer name and phone.
        """
        stmt = select(Reservation).where(Reservation.restaurant_id == restaurant_id)

        if on_date is not None:
            stmt = stmt.where(Reservation.date == on_date)
        if status is not None:
            stmt = stmt.where(Reservation.status == ReservationStatus(status).value)
        if search:
            literal = escape_like(search)
            stmt = stmt.where(
                or_(
                    Reservation.customer_name.ilike(f"%{literal.lower()}%", escape="\\"),
                    Reservation.customer_phone.like(f"%{literal}%", escape="\\"),
                )
            )

        stmt = stmt.order_by(Reservation.date, Reservation.time, Reservation.created_at)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def create(self, reservation: Reservation) -> Reservation:
        """
        Persist a new reservation.

        Uses the caller's id when set, otherwise generates one.

        Raises:
            DuplicateReservationError: If the id already exists
        """
        if not reservation.id:
            reservation.id = generate_reservation_id()
        elif await self.get(reservation.id) is not None:
            raise DuplicateReservationError(f"Reservation {reservation.id} already exists")

        now = datetime.utcnow()
        reservation.created_at = now
        reservation.updated_at = now
        if not reservation.status:
            reservation.status = ReservationStatus.PENDING.value

        self.session.add(reservation)
        await self.session.commit()
        await self.session.refresh(reservation)

        logger.info(
            "Created reservation %s for restaurant %s on %s at %s (party of %d, %s)",
            reservation.id,
            reservation.restaurant_id,
            reservation.date,
            reservation.time,
            reservation.party_size,
            reservation.status,
        )
        return reservation

    async def update_status(
        self,
        reservation_id: str,
        status: ReservationStatus,
    ) -> Optional[Reservation]:
        """
        Change a reservation's status and stamp updated_at.

        Returns None when the reservation does not exist.

        Raises:
            InvalidStatusTransitionError: If enforcement is on and the
                move is not in ALLOWED_TRANSITIONS
        """
        reservation = await self.get(reservation_id)
        if reservation is None:
            return None

        status = ReservationStatus(status)
        if self.enforce_transitions:
            check_transition(reservation.status, status)

        previous = reservation.status
        reservation.status = status.value
        reservation.updated_at = datetime.utcnow()

        await self.session.commit()
        await self.session.refresh(reservation)

        logger.info(
            "Reservation %s status %s -> %s", reservation_id, previous, status.value
        )
        return reservation
