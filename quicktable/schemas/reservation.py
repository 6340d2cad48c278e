from __future__ import annotations

from datetime import date as calendar_date, datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import ConfigDict, Field, field_serializer

from quicktable.schemas.base import CamelModel
from quicktable.schemas.restaurant import CLOCK_PATTERN


class ReservationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class ReservationBase(CamelModel):
    """Base schema for a reservation request."""

    customer_name: str = Field(..., min_length=1, max_length=100)
    customer_phone: str = Field(default="", max_length=32)
    date: calendar_date
    time: str = Field(..., pattern=CLOCK_PATTERN)
    party_size: int = Field(..., ge=1)
    special_requests: str = Field(default="", max_length=1000)


class ReservationCreate(ReservationBase):
    """Customer booking request. An id may be supplied by the client."""

    id: Optional[str] = Field(None, min_length=1, max_length=64)


class ManualReservationCreate(ReservationCreate):
    """Booking entered by restaurant staff."""

    pass


class ReservationStatusUpdate(CamelModel):
    status: ReservationStatus


class ReservationRead(ReservationBase):
    """
    Schema for reading a reservation.

    createdAt/updatedAt go out as epoch milliseconds, the format stored
    records already use.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    restaurant_id: str
    status: ReservationStatus
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def serialize_epoch_millis(self, value: datetime) -> int:
        return epoch_millis(value)


class BookingResponse(CamelModel):
    """A persisted reservation plus the chat deep link to open."""

    reservation: ReservationRead
    whatsapp_url: Optional[str] = None


def epoch_millis(value: datetime) -> int:
    """Milliseconds since the epoch; naive datetimes are treated as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


class ContactLinkResponse(CamelModel):
    """Chat deep link staff open to follow up on a reservation."""

    reservation_id: str
    whatsapp_url: str
