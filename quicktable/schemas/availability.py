from __future__ import annotations

from datetime import date as calendar_date
from typing import List

from pydantic import ConfigDict

from quicktable.schemas.base import CamelModel
from quicktable.schemas.reservation import ReservationRead
from quicktable.engine.availability import SlotStatus


class SlotRead(CamelModel):
    """One offerable start time."""

    model_config = ConfigDict(from_attributes=True)

    time: str
    available_capacity: int
    total_capacity: int
    status: SlotStatus


class AvailabilityResponse(CamelModel):
    restaurant_id: str
    slug: str
    date: calendar_date
    weekday: str
    party_size: int
    is_closed: bool
    slots: List[SlotRead]


class BookableDateRead(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    date: calendar_date
    weekday: str
    is_closed: bool


class DashboardSummary(CamelModel):
    """Admin dashboard counters for one day."""

    restaurant_id: str
    date: calendar_date
    todays_guests: int
    todays_bookings: int
    pending_count: int
    confirmed_today: int
    reservations: List[ReservationRead]
