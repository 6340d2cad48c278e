from __future__ import annotations

from datetime import date as calendar_date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quicktable.database import Base

if TYPE_CHECKING:
    from quicktable.models.restaurant import Restaurant


class Reservation(Base):
    """A booked table for a party on a date and time."""

    __tablename__ = "reservations"
    __table_args__ = (
        Index("ix_reservations_restaurant_date", "restaurant_id", "date"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    restaurant_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("restaurants.id"), nullable=False
    )

    customer_name: Mapped[str] = mapped_column(String(100), nullable=False)
    customer_phone: Mapped[str] = mapped_column(String(32), default="")

    # Restaurant-local wall clock, no timezone
    date: Mapped[calendar_date] = mapped_column(Date, nullable=False)
    time: Mapped[str] = mapped_column(String(5), nullable=False)  # HH:MM

    party_size: Mapped[int] = mapped_column(Integer, nullable=False)
    special_requests: Mapped[str] = mapped_column(Text, default="")
    status: Mapped[str] = mapped_column(String(20), default="pending")  # pending, confirmed, cancelled, completed

    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)

    # Relationships
    restaurant: Mapped["Restaurant"] = relationship(
        "Restaurant", back_populates="reservations"
    )

    def __repr__(self) -> str:
        return f"<Reservation(id={self.id}, date={self.date}, time={self.time}, size={self.party_size})>"
