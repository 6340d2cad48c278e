from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List
import uuid

from sqlalchemy import JSON, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quicktable.database import Base

if TYPE_CHECKING:
    from quicktable.models.reservation import Reservation


class Restaurant(Base):
    """A restaurant and its booking configuration."""

    __tablename__ = "restaurants"

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    cuisine_type: Mapped[str] = mapped_column(String(100), default="")
    whatsapp_number: Mapped[str] = mapped_column(String(32), default="")

    # {"Monday": {"open": "10:00", "close": "22:00", "closed": false}, ...}
    operating_hours: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)
    # {"count": 12, "capacity": 4}
    tables: Mapped[Dict[str, int]] = mapped_column(JSON, nullable=False)

    avg_dining_duration: Mapped[int] = mapped_column(Integer, default=60)  # minutes
    booking_interval: Mapped[int] = mapped_column(Integer, default=30)  # minutes
    max_days_advance: Mapped[int] = mapped_column(Integer, default=30)
    policies: Mapped[str] = mapped_column(Text, default="")
    # ISO dates, "YYYY-MM-DD"
    blocked_dates: Mapped[List[str]] = mapped_column(JSON, default=lambda: [])

    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    reservations: Mapped[List["Reservation"]] = relationship(
        "Reservation", back_populates="restaurant", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Restaurant(id={self.id}, slug={self.slug})>"
