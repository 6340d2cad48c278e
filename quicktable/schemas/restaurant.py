from __future__ import annotations

from datetime import date as calendar_date
from typing import Dict, List, Optional

from pydantic import ConfigDict, Field, field_validator

from quicktable.schemas.base import CamelModel
from quicktable.engine.availability import validate_operating_hours

CLOCK_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class OperatingHoursSchema(CamelModel):
    """Opening window for one weekday."""

    open: str = Field(default="10:00", pattern=CLOCK_PATTERN)
    close: str = Field(default="22:00", pattern=CLOCK_PATTERN)
    closed: bool = False


class TableConfig(CamelModel):
    """Table inventory; total capacity is count x capacity."""

    count: int = Field(..., ge=0)
    capacity: int = Field(..., ge=1)


class RestaurantBase(CamelModel):
    """Base schema for restaurant data."""

    slug: str = Field(..., min_length=1, max_length=100, pattern=SLUG_PATTERN)
    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    cuisine_type: str = Field(default="", max_length=100)
    whatsapp_number: str = Field(default="", max_length=32)
    operating_hours: Dict[str, OperatingHoursSchema]
    tables: TableConfig
    avg_dining_duration: int = Field(default=60, ge=1)
    booking_interval: int = Field(default=30, ge=1)
    max_days_advance: int = Field(default=30, ge=0)
    policies: str = ""
    blocked_dates: List[calendar_date] = Field(default_factory=list)

    @field_validator("operating_hours")
    @classmethod
    def require_full_week(
        cls, value: Dict[str, OperatingHoursSchema]
    ) -> Dict[str, OperatingHoursSchema]:
        validate_operating_hours(value)
        return value


class RestaurantRecord(RestaurantBase):
    """Full restaurant record used for replace/upsert."""

    id: Optional[str] = Field(None, min_length=1, max_length=64)

    def to_orm_values(self) -> dict:
        """Column values for the Restaurant model."""
        values = self.model_dump(exclude={"id"})
        values["blocked_dates"] = [d.isoformat() for d in self.blocked_dates]
        return values


class RestaurantRead(RestaurantBase):
    """Schema for reading a restaurant."""

    model_config = ConfigDict(from_attributes=True)

    id: str
