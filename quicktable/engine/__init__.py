# Availability engine (pure, storage-free)
from quicktable.engine.availability import (
    DAYS_OF_WEEK,
    AvailabilityPolicy,
    BookableDate,
    BookedParty,
    InvalidConfigurationError,
    OperatingHours,
    RestaurantSchedule,
    Slot,
    SlotStatus,
    bookable_dates,
    compute_slots,
    validate_operating_hours,
    weekday_name,
)

__all__ = [
    "DAYS_OF_WEEK",
    "AvailabilityPolicy",
    "BookableDate",
    "BookedParty",
    "InvalidConfigurationError",
    "OperatingHours",
    "RestaurantSchedule",
    "Slot",
    "SlotStatus",
    "bookable_dates",
    "compute_slots",
    "validate_operating_hours",
    "weekday_name",
]
