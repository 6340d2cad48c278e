from quicktable.schemas.restaurant import (
    OperatingHoursSchema,
    RestaurantRead,
    RestaurantRecord,
    TableConfig,
)
from quicktable.schemas.reservation import (
    BookingResponse,
    ContactLinkResponse,
    ManualReservationCreate,
    ReservationCreate,
    ReservationRead,
    ReservationStatus,
    ReservationStatusUpdate,
)
from quicktable.schemas.availability import (
    AvailabilityResponse,
    BookableDateRead,
    DashboardSummary,
    SlotRead,
)

__all__ = [
    "OperatingHoursSchema",
    "RestaurantRead",
    "RestaurantRecord",
    "TableConfig",
    "BookingResponse",
    "ContactLinkResponse",
    "ManualReservationCreate",
    "ReservationCreate",
    "ReservationRead",
    "ReservationStatus",
    "ReservationStatusUpdate",
    "AvailabilityResponse",
    "BookableDateRead",
    "DashboardSummary",
    "SlotRead",
]
