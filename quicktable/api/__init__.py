# API routes
from quicktable.api.restaurants import router as restaurants_router
from quicktable.api.availability import router as availability_router
from quicktable.api.reservations import router as reservations_router
from quicktable.api.dashboard import router as dashboard_router


__all__ = [
    "restaurants_router",
    "availability_router",
    "reservations_router",
    "dashboard_router",
]
