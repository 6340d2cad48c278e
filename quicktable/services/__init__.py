# Business logic services
from quicktable.services.booking_service import BookingService
from quicktable.services.dashboard_service import DashboardService
from quicktable.services.directory import ReservationStore, RestaurantDirectory
from quicktable.services.notifications import WebhookForwarder
from quicktable.services.seed_service import SeedService

__all__ = [
    "BookingService",
    "DashboardService",
    "ReservationStore",
    "RestaurantDirectory",
    "WebhookForwarder",
    "SeedService",
]
