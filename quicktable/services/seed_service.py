"""Service for seeding default data to handle cold start scenarios."""
from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from quicktable.models.restaurant import Restaurant
from quicktable.schemas.restaurant import RestaurantRecord
from quicktable.engine.availability import DAYS_OF_WEEK
from quicktable.services.directory import RestaurantDirectory

logger = logging.getLogger(__name__)


DEFAULT_WEEKLY_SCHEDULE = {
    day: {"open": "10:00", "close": "22:00", "closed": False} for day in DAYS_OF_WEEK
}

# Demo restaurant shown on a fresh install
DEFAULT_RESTAURANT = {
    "id": "default-1",
    "name": "Le Bistro Charmant",
    "slug": "le-bistro-charmant",
    "description": (
        "Authentic French cuisine in a cozy neighborhood setting. Famous for our "
        "house-made pastries and evening steak frites."
    ),
    "cuisine_type": "French",
    "whatsapp_number": "1234567890",
    "operating_hours": DEFAULT_WEEKLY_SCHEDULE,
    "tables": {"count": 12, "capacity": 4},
    "avg_dining_duration": 60,
    "booking_interval": 30,
    "max_days_advance": 30,
    "policies": "We hold tables for 15 minutes. No-shows may be blocked from future bookings.",
    "blocked_dates": [],
}


class SeedService:
    """Creates the demo restaurant when the directory is empty."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.directory = RestaurantDirectory(session)

    async def ensure_default_data(self) -> dict:
        """
        Seed the default restaurant if no restaurants exist.

        Returns:
            {"restaurants_created": 0 or 1}
        """
        result = await self.session.execute(select(func.count(Restaurant.id)))
        if result.scalar_one() > 0:
            return {"restaurants_created": 0}

        restaurant = await self.directory.save(RestaurantRecord(**DEFAULT_RESTAURANT))
        logger.info("Seeded default restaurant %s", restaurant.slug)
        return {"restaurants_created": 1}
