"""
Pytest configuration and fixtures.

This module provides fixtures that simulate a real booking scenario:
- "Chez Amélie", an evening restaurant open 18:00-22:00, closed Mondays
- 5 tables of 4 (20 covers), 30 minute booking interval, 90 minute sittings
- A handful of reservations on Saturday 2026-03-14
"""
from __future__ import annotations

from datetime import datetime
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from quicktable.config import Settings
from quicktable.database import Base
from quicktable.models import Reservation, Restaurant
from tests.factories import SATURDAY, SUNDAY, weekly_hours


# Use SQLite for testing (in-memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment."""
    return Settings(
        _env_file=None,
        webhook_url="",
        limited_threshold=0.30,
        count_cancelled_reservations=True,
        honor_blocked_dates=True,
        enforce_status_transitions=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create a test database engine."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def sample_restaurant(db_session: AsyncSession) -> Restaurant:
    """
    Create "Chez Amélie" with an evening-only schedule.

    Total capacity is 5 x 4 = 20 covers.
    """
    restaurant = Restaurant(
        id="rest-amelie",
        slug="chez-amelie",
        name="Chez Amélie",
        description="Neighbourhood bistro",
        cuisine_type="French",
        whatsapp_number="+33 6 12 34 56 78",
        operating_hours=weekly_hours(closed_days=("Monday",)),
        tables={"count": 5, "capacity": 4},
        avg_dining_duration=90,
        booking_interval=30,
        max_days_advance=30,
        policies="Tables held for 15 minutes.",
        blocked_dates=["2026-03-21"],
    )
    db_session.add(restaurant)
    await db_session.commit()
    await db_session.refresh(restaurant)
    return restaurant


@pytest_asyncio.fixture
async def sample_reservations(
    db_session: AsyncSession, sample_restaurant: Restaurant
) -> list[Reservation]:
    """
    Reservations for Saturday service:
    - Dupont, 10 guests at 19:00 (confirmed)
    - Martin, 2 guests at 20:30 (pending)
    - Bernard, 4 guests at 21:00 (cancelled)
    - Leroy, 3 guests on Sunday at 18:00 (pending)
    """
    booked_at = datetime(2020, 1, 1, 12, 0)
    reservations = [
        Reservation(id="res-dupont", restaurant_id=sample_restaurant.id, customer_name="Dupont", customer_phone="+33 6 00 00 00 01", date=SATURDAY, time="19:00", party_size=10, status="confirmed", created_at=booked_at, updated_at=booked_at),
        Reservation(id="res-martin", restaurant_id=sample_restaurant.id, customer_name="Martin", customer_phone="", date=SATURDAY, time="20:30", party_size=2, status="pending", created_at=booked_at, updated_at=booked_at),
        Reservation(id="res-bernard", restaurant_id=sample_restaurant.id, customer_name="Bernard", customer_phone="0612", date=SATURDAY, time="21:00", party_size=4, status="cancelled", created_at=booked_at, updated_at=booked_at),
        Reservation(id="res-leroy", restaurant_id=sample_restaurant.id, customer_name="Leroy", customer_phone="", date=SUNDAY, time="18:00", party_size=3, status="pending", created_at=booked_at, updated_at=booked_at),
    ]

    for reservation in reservations:
        db_session.add(reservation)
    await db_session.commit()
    for reservation in reservations:
        await db_session.refresh(reservation)
    return reservations
