"""
REST API endpoint for the admin dashboard.
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from quicktable.api.dependencies import get_today
from quicktable.database import get_session
from quicktable.schemas.availability import DashboardSummary
from quicktable.services.dashboard_service import DashboardService
from quicktable.services.directory import RestaurantDirectory

router = APIRouter(prefix="/api/v1", tags=["dashboard"])


@router.get("/restaurants/{restaurant_id}/dashboard", response_model=DashboardSummary)
async def get_dashboard(
    restaurant_id: str,
    on_date: Optional[date] = Query(None, alias="date", description="Defaults to today"),
    today: date = Depends(get_today),
    session: AsyncSession = Depends(get_session),
) -> DashboardSummary:
    """
    Get today's counters for the admin dashboard.

    Guests and bookings count every reservation on the day regardless
    of status; pending count spans all dates.
    """
    if await RestaurantDirectory(session).get(restaurant_id) is None:
        raise HTTPException(status_code=404, detail="Restaurant not found")

    return await DashboardService(session).summary(restaurant_id, on_date or today)
