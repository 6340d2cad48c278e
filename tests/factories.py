"""Shared test data builders."""
from __future__ import annotations

from datetime import date
from typing import Dict

from quicktable.engine.availability import DAYS_OF_WEEK

SATURDAY = date(2026, 3, 14)
SUNDAY = date(2026, 3, 15)
MONDAY = date(2026, 3, 16)


def weekly_hours(
    open_time: str = "18:00",
    close_time: str = "22:00",
    closed_days: tuple = (),
) -> Dict[str, dict]:
    """Same hours every day, with some days closed."""
    return {
        day: {"open": open_time, "close": close_time, "closed": day in closed_days}
        for day in DAYS_OF_WEEK
    }
