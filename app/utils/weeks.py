from datetime import date, timedelta
from typing import Optional, Tuple

from app.constants.constants import WEEK_START_WEEKDAY


def get_week_range(day: Optional[date] = None) -> Tuple[date, date]:
    """Get the Sunday-Saturday range for a given date."""
    if day is None:
        day = date.today()

    days_since_start = (day.weekday() - WEEK_START_WEEKDAY) % 7
    start_of_week = day - timedelta(days=days_since_start)
    end_of_week = start_of_week + timedelta(days=6)

    return start_of_week, end_of_week
