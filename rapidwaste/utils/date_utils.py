"""
Calendar-day helpers. All windows are naive server-local datetimes, matching
how booking timestamps are stored.
"""
from datetime import date, datetime, time, timedelta
from typing import Tuple, Union


def day_window(day: Union[date, datetime]) -> Tuple[datetime, datetime]:
    """Return the half-open window [midnight, next midnight) for ``day``."""
    if isinstance(day, datetime):
        day = day.date()
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)

