from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

logger = logging.getLogger(__name__)

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

MINUTES_PER_DAY = 24 * 60


def now_local() -> datetime:
    return datetime.now()


def time_of_day(dt: datetime) -> str:
    """Zero-padded 24h ``HH:MM`` for ``dt``."""
    return f"{dt.hour:02d}:{dt.minute:02d}"


def weekday_name(dt: datetime) -> str:
    """Lower-case English weekday name, independent of the process locale."""
    return WEEKDAYS[dt.weekday()]


def shift_time_of_day(hhmm: str, minutes: int) -> str:
    """Add ``minutes`` to an ``HH:MM`` string, wrapping past midnight."""
    hours, mins = hhmm.split(":")
    total = (int(hours) * 60 + int(mins) + minutes) % MINUTES_PER_DAY
    hour, minute = divmod(total, 60)
    return f"{hour:02d}:{minute:02d}"


def format_clock(dt: Optional[datetime] = None) -> str:
    sample = dt or now_local()
    return sample.strftime("%a %b %d %Y %H:%M:%S")
