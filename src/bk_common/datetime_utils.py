"""Clock utilities.

History timestamps are stored as timezone-aware UTC. Due dates and times
are wall-clock values in the bakery's local zone (settings.APP_TIMEZONE).
"""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from config.settings import settings


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def local_now() -> datetime:
    """Return timezone-aware now in the bakery's local zone."""
    return datetime.now(ZoneInfo(settings.APP_TIMEZONE))


def local_today() -> date:
    return local_now().date()


def start_of_week(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())
