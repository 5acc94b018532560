"""Date manipulation utilities pinned to the service's local timezone"""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from billing_service.config import settings


def local_timezone() -> ZoneInfo:
    return ZoneInfo(settings.local_timezone)


def current_local_time() -> datetime:
    """Current time in the configured local timezone"""
    return datetime.now(local_timezone())


def local_time(value: datetime) -> datetime:
    """
    Normalize a timestamp to the local timezone.

    Naive values are what SQLite hands back for timezone-aware columns; they
    were written as local wall-clock time, so the zone is attached as-is.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=local_timezone())
    return value.astimezone(local_timezone())


def add_days(from_time: datetime, days: int) -> datetime:
    """Add calendar days (no business-day adjustment)"""
    return from_time + timedelta(days=days)
