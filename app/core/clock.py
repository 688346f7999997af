from datetime import datetime
from app.config import settings


def get_system_time() -> datetime:
    return settings.FROZEN_NOW or datetime.now()


def month_start(as_of: datetime) -> datetime:
    return as_of.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def current_period(as_of: datetime) -> tuple[int, int]:
    """(month, year) of ``as_of``; month is zero-based (January == 0)."""
    return as_of.month - 1, as_of.year


def to_local_naive(value: datetime) -> datetime:
    """Stored dates are naive server-local time; aware inputs are converted."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)
