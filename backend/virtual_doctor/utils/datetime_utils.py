"""
Datetime utilities for the Virtual Doctor service
Database columns hold naive UTC timestamps; these helpers produce matching values
"""
from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """
    Get current UTC time as a naive datetime (replacement for deprecated datetime.utcnow())

    Example:
        >>> from virtual_doctor.utils.datetime_utils import utc_now
        >>> now = utc_now()
        >>> now.tzinfo is None
        True
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def utc_in(hours: int = 0, minutes: int = 0) -> datetime:
    """Get the naive UTC time the given offset from now"""
    return utc_now() + timedelta(hours=hours, minutes=minutes)
