"""
UTC datetime helper.

Timestamps in the system are timezone-aware UTC; case and task dates are
calendar dates taken from the UTC clock.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Use this instead of datetime.now() (naive, local timezone) or
    datetime.utcnow() (naive, deprecated in Python 3.12).
    """
    return datetime.now(UTC)
