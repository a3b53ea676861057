"""
smsverify/utils/time_utils.py

Purpose: Time helpers

- UTC "now" used for confirmation and audit timestamps
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Returns the current time as a timezone-aware UTC datetime.
    """
    return datetime.now(timezone.utc)
