# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for SchoolHub.

All timestamps are stored in UTC and every Python datetime handled by the
services is timezone-aware, so naive/aware comparisons never happen.

Usage:
------
    from schoolhub.utils.datetime import utc_now

    # For SQLAlchemy model defaults
    created_at = mapped_column(DateTime(timezone=True), default=utc_now)
"""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None.

    Note:
        Naive datetimes are assumed to already be in UTC. SQLite drivers
        return naive values even for timezone-aware columns.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def whole_years_between(start: date, end: date) -> int:
    """Count complete years elapsed from start to end.

    Used for ages: the year only counts once the anniversary is reached.

    Args:
        start: Earlier date (e.g. date of birth).
        end: Later date (e.g. today).

    Returns:
        Number of full years.
    """
    years = end.year - start.year
    if (end.month, end.day) < (start.month, start.day):
        years -= 1
    return years
