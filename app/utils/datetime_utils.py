"""
Date and time utility classes for the announcement service
"""

import calendar
from datetime import datetime, timedelta, timezone
from typing import Optional

from dateutil import parser
from dateutil.relativedelta import relativedelta


class DateTimeHelper:
    """Timezone-aware date and time helpers. All values are handled in UTC."""

    @staticmethod
    def now() -> datetime:
        """Current UTC datetime"""
        return datetime.now(timezone.utc)

    @staticmethod
    def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
        """
        Normalize a datetime to aware UTC.

        Naive values (as returned by SQLite) are assumed to already be UTC.
        """
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @staticmethod
    def parse_datetime(dt_string: str) -> datetime:
        """Parse an ISO-ish datetime string into aware UTC"""
        return DateTimeHelper.ensure_utc(parser.isoparse(dt_string))

    @staticmethod
    def add_days(value: datetime, days: int) -> datetime:
        return value + timedelta(days=days)

    @staticmethod
    def add_months(value: datetime, months: int) -> datetime:
        """Add calendar months; the day is clamped to the target month's length"""
        return value + relativedelta(months=months)

    @staticmethod
    def end_of_month(value: datetime) -> datetime:
        """Last millisecond of the month containing value (UTC)"""
        value = DateTimeHelper.ensure_utc(value)
        last_day = calendar.monthrange(value.year, value.month)[1]
        return value.replace(
            day=last_day, hour=23, minute=59, second=59, microsecond=999000
        )


def utc_now() -> datetime:
    """Column default helper"""
    return DateTimeHelper.now()
