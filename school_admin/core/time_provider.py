from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from school_admin.config import settings


APP_TIMEZONE = settings.app_timezone or 'UTC'
APP_ZONEINFO = ZoneInfo(APP_TIMEZONE)


class TimeProvider:
    def now(self) -> datetime:
        return datetime.now(APP_ZONEINFO)

    def today(self) -> date:
        return self.now().date()

    def naive_now(self) -> datetime:
        """Wall-clock time in the app timezone, the form stored in DateTime columns."""
        return self.now().replace(tzinfo=None)


def month_start(day: date) -> date:
    return day.replace(day=1)


def shift_month(day: date, months: int) -> date:
    """First day of the month `months` away from the month of `day`."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


default_time_provider = TimeProvider()
