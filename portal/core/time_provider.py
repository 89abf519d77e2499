from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from portal.config import settings


APP_TIMEZONE = settings.app_timezone or "Asia/Kolkata"
APP_ZONEINFO = ZoneInfo(APP_TIMEZONE)


class TimeProvider:
    def now(self) -> datetime:
        return datetime.now(APP_ZONEINFO)

    def today(self) -> date:
        return self.now().date()


def to_iso(value: date | datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


def as_utc(value: datetime | None) -> datetime | None:
    """Stored timestamps are UTC; SQLite hands them back without an offset."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


default_time_provider = TimeProvider()
