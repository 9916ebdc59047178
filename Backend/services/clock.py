"""
Single source of "now" and "today" for the service.

All dates are calendar dates in APP_TIMEZONE; timestamps are stored in UTC.
"""

from datetime import date, datetime, timezone

from config import APP_TIMEZONE


def now() -> datetime:
    return datetime.now(timezone.utc)


def today() -> date:
    return now().astimezone(APP_TIMEZONE).date()


def today_string() -> str:
    return today().isoformat()


def as_utc(dt: datetime) -> datetime:
    # SQLite hands back naive datetimes for timezone-aware columns.
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def local_date(dt: datetime | None) -> date:
    if dt is None:
        return today()
    return as_utc(dt).astimezone(APP_TIMEZONE).date()


def parse_date(raw: str | None) -> date | None:
    try:
        return date.fromisoformat(raw)
    except (TypeError, ValueError):
        return None
