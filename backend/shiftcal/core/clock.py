from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from shiftcal.core.config import settings
from shiftcal.core.errors import InvalidDate


@lru_cache
def local_tz() -> ZoneInfo:
    name = (settings.TIMEZONE or "").strip() or "UTC"
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        raise RuntimeError(f"Unknown TIMEZONE setting: {name!r}")


def to_utc(value: datetime) -> datetime:
    """Naive values are wall-clock times in the configured zone."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=local_tz())
    return value.astimezone(timezone.utc)


def to_local(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(local_tz())


def _local_range_to_utc(start_day: date, end_day: date) -> tuple[datetime, datetime]:
    tz = local_tz()
    start_local = datetime.combine(start_day, time.min, tzinfo=tz)
    end_local = datetime.combine(end_day, time.min, tzinfo=tz)
    return start_local.astimezone(timezone.utc), end_local.astimezone(timezone.utc)


# Windows are built from the next local midnight and shifted to UTC, so the
# first and last year datetime can hold are out: 0001-01-01 in a zone east of
# UTC and 9999-12-31 have no representable [start, end).
MIN_YEAR = 2
MAX_YEAR = 9998


def _check_year(year: int) -> None:
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise InvalidDate(f"Year {year} outside supported range {MIN_YEAR}..{MAX_YEAR}")


def day_bounds(year: int, month: int, day: int) -> tuple[datetime, datetime]:
    """[start, end) of a local calendar day, in UTC."""
    _check_year(year)
    try:
        d = date(year, month, day)
    except ValueError:
        raise InvalidDate(f"Invalid date: {year}-{month}-{day}")
    return _local_range_to_utc(d, d + timedelta(days=1))


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """[start, end) of a local calendar month, in UTC."""
    _check_year(year)
    try:
        first = date(year, month, 1)
    except ValueError:
        raise InvalidDate(f"Invalid month: {year}-{month}")
    return _local_range_to_utc(first, first + timedelta(days=monthrange(year, month)[1]))
