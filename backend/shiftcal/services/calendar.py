"""Day/month identifiers from the caller -> validated queries -> shift blocks."""

from __future__ import annotations

from datetime import date

from sqlalchemy.orm import Session

from shiftcal.core import clock
from shiftcal.core.errors import InvalidDate
from shiftcal.services import shifts as shift_store
from shiftcal.services.identity import IdentityProvider
from shiftcal.services.views import ShiftBlock, to_blocks


def _to_int(value: int | str, what: str) -> int:
    if isinstance(value, bool):
        raise InvalidDate(f"Bad {what}: {value!r}")
    if isinstance(value, int):
        return value
    s = str(value).strip()
    if not (s.isascii() and s.isdigit()):
        raise InvalidDate(f"Bad {what}: {value!r}")
    return int(s)


def parse_day(year: int | str, month: int | str, day: int | str) -> date:
    y = _to_int(year, "year")
    m = _to_int(month, "month")
    d = _to_int(day, "day")
    clock.day_bounds(y, m, d)  # raises InvalidDate
    return date(y, m, d)


def parse_month(year: int | str, month: int | str) -> tuple[int, int]:
    y = _to_int(year, "year")
    m = _to_int(month, "month")
    clock.month_bounds(y, m)  # raises InvalidDate
    return y, m


def day_view(
    db: Session,
    provider: IdentityProvider,
    year: int | str,
    month: int | str,
    day: int | str,
    *,
    device: str | None = None,
) -> list[ShiftBlock]:
    d = parse_day(year, month, day)
    rows = shift_store.query_by_day(db, d.year, d.month, d.day, device=device)
    return to_blocks(rows, provider.resolve_users(s.user_id for s in rows))


def month_view(
    db: Session,
    provider: IdentityProvider,
    year: int | str,
    month: int | str,
    *,
    device: str | None = None,
) -> list[ShiftBlock]:
    y, m = parse_month(year, month)
    rows = shift_store.query_by_month(db, y, m, device=device)
    return to_blocks(rows, provider.resolve_users(s.user_id for s in rows))
