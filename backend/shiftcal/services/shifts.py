"""Shift store: create/update/delete and day/month range queries.

Every mutation and the overlap-graph update it causes are one transaction.
Mutations on a device are serialised with a per-device lock; on databases
that support it the peer rows are also locked with SELECT ... FOR UPDATE.
"""

from __future__ import annotations

import logging
import threading
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from shiftcal.core import clock
from shiftcal.core.config import settings
from shiftcal.core.devices import to_device
from shiftcal.core.errors import Forbidden, InvalidDevice, InvalidRange, NotFound
from shiftcal.core.roles_registry import Actor, can_schedule, is_admin
from shiftcal.models import Device, Shift
from shiftcal.services import overlaps

log = logging.getLogger("shiftcal.shifts")

_device_locks: dict[str, threading.Lock] = {d.value: threading.Lock() for d in Device}


@contextmanager
def _locked(*devices: str):
    # sorted, so two updates moving shifts between the same devices can't deadlock
    with ExitStack() as stack:
        for dev in sorted(set(devices)):
            stack.enter_context(_device_locks[dev])
        yield


@dataclass(frozen=True)
class ShiftPatch:
    """Fields to change; None means keep."""

    user_id: int | None = None
    device: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None


def _validated_device(value: str) -> str:
    dev = to_device(value)
    if dev is None:
        raise InvalidDevice(f"Unknown device: {value}")
    return dev.value


def _validated_range(start_time: datetime, end_time: datetime) -> tuple[datetime, datetime]:
    start = clock.to_utc(start_time)
    end = clock.to_utc(end_time)
    if start >= end:
        raise InvalidRange("start_time must be before end_time")
    return start, end


def _require_can_touch(actor: Actor, owner_id: int) -> None:
    if not can_schedule(actor.role):
        raise Forbidden("Scheduling privilege required")
    if not is_admin(actor.role) and owner_id != actor.user_id:
        raise Forbidden("Can only manage your own shifts")


def _self_check(db: Session) -> None:
    if settings.OVERLAP_SELF_CHECK:
        overlaps.check_overlap_graph(db)


def get_shift(db: Session, shift_id: int) -> Shift:
    obj = db.get(Shift, shift_id)
    if obj is None:
        raise NotFound("Shift not found")
    return obj


@contextmanager
def _locked_shift(db: Session, shift_id: int, *also: str):
    """Yield ``shift_id`` re-read while its device (and ``also``) is locked.

    The shift may be moved to another device by a concurrent request while we
    wait; in that case the locks are released and taken again for the new one.
    """
    obj = get_shift(db, shift_id)
    while True:
        devices = {obj.selected_device, *also}
        with _locked(*devices):
            # drop whatever this session read before the lock was ours
            db.expire_all()
            obj = db.get(Shift, shift_id, with_for_update=True)
            if obj is None:
                raise NotFound("Shift not found")
            if obj.selected_device in devices:
                yield obj
                return
        log.debug("shift %s moved to %s while waiting for its lock, retrying", shift_id, obj.selected_device)


def create_shift(
    db: Session,
    *,
    actor: Actor,
    user_id: int,
    device: str,
    start_time: datetime,
    end_time: datetime,
) -> Shift:
    _require_can_touch(actor, user_id)
    start, end = _validated_range(start_time, end_time)
    dev = _validated_device(device)

    with _locked(dev):
        db.expire_all()
        obj = Shift(user_id=user_id, selected_device=dev, start_time=start, end_time=end)
        db.add(obj)
        try:
            db.flush()
            added, _ = overlaps.relink(db, obj)
            _self_check(db)
            db.commit()
        except Exception:
            db.rollback()
            raise

    db.refresh(obj)
    log.info("shift created id=%s user_id=%s device=%s overlaps=%s", obj.id, user_id, dev, sorted(added))
    return obj


def update_shift(db: Session, *, actor: Actor, shift_id: int, patch: ShiftPatch) -> Shift:
    patch_device = _validated_device(patch.device) if patch.device is not None else None

    with _locked_shift(db, shift_id, *([patch_device] if patch_device else [])) as obj:
        _require_can_touch(actor, obj.user_id)
        if patch.user_id is not None:
            _require_can_touch(actor, patch.user_id)

        new_device = patch_device or obj.selected_device
        start, end = _validated_range(
            patch.start_time if patch.start_time is not None else obj.start_time,
            patch.end_time if patch.end_time is not None else obj.end_time,
        )
        moved = new_device != obj.selected_device or start != obj.start_time or end != obj.end_time

        try:
            if patch.user_id is not None:
                obj.user_id = patch.user_id
            obj.selected_device = new_device
            obj.start_time = start
            obj.end_time = end
            added: set[int] = set()
            removed: set[int] = set()
            if moved:
                added, removed = overlaps.relink(db, obj)
            _self_check(db)
            db.commit()
        except Exception:
            db.rollback()
            raise

    db.refresh(obj)
    log.info(
        "shift updated id=%s device=%s moved=%s overlaps_added=%s overlaps_removed=%s",
        obj.id, new_device, moved, sorted(added), sorted(removed),
    )
    return obj


def delete_shift(db: Session, *, actor: Actor, shift_id: int) -> None:
    with _locked_shift(db, shift_id) as obj:
        _require_can_touch(actor, obj.user_id)
        try:
            peers = overlaps.unlink_all(obj)
            db.delete(obj)
            db.flush()
            _self_check(db)
            db.commit()
        except Exception:
            db.rollback()
            raise

    log.info("shift deleted id=%s peers_unlinked=%s", shift_id, sorted(peers))


def _query_window(db: Session, start: datetime, end: datetime, device: str | None) -> list[Shift]:
    stmt = select(Shift).where(Shift.start_time < end, Shift.end_time > start)
    if device is not None:
        stmt = stmt.where(Shift.selected_device == _validated_device(device))
    return list(db.scalars(stmt.order_by(Shift.start_time.asc(), Shift.id.asc())).all())


def query_by_day(db: Session, year: int, month: int, day: int, *, device: str | None = None) -> list[Shift]:
    """Shifts whose [start, end) intersects the local day."""
    start, end = clock.day_bounds(year, month, day)
    return _query_window(db, start, end, device)


def query_by_month(db: Session, year: int, month: int, *, device: str | None = None) -> list[Shift]:
    """Shifts whose [start, end) intersects the local month."""
    start, end = clock.month_bounds(year, month)
    return _query_window(db, start, end, device)
