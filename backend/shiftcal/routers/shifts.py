from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from shiftcal.auth.deps import get_current_actor, get_identity
from shiftcal.auth.guards import require_scheduler
from shiftcal.core import clock
from shiftcal.core.db import get_db
from shiftcal.core.roles_registry import Actor
from shiftcal.models import Shift
from shiftcal.services import calendar
from shiftcal.services import shifts as shift_store
from shiftcal.services.identity import IdentityProvider
from shiftcal.services.views import ShiftBlock

router = APIRouter(prefix="/shifts", tags=["shifts"])


# ---------- Schemas ----------

class ShiftCreateIn(BaseModel):
    selected_device: str = Field(..., min_length=1, max_length=32)
    start_time: datetime
    end_time: datetime
    # defaults to the caller; only ADMIN may book someone else
    user_id: int | None = Field(default=None, gt=0)


class ShiftUpdateIn(BaseModel):
    selected_device: str | None = Field(default=None, min_length=1, max_length=32)
    start_time: datetime | None = None
    end_time: datetime | None = None
    user_id: int | None = Field(default=None, gt=0)


# ---------- Helpers ----------

def _iso(value: datetime) -> str:
    return clock.to_local(value).isoformat()


def _block_payload(b: ShiftBlock) -> dict:
    return {
        "id": b.id,
        "user_id": b.user_id,
        "name": b.name,
        "color": b.color,
        "selected_device": b.selected_device,
        "start_time": _iso(b.start_time),
        "end_time": _iso(b.end_time),
        "overlap_shift_ids": list(b.overlap_shift_ids),
    }


def _shift_payload(s: Shift) -> dict:
    return {
        "id": s.id,
        "user_id": s.user_id,
        "selected_device": s.selected_device,
        "start_time": _iso(s.start_time),
        "end_time": _iso(s.end_time),
        "overlap_shift_ids": list(s.overlap_shift_ids),
    }


# ---------- Views ----------

@router.get("/day/{year}/{month}/{day}")
def get_day_blocks(
    year: str,
    month: str,
    day: str,
    device: str | None = Query(default=None),
    db: Session = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity),
    actor: Actor = Depends(get_current_actor),
):
    """Shift blocks of one local day, ordered by start time then id."""
    blocks = calendar.day_view(db, identity, year, month, day, device=device)
    return [_block_payload(b) for b in blocks]


@router.get("/month/{year}/{month}")
def get_month_blocks(
    year: str,
    month: str,
    device: str | None = Query(default=None),
    db: Session = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity),
    actor: Actor = Depends(get_current_actor),
):
    blocks = calendar.month_view(db, identity, year, month, device=device)
    return [_block_payload(b) for b in blocks]


# ---------- CRUD ----------

@router.post("", status_code=status.HTTP_201_CREATED)
def create_shift(
    payload: ShiftCreateIn,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_scheduler),
):
    obj = shift_store.create_shift(
        db,
        actor=actor,
        user_id=payload.user_id if payload.user_id is not None else actor.user_id,
        device=payload.selected_device,
        start_time=payload.start_time,
        end_time=payload.end_time,
    )
    return _shift_payload(obj)


@router.get("/{shift_id}")
def get_shift(
    shift_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return _shift_payload(shift_store.get_shift(db, shift_id))


@router.patch("/{shift_id}")
def update_shift(
    shift_id: int,
    payload: ShiftUpdateIn,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_scheduler),
):
    obj = shift_store.update_shift(
        db,
        actor=actor,
        shift_id=shift_id,
        patch=shift_store.ShiftPatch(
            user_id=payload.user_id,
            device=payload.selected_device,
            start_time=payload.start_time,
            end_time=payload.end_time,
        ),
    )
    return _shift_payload(obj)


@router.delete("/{shift_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_shift(
    shift_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_scheduler),
):
    shift_store.delete_shift(db, actor=actor, shift_id=shift_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
