from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime

from shiftcal.core.errors import UnknownUser
from shiftcal.models import Shift


@dataclass(frozen=True)
class UserMeta:
    id: int
    name: str
    color: str
    email: str | None = None
    role: str | None = None


@dataclass(frozen=True)
class ShiftBlock:
    """Display-ready shift: owner's name/colour attached, built per request."""

    id: int
    user_id: int
    name: str
    color: str
    selected_device: str
    start_time: datetime
    end_time: datetime
    overlap_shift_ids: tuple[int, ...]


def to_blocks(shifts: Iterable[Shift], user_lookup: Mapping[int, UserMeta]) -> list[ShiftBlock]:
    blocks = []
    for s in shifts:
        owner = user_lookup.get(s.user_id)
        if owner is None:
            raise UnknownUser(f"User {s.user_id} of shift {s.id} not found in directory")
        blocks.append(
            ShiftBlock(
                id=s.id,
                user_id=s.user_id,
                name=owner.name,
                color=owner.color,
                selected_device=s.selected_device,
                start_time=s.start_time,
                end_time=s.end_time,
                overlap_shift_ids=s.overlap_shift_ids,
            )
        )
    blocks.sort(key=lambda b: (b.start_time, b.id))
    return blocks
