from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shiftcal.core.db import Base, UTCDateTime, utcnow
from shiftcal.models.shift_overlap import shift_overlaps


class Shift(Base):
    """A user booked on a device for [start_time, end_time)."""

    __tablename__ = "shifts"
    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_shifts_start_before_end"),
        Index("ix_shifts_device_start", "selected_device", "start_time"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    # owner lives in the external user directory, so no FK here
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    selected_device: Mapped[str] = mapped_column(String(32), nullable=False)

    start_time: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, index=True)
    end_time: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow, onupdate=utcnow)

    # maintained only by services.overlaps
    overlap_peers: Mapped[list[Shift]] = relationship(
        "Shift",
        secondary=shift_overlaps,
        primaryjoin=lambda: Shift.id == shift_overlaps.c.shift_id,
        secondaryjoin=lambda: Shift.id == shift_overlaps.c.peer_shift_id,
        lazy="selectin",
    )

    @property
    def overlap_shift_ids(self) -> tuple[int, ...]:
        return tuple(sorted(p.id for p in self.overlap_peers))
