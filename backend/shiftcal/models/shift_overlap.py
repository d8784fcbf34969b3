from sqlalchemy import Column, ForeignKey, Integer, Table

from shiftcal.core.db import Base


# Overlap links between shifts on the same device.
# Symmetric: a link A<->B is stored as two rows, (A, B) and (B, A).
shift_overlaps = Table(
    "shift_overlaps",
    Base.metadata,
    Column("shift_id", Integer, ForeignKey("shifts.id", ondelete="CASCADE"), primary_key=True),
    Column("peer_shift_id", Integer, ForeignKey("shifts.id", ondelete="CASCADE"), primary_key=True, index=True),
)
