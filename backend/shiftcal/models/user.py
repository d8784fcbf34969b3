from datetime import datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from shiftcal.core.db import Base, UTCDateTime, utcnow


class User(Base):
    """User directory record, read through DatabaseIdentityProvider."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    # calendar block colour, "#rrggbb"
    color: Mapped[str] = mapped_column(String(16), nullable=False, default="#9ca3af")

    # stored as a string, validated in code with the Role enum
    role: Mapped[str] = mapped_column(String(32), default="USER", nullable=False)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)
