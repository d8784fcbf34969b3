from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shiftcal.core.errors import NotFound, ShiftCalendarError
from shiftcal.core.roles_registry import to_role
from shiftcal.models import User

log = logging.getLogger("shiftcal.users")


class DuplicateEmail(ShiftCalendarError):
    status_code = 409


def normalize_email(value: str) -> str:
    return (value or "").strip().lower()


def list_users(db: Session) -> list[User]:
    return list(db.scalars(select(User).order_by(User.id.asc())).all())


def create_user(db: Session, *, email: str, name: str, color: str | None = None, role: str = "USER") -> User:
    obj = User(
        email=normalize_email(email),
        name=name.strip(),
        role=to_role(role).value,
    )
    if color:
        obj.color = color
    db.add(obj)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateEmail("User with this email already exists")
    db.refresh(obj)
    log.info("user created id=%s role=%s", obj.id, obj.role)
    return obj


def update_user(
    db: Session,
    *,
    user_id: int,
    name: str | None = None,
    color: str | None = None,
    role: str | None = None,
) -> User:
    obj = db.get(User, user_id)
    if obj is None:
        raise NotFound("User not found")

    # empty strings count as "keep"
    if name is not None and name.strip():
        obj.name = name.strip()
    if color is not None and color.strip():
        obj.color = color.strip()
    if role is not None:
        obj.role = to_role(role).value

    db.commit()
    db.refresh(obj)
    return obj
