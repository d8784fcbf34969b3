from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from shiftcal.auth.deps import get_current_actor, get_identity
from shiftcal.auth.guards import require_admin
from shiftcal.core.db import get_db
from shiftcal.core.roles_registry import Actor, can_schedule
from shiftcal.models import Role, User
from shiftcal.services import users as user_service
from shiftcal.services.identity import IdentityProvider

router = APIRouter(tags=["users"])

COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"


class UserCreateIn(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    name: str = Field(..., min_length=1, max_length=128)
    color: str | None = Field(default=None, pattern=COLOR_PATTERN)
    role: Role = Role.USER


class UserUpdateIn(BaseModel):
    name: str | None = Field(default=None, max_length=128)
    color: str | None = Field(default=None, pattern=COLOR_PATTERN)
    role: Role | None = None


def _user_payload(u: User) -> dict:
    return {"id": u.id, "email": u.email, "name": u.name, "color": u.color, "role": u.role}


@router.get("/me")
def me(
    actor: Actor = Depends(get_current_actor),
    identity: IdentityProvider = Depends(get_identity),
):
    user = identity.resolve_user_by_id(actor.user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "color": user.color,
        "role": actor.role,
        "can_schedule": can_schedule(actor.role),
    }


@router.get("/users")
def list_users(db: Session = Depends(get_db), actor: Actor = Depends(require_admin)):
    return [_user_payload(u) for u in user_service.list_users(db)]


@router.post("/users", status_code=201)
def create_user(payload: UserCreateIn, db: Session = Depends(get_db), actor: Actor = Depends(require_admin)):
    obj = user_service.create_user(
        db,
        email=payload.email,
        name=payload.name,
        color=payload.color,
        role=payload.role.value,
    )
    return _user_payload(obj)


@router.patch("/users/{user_id}")
def update_user(
    user_id: int,
    payload: UserUpdateIn,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
):
    obj = user_service.update_user(
        db,
        user_id=user_id,
        name=payload.name,
        color=payload.color,
        role=payload.role.value if payload.role is not None else None,
    )
    return _user_payload(obj)
