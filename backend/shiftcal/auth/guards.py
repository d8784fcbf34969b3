from __future__ import annotations

from fastapi import Depends, HTTPException, status

from shiftcal.auth.deps import get_current_actor
from shiftcal.core.roles_registry import Actor, can_schedule, is_admin


def require_scheduler(actor: Actor = Depends(get_current_actor)) -> Actor:
    if not can_schedule(actor.role):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Scheduling privilege required",
        )
    return actor


def require_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    if not is_admin(actor.role):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="ADMIN required",
        )
    return actor
