from __future__ import annotations

import jwt
from fastapi import Cookie, Depends, HTTPException, status
from sqlalchemy.orm import Session

from shiftcal.auth.jwt_tokens import JwtConfig, read_access_token
from shiftcal.core.config import settings
from shiftcal.core.db import get_db
from shiftcal.core.roles_registry import Actor
from shiftcal.services.identity import IdentityProvider, get_identity_provider


def get_identity(db: Session = Depends(get_db)) -> IdentityProvider:
    return get_identity_provider(db)


def get_jwt_config() -> JwtConfig:
    return JwtConfig(
        secret=settings.JWT_SECRET,
        issuer=settings.JWT_ISS,
        audience=settings.JWT_AUD,
        ttl_seconds=settings.ACCESS_TOKEN_TTL_SECONDS,
    )


def get_current_actor(
    access_token: str | None = Cookie(default=None, alias="access_token"),
) -> Actor:
    if not access_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    try:
        return read_access_token(get_jwt_config(), access_token)
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
