from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, ConfigDict, Field

from shiftcal.auth.deps import get_identity, get_jwt_config
from shiftcal.auth.google_id_token import GoogleIdTokenError, verify_id_token
from shiftcal.auth.jwt_tokens import issue_access_token
from shiftcal.core.config import settings
from shiftcal.core.roles_registry import Actor, to_role
from shiftcal.services.identity import IdentityProvider

log = logging.getLogger("shiftcal.auth")

router = APIRouter(prefix="/auth", tags=["auth"])


class GoogleAuthIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    idToken: str = Field(alias="id_token")


@router.post("/google", status_code=status.HTTP_204_NO_CONTENT)
def auth_google(payload: GoogleAuthIn, response: Response, identity: IdentityProvider = Depends(get_identity)):
    try:
        claims = verify_id_token(payload.idToken, settings.GOOGLE_CLIENT_ID)
    except GoogleIdTokenError as e:
        raise HTTPException(status_code=401, detail=str(e))

    email = str(claims["email"]).strip().lower()

    # only users already known to the directory may sign in
    user = identity.resolve_user_by_email(email)
    if user is None:
        log.info("sign-in refused: %s not in user directory", email)
        raise HTTPException(status_code=403, detail="User is not registered")

    token = issue_access_token(get_jwt_config(), Actor(user_id=user.id, role=to_role(user.role).value))

    response.set_cookie(
        key="access_token",
        value=token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        domain=settings.COOKIE_DOMAIN,
        path="/",
        max_age=settings.ACCESS_TOKEN_TTL_SECONDS,
    )
    return


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(response: Response):
    response.delete_cookie(key="access_token", domain=settings.COOKIE_DOMAIN, path="/")
    return
