"""Access tokens carried in the ``access_token`` cookie (HS256).

The token is the whole session: subject is the user id, ``role`` is copied
from the directory at sign-in and is not re-checked until the token expires.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

import jwt  # PyJWT

from shiftcal.core.roles_registry import Actor, to_role

TOKEN_TYPE = "access"
REQUIRED_CLAIMS = ["exp", "iat", "iss", "aud", "sub"]


@dataclass(frozen=True)
class JwtConfig:
    secret: str
    issuer: str
    audience: str
    ttl_seconds: int


def issue_access_token(cfg: JwtConfig, actor: Actor) -> str:
    issued_at = int(time.time())
    claims: dict[str, Any] = {
        "sub": str(actor.user_id),
        "role": to_role(actor.role).value,
        "typ": TOKEN_TYPE,
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "iat": issued_at,
        "exp": issued_at + cfg.ttl_seconds,
    }
    return jwt.encode(claims, cfg.secret, algorithm="HS256")


def read_access_token(cfg: JwtConfig, token: str) -> Actor:
    """Verified Actor from a token; jwt.InvalidTokenError on anything off."""
    claims = jwt.decode(
        token,
        cfg.secret,
        algorithms=["HS256"],
        issuer=cfg.issuer,
        audience=cfg.audience,
        options={"require": REQUIRED_CLAIMS},
    )
    if claims.get("typ") != TOKEN_TYPE:
        raise jwt.InvalidTokenError("not an access token")
    try:
        user_id = int(claims["sub"])
    except (TypeError, ValueError):
        raise jwt.InvalidTokenError("subject is not a user id")
    return Actor(user_id=user_id, role=to_role(claims.get("role")).value)
