from __future__ import annotations

from functools import lru_cache
from typing import Any

import jwt  # PyJWT

GOOGLE_CERTS_URL = "https://www.googleapis.com/oauth2/v3/certs"
GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")


class GoogleIdTokenError(Exception):
    pass


@lru_cache
def _jwks_client() -> jwt.PyJWKClient:
    return jwt.PyJWKClient(GOOGLE_CERTS_URL, cache_keys=True)


def verify_id_token(id_token: str, client_id: str) -> dict[str, Any]:
    """
    Validates a Google ID token (signature, audience, issuer, expiry).
    Returns the claims; "email" is guaranteed present and verified.
    """
    if not id_token:
        raise GoogleIdTokenError("id_token is empty")
    if not client_id:
        raise GoogleIdTokenError("GOOGLE_CLIENT_ID is not configured")

    try:
        signing_key = _jwks_client().get_signing_key_from_jwt(id_token)
        claims = jwt.decode(
            id_token,
            signing_key.key,
            algorithms=["RS256"],
            audience=client_id,
            options={"require": ["exp", "iat", "iss", "aud", "sub"]},
        )
    except jwt.PyJWKClientError as e:
        raise GoogleIdTokenError(f"cannot fetch signing key: {e}")
    except jwt.InvalidTokenError as e:
        raise GoogleIdTokenError(str(e))

    if claims.get("iss") not in GOOGLE_ISSUERS:
        raise GoogleIdTokenError("wrong issuer")
    if not claims.get("email"):
        raise GoogleIdTokenError("email is missing")
    if claims.get("email_verified") not in (True, "true"):
        raise GoogleIdTokenError("email is not verified")

    return claims
