"""User directory lookups behind one narrow interface.

Only two lookups are needed by this service: by email at sign-in, and by id
when shifts are rendered. The directory itself (creating users, linking
OAuth accounts) belongs to the identity provider.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from shiftcal.core.config import settings
from shiftcal.core.errors import IdentityProviderError
from shiftcal.models import User
from shiftcal.services.views import UserMeta

log = logging.getLogger("shiftcal.identity")

DEFAULT_COLOR = "#9ca3af"


class IdentityProvider:
    def resolve_user_by_email(self, email: str) -> UserMeta | None:
        raise NotImplementedError

    def resolve_user_by_id(self, user_id: int) -> UserMeta | None:
        raise NotImplementedError

    def resolve_users(self, user_ids: Iterable[int]) -> dict[int, UserMeta]:
        out = {}
        for uid in sorted(set(user_ids)):
            meta = self.resolve_user_by_id(uid)
            if meta is not None:
                out[uid] = meta
        return out

    # ---- session / verification-token storage ----
    # Sessions are stateless JWTs (see shiftcal.auth.jwt_tokens), so an
    # adapter never has anything to store. These are kept as explicit no-ops
    # for callers written against a database-session adapter.

    def create_session(self, session_token: str, user_id: int, expires) -> None:
        return None

    def get_session_and_user(self, session_token: str) -> None:
        return None

    def update_session(self, session_token: str, **changes) -> None:
        return None

    def delete_session(self, session_token: str) -> None:
        return None

    def create_verification_token(self, identifier: str, token: str, expires) -> None:
        return None

    def use_verification_token(self, identifier: str, token: str) -> None:
        return None


def _meta_from_user(u: User) -> UserMeta:
    return UserMeta(id=u.id, name=u.name, color=u.color or DEFAULT_COLOR, email=u.email, role=u.role)


class DatabaseIdentityProvider(IdentityProvider):
    """Directory kept in the local ``users`` table."""

    def __init__(self, db: Session):
        self.db = db

    def resolve_user_by_email(self, email: str) -> UserMeta | None:
        e = (email or "").strip().lower()
        if not e:
            return None
        u = self.db.execute(select(User).where(User.email == e)).scalar_one_or_none()
        return _meta_from_user(u) if u else None

    def resolve_user_by_id(self, user_id: int) -> UserMeta | None:
        u = self.db.get(User, user_id)
        return _meta_from_user(u) if u else None

    def resolve_users(self, user_ids: Iterable[int]) -> dict[int, UserMeta]:
        ids = set(user_ids)
        if not ids:
            return {}
        rows = self.db.execute(select(User).where(User.id.in_(ids))).scalars().all()
        return {u.id: _meta_from_user(u) for u in rows}


class HttpIdentityProvider(IdentityProvider):
    """Remote user directory over REST.

    GET {base}/api/users/<id> and GET {base}/api/users/email/<email>.
    404 means "no such user"; anything else that isn't 2xx, or a transport
    error, raises IdentityProviderError. No retries.
    """

    def __init__(self, base_url: str, *, timeout: float = 5.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _get_json(self, path: str) -> dict | None:
        url = self.base_url + path
        req = urllib.request.Request(url, method="GET", headers={"Accept": "application/json"})
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                body = resp.read().decode("utf-8", errors="ignore")
        except urllib.error.HTTPError as e:
            if e.code == 404:
                return None
            log.warning("user directory GET %s failed status=%s", path, e.code)
            raise IdentityProviderError(f"user directory returned {e.code}") from e
        except OSError as e:  # URLError, timeouts, resets
            log.warning("user directory GET %s unreachable: %s", path, e)
            raise IdentityProviderError("user directory unreachable") from e

        try:
            data = json.loads(body) if body else None
        except ValueError as e:
            raise IdentityProviderError("user directory returned invalid JSON") from e
        return data if isinstance(data, dict) else None

    @staticmethod
    def _meta(data: dict | None) -> UserMeta | None:
        if not data or data.get("id") is None or not data.get("email"):
            return None
        try:
            uid = int(data["id"])
        except (TypeError, ValueError) as e:
            raise IdentityProviderError(f"non-integer user id from directory: {data['id']!r}") from e
        return UserMeta(
            id=uid,
            name=data.get("name") or data["email"],
            color=data.get("color") or DEFAULT_COLOR,
            email=data["email"],
            role=data.get("role"),
        )

    def resolve_user_by_email(self, email: str) -> UserMeta | None:
        e = (email or "").strip()
        if not e:
            return None
        return self._meta(self._get_json("/api/users/email/" + urllib.parse.quote(e, safe="")))

    def resolve_user_by_id(self, user_id: int) -> UserMeta | None:
        return self._meta(self._get_json(f"/api/users/{int(user_id)}"))


def get_identity_provider(db: Session) -> IdentityProvider:
    kind = (settings.IDENTITY_PROVIDER or "db").strip().lower()
    if kind == "http":
        return HttpIdentityProvider(settings.USER_DIRECTORY_URL, timeout=settings.USER_DIRECTORY_TIMEOUT_SECONDS)
    if kind == "db":
        return DatabaseIdentityProvider(db)
    raise RuntimeError(f"Unknown IDENTITY_PROVIDER setting: {kind!r}")
