"""
Tests for access tokens and Google ID token checks that need no network.
"""

import time

import jwt
import pytest

from shiftcal.auth import google_id_token
from shiftcal.auth.google_id_token import GoogleIdTokenError, verify_id_token
from shiftcal.auth.jwt_tokens import JwtConfig, issue_access_token, read_access_token
from shiftcal.core.roles_registry import Actor, can_schedule, is_admin, to_role
from shiftcal.models import Role

CFG = JwtConfig(secret="s3cret", issuer="shiftcal-api", audience="shiftcal-web", ttl_seconds=60)


class TestAccessToken:
    def test_round_trip(self):
        actor = read_access_token(CFG, issue_access_token(CFG, Actor(user_id=7, role="ADMIN")))
        assert actor == Actor(user_id=7, role="ADMIN")

    def test_unknown_role_downgraded(self):
        actor = read_access_token(CFG, issue_access_token(CFG, Actor(user_id=7, role="ROOT")))
        assert actor.role == "NONE"

    def test_claims(self):
        claims = jwt.decode(
            issue_access_token(CFG, Actor(user_id=7, role="USER")),
            CFG.secret,
            algorithms=["HS256"],
            audience=CFG.audience,
        )
        assert claims["sub"] == "7"
        assert claims["typ"] == "access"
        assert claims["iss"] == CFG.issuer
        assert claims["exp"] - claims["iat"] == CFG.ttl_seconds

    def test_wrong_audience(self):
        other = JwtConfig(secret="s3cret", issuer="shiftcal-api", audience="elsewhere", ttl_seconds=60)
        with pytest.raises(jwt.InvalidTokenError):
            read_access_token(CFG, issue_access_token(other, Actor(user_id=7, role="USER")))

    def test_wrong_secret(self):
        other = JwtConfig(secret="other", issuer="shiftcal-api", audience="shiftcal-web", ttl_seconds=60)
        with pytest.raises(jwt.InvalidTokenError):
            read_access_token(CFG, issue_access_token(other, Actor(user_id=7, role="USER")))

    def test_expired(self):
        expired = JwtConfig(secret="s3cret", issuer="shiftcal-api", audience="shiftcal-web", ttl_seconds=-10)
        with pytest.raises(jwt.ExpiredSignatureError):
            read_access_token(CFG, issue_access_token(expired, Actor(user_id=7, role="USER")))

    def _signed(self, **overrides):
        now = int(time.time())
        claims = {"sub": "7", "iat": now, "exp": now + 60, "iss": CFG.issuer, "aud": CFG.audience, "typ": "access"}
        claims.update(overrides)
        return jwt.encode(claims, CFG.secret, algorithm="HS256")

    def test_non_access_token_rejected(self):
        with pytest.raises(jwt.InvalidTokenError):
            read_access_token(CFG, self._signed(typ="refresh"))

    def test_non_numeric_subject_rejected(self):
        with pytest.raises(jwt.InvalidTokenError):
            read_access_token(CFG, self._signed(sub="alice"))


class TestRoles:
    def test_scheduling_roles(self):
        assert can_schedule("ADMIN")
        assert can_schedule("USER")
        assert not can_schedule("NONE")
        assert not can_schedule(None)

    def test_admin(self):
        assert is_admin("ADMIN")
        assert not is_admin("USER")

    def test_unknown_role_is_none(self):
        assert to_role("SUPERUSER") is Role.NONE


class TestGoogleIdToken:
    def test_empty_token(self):
        with pytest.raises(GoogleIdTokenError, match="empty"):
            verify_id_token("", "client")

    def test_missing_client_id(self):
        with pytest.raises(GoogleIdTokenError, match="GOOGLE_CLIENT_ID"):
            verify_id_token("abc", "")

    def test_key_fetch_failure_wrapped(self, monkeypatch):
        class _Client:
            def get_signing_key_from_jwt(self, token):
                raise jwt.PyJWKClientError("unreachable")

        monkeypatch.setattr(google_id_token, "_jwks_client", lambda: _Client())
        with pytest.raises(GoogleIdTokenError, match="signing key"):
            verify_id_token("abc.def.ghi", "client")
