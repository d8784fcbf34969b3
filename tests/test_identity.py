"""
Tests for the user directory adapters (local table and REST).
"""

import io
import json
import urllib.error
import urllib.request

import pytest

from shiftcal.core.errors import IdentityProviderError
from shiftcal.services.identity import (
    DEFAULT_COLOR,
    DatabaseIdentityProvider,
    HttpIdentityProvider,
    get_identity_provider,
)


class _FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


def _fake_urlopen(routes, calls):
    def urlopen(req, timeout=None):
        url = req.full_url
        calls.append(url)
        status, body = routes.get(url, (404, None))
        if status != 200:
            raise urllib.error.HTTPError(url, status, "err", {}, None)
        return _FakeResponse(json.dumps(body).encode("utf-8"))

    return urlopen


class TestDatabaseProvider:
    def test_by_email_is_case_insensitive(self, db, users):
        p = DatabaseIdentityProvider(db)
        meta = p.resolve_user_by_email("  Alice@Example.com ")
        assert meta.id == 2
        assert meta.name == "Alice"
        assert meta.color == "#ff0000"

    def test_unknown_email(self, db, users):
        assert DatabaseIdentityProvider(db).resolve_user_by_email("nobody@example.com") is None
        assert DatabaseIdentityProvider(db).resolve_user_by_email("") is None

    def test_by_id(self, db, users):
        p = DatabaseIdentityProvider(db)
        assert p.resolve_user_by_id(3).name == "Bob"
        assert p.resolve_user_by_id(99) is None

    def test_batch_skips_unknown(self, db, users):
        out = DatabaseIdentityProvider(db).resolve_users([2, 3, 3, 99])
        assert set(out) == {2, 3}

    def test_session_methods_are_noops(self, db):
        p = DatabaseIdentityProvider(db)
        assert p.create_session("tok", 1, None) is None
        assert p.get_session_and_user("tok") is None
        assert p.update_session("tok", expires=None) is None
        assert p.delete_session("tok") is None
        assert p.create_verification_token("a@b.c", "tok", None) is None
        assert p.use_verification_token("a@b.c", "tok") is None


class TestHttpProvider:
    BASE = "http://directory.local"

    def test_by_id(self, monkeypatch):
        calls = []
        routes = {f"{self.BASE}/api/users/2": (200, {"id": "2", "email": "alice@example.com", "name": "Alice", "color": "#ff0000"})}
        monkeypatch.setattr(urllib.request, "urlopen", _fake_urlopen(routes, calls))

        meta = HttpIdentityProvider(self.BASE + "/").resolve_user_by_id(2)
        assert meta.id == 2
        assert meta.name == "Alice"
        assert calls == [f"{self.BASE}/api/users/2"]

    def test_email_is_quoted(self, monkeypatch):
        calls = []
        routes = {f"{self.BASE}/api/users/email/a%2Bb%40example.com": (200, {"id": 5, "email": "a+b@example.com"})}
        monkeypatch.setattr(urllib.request, "urlopen", _fake_urlopen(routes, calls))

        meta = HttpIdentityProvider(self.BASE).resolve_user_by_email("a+b@example.com")
        assert meta.id == 5
        assert meta.name == "a+b@example.com"
        assert meta.color == DEFAULT_COLOR

    def test_404_is_none(self, monkeypatch):
        monkeypatch.setattr(urllib.request, "urlopen", _fake_urlopen({}, []))
        assert HttpIdentityProvider(self.BASE).resolve_user_by_id(7) is None

    def test_server_error_raises(self, monkeypatch):
        routes = {f"{self.BASE}/api/users/7": (500, None)}
        monkeypatch.setattr(urllib.request, "urlopen", _fake_urlopen(routes, []))
        with pytest.raises(IdentityProviderError):
            HttpIdentityProvider(self.BASE).resolve_user_by_id(7)

    def test_unreachable_raises(self, monkeypatch):
        def urlopen(req, timeout=None):
            raise urllib.error.URLError("connection refused")

        monkeypatch.setattr(urllib.request, "urlopen", urlopen)
        with pytest.raises(IdentityProviderError):
            HttpIdentityProvider(self.BASE).resolve_user_by_id(7)

    def test_batch_uses_per_id_lookups(self, monkeypatch):
        calls = []
        routes = {
            f"{self.BASE}/api/users/2": (200, {"id": 2, "email": "alice@example.com"}),
            f"{self.BASE}/api/users/3": (200, {"id": 3, "email": "bob@example.com"}),
        }
        monkeypatch.setattr(urllib.request, "urlopen", _fake_urlopen(routes, calls))

        out = HttpIdentityProvider(self.BASE).resolve_users([3, 2, 3, 9])
        assert set(out) == {2, 3}
        assert len(calls) == 3


class TestProviderSelection:
    def test_default_is_database(self, db):
        assert isinstance(get_identity_provider(db), DatabaseIdentityProvider)

    def test_http(self, db, monkeypatch):
        from shiftcal.core.config import settings

        monkeypatch.setattr(settings, "IDENTITY_PROVIDER", "http")
        assert isinstance(get_identity_provider(db), HttpIdentityProvider)

    def test_unknown_kind(self, db, monkeypatch):
        from shiftcal.core.config import settings

        monkeypatch.setattr(settings, "IDENTITY_PROVIDER", "ldap")
        with pytest.raises(RuntimeError):
            get_identity_provider(db)
