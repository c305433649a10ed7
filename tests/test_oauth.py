"""
Tests for Google sign-in: redirect, callback and account linking.
"""
from urllib.parse import parse_qs, urlparse

from pathwise.api.routes import auth as auth_routes
from pathwise.core import config
from pathwise.core.security import create_oauth_state, decode_access_token
from pathwise.db.models.user import User
from pathwise.services.oauth_service import OAuthError
from pathwise.services.user_service import link_oauth_account

GOOGLE_INFO = {
    "google_id": "google-123",
    "email": "Jane@Example.com",
    "name": "Jane Google",
    "avatar": "https://example.com/jane.png",
}


def _callback(client, **params):
    return client.get("/auth/google/callback", params=params, follow_redirects=False)


def test_google_login_not_configured(client, monkeypatch):
    monkeypatch.setattr(config, "GOOGLE_CLIENT_ID", None)

    response = client.get("/auth/google", follow_redirects=False)

    assert response.status_code == 503


def test_google_login_redirects_to_consent(client, monkeypatch):
    monkeypatch.setattr(config, "GOOGLE_CLIENT_ID", "client-id")
    monkeypatch.setattr(config, "GOOGLE_CLIENT_SECRET", "client-secret")

    response = client.get("/auth/google", follow_redirects=False)

    assert response.status_code == 307
    location = urlparse(response.headers["location"])
    assert location.netloc == "accounts.google.com"
    query = parse_qs(location.query)
    assert query["client_id"] == ["client-id"]
    assert query["scope"] == ["openid email profile"]
    assert query["state"]


def test_google_callback_creates_account(client, db, monkeypatch):
    monkeypatch.setattr(auth_routes, "exchange_code_for_userinfo", lambda code: dict(GOOGLE_INFO))

    response = _callback(client, code="auth-code", state=create_oauth_state())

    assert response.status_code == 307
    location = urlparse(response.headers["location"])
    assert location.path == "/auth/success"
    token = parse_qs(location.query)["token"][0]
    claims = decode_access_token(token)
    assert claims["email"] == "jane@example.com"
    assert claims["provider"] == "google"

    user = db.query(User).filter(User.email == "jane@example.com").first()
    assert user.google_id == "google-123"
    assert user.is_email_verified is True
    assert user.password_hash is None


def test_google_callback_links_existing_email_account(client, db, user_factory, monkeypatch):
    existing = user_factory(email="jane@example.com", verified=False)
    monkeypatch.setattr(auth_routes, "exchange_code_for_userinfo", lambda code: dict(GOOGLE_INFO))

    response = _callback(client, code="auth-code", state=create_oauth_state())

    assert urlparse(response.headers["location"]).path == "/auth/success"
    db.expire_all()
    assert db.query(User).count() == 1
    linked = db.get(User, existing.id)
    assert linked.google_id == "google-123"
    assert linked.provider == "google"
    assert linked.is_email_verified is True
    assert linked.avatar == "https://example.com/jane.png"


def test_google_callback_rejects_bad_state(client, monkeypatch):
    monkeypatch.setattr(auth_routes, "exchange_code_for_userinfo", lambda code: dict(GOOGLE_INFO))

    response = _callback(client, code="auth-code", state="forged")

    assert urlparse(response.headers["location"]).path == "/auth/error"


def test_google_callback_user_cancelled(client):
    response = _callback(client, error="access_denied")

    location = urlparse(response.headers["location"])
    assert location.path == "/auth/error"
    assert parse_qs(location.query)["message"] == ["Authentication failed"]


def test_google_callback_exchange_failure(client, monkeypatch):
    def fail(code):
        raise OAuthError("Google account has no email address")

    monkeypatch.setattr(auth_routes, "exchange_code_for_userinfo", fail)

    response = _callback(client, code="auth-code", state=create_oauth_state())

    location = urlparse(response.headers["location"])
    assert location.path == "/auth/error"
    assert parse_qs(location.query)["message"] == ["Google account has no email address"]


def test_link_oauth_account_is_idempotent(db):
    first = link_oauth_account(db, "google-9", "sam@example.com", "Sam", None)
    second = link_oauth_account(db, "google-9", "sam@example.com", "Sam", None)

    assert first.id == second.id
    assert first.name == "Sam"
    assert db.query(User).count() == 1
