"""
Tests for signup, login, email verification and password flows.
"""
from datetime import datetime, timedelta

from pathwise.core.security import create_access_token, verify_password
from pathwise.db.models.user import User


def test_signup_success(client, db):
    response = client.post(
        "/auth/signup",
        json={"email": "New.User@Example.com", "password": "testpass123", "name": "  New User "},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["user"]["email"] == "new.user@example.com"
    assert data["user"]["name"] == "New User"
    assert data["user"]["is_email_verified"] is False
    assert "password_hash" not in data["user"]

    user = db.query(User).filter(User.email == "new.user@example.com").first()
    assert user is not None
    assert user.provider == "email"
    assert user.email_verification_token
    assert user.email_verification_expires > datetime.utcnow() + timedelta(hours=23)
    assert verify_password("testpass123", user.password_hash)


def test_signup_duplicate_email(client, test_user):
    response = client.post(
        "/auth/signup",
        json={"email": "JANE@example.com", "password": "testpass123", "name": "Jane Again"},
    )

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert response.json()["message"] == "User already exists with this email"


def test_signup_validation_errors(client):
    response = client.post(
        "/auth/signup",
        json={"email": "not-an-email", "password": "short", "name": "J"},
    )

    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["message"] == "Validation failed"
    fields = {error.split(":")[0] for error in data["errors"]}
    assert {"email", "password", "name"} <= fields
    assert "password: Password must be at least 8 characters long" in data["errors"]


def test_signup_password_byte_limit(client):
    ok = client.post("/auth/signup", json={"email": "a@example.com", "password": "a" * 72, "name": "Ann"})
    assert ok.status_code == 201

    # 19 four-byte characters = 76 bytes
    too_long = client.post("/auth/signup", json={"email": "b@example.com", "password": "\U0001F680" * 19, "name": "Bob"})
    assert too_long.status_code == 400
    assert "password: Password must be 72 bytes or fewer" in too_long.json()["errors"]


def test_login_success(client, test_user, db):
    response = client.post("/auth/login", json={"email": "jane@example.com", "password": "testpass123"})

    assert response.status_code == 200
    data = response.json()
    assert data["token"]
    assert data["token_type"] == "bearer"
    assert data["user"]["id"] == test_user.id

    db.expire_all()
    assert db.get(User, test_user.id).last_login is not None

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
    assert me.status_code == 200
    assert me.json()["user"]["email"] == "jane@example.com"


def test_login_wrong_password(client, test_user):
    response = client.post("/auth/login", json={"email": "jane@example.com", "password": "wrong_password"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


def test_login_unknown_email(client):
    response = client.post("/auth/login", json={"email": "nobody@example.com", "password": "whatever123"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


def test_login_unverified_account(client, user_factory):
    user_factory(email="pending@example.com", verified=False)

    response = client.post("/auth/login", json={"email": "pending@example.com", "password": "testpass123"})

    assert response.status_code == 401
    data = response.json()
    assert data["needs_verification"] is True
    assert "verify your email" in data["message"]


def test_login_rejects_google_account(client, user_factory):
    user_factory(email="g@example.com", provider="google", google_id="g-1", password=None)

    response = client.post("/auth/login", json={"email": "g@example.com", "password": "testpass123"})

    assert response.status_code == 401


def test_verify_email(client, db, user_factory):
    user = user_factory(
        email="pending@example.com",
        verified=False,
        email_verification_token="verify-me",
        email_verification_expires=datetime.utcnow() + timedelta(hours=1),
    )

    response = client.post("/auth/verify-email", json={"token": "verify-me"})
    assert response.status_code == 200

    db.expire_all()
    refreshed = db.get(User, user.id)
    assert refreshed.is_email_verified is True
    assert refreshed.email_verification_token is None

    # token is single use
    again = client.post("/auth/verify-email", json={"token": "verify-me"})
    assert again.status_code == 400


def test_verify_email_expired_token(client, user_factory):
    user_factory(
        email="late@example.com",
        verified=False,
        email_verification_token="too-late",
        email_verification_expires=datetime.utcnow() - timedelta(minutes=1),
    )

    response = client.post("/auth/verify-email", json={"token": "too-late"})

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid or expired verification token"


def test_resend_verification(client, db, user_factory):
    user = user_factory(email="pending@example.com", verified=False, email_verification_token="old")

    response = client.post("/auth/resend-verification", json={"email": "pending@example.com"})
    assert response.status_code == 200

    db.expire_all()
    assert db.get(User, user.id).email_verification_token != "old"

    assert client.post("/auth/resend-verification", json={"email": "nobody@example.com"}).status_code == 404


def test_resend_verification_already_verified(client, test_user):
    response = client.post("/auth/resend-verification", json={"email": "jane@example.com"})

    assert response.status_code == 400
    assert response.json()["message"] == "Email is already verified"


def test_forgot_password_does_not_reveal_accounts(client, db, test_user):
    known = client.post("/auth/forgot-password", json={"email": "jane@example.com"})
    unknown = client.post("/auth/forgot-password", json={"email": "nobody@example.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.json()["message"] == unknown.json()["message"]

    db.expire_all()
    user = db.get(User, test_user.id)
    assert user.password_reset_token
    assert user.password_reset_expires < datetime.utcnow() + timedelta(hours=1, minutes=1)


def test_reset_password(client, db, user_factory):
    user = user_factory(
        email="reset@example.com",
        password_reset_token="reset-me",
        password_reset_expires=datetime.utcnow() + timedelta(minutes=30),
    )

    response = client.post("/auth/reset-password", json={"token": "reset-me", "password": "brandnew123"})
    assert response.status_code == 200

    db.expire_all()
    refreshed = db.get(User, user.id)
    assert refreshed.password_reset_token is None
    assert verify_password("brandnew123", refreshed.password_hash)

    login = client.post("/auth/login", json={"email": "reset@example.com", "password": "brandnew123"})
    assert login.status_code == 200


def test_reset_password_expired_token(client, user_factory):
    user_factory(
        email="reset@example.com",
        password_reset_token="stale",
        password_reset_expires=datetime.utcnow() - timedelta(seconds=1),
    )

    response = client.post("/auth/reset-password", json={"token": "stale", "password": "brandnew123"})

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid or expired reset token"


def test_change_password(client, auth_headers):
    wrong = client.post(
        "/auth/change-password",
        json={"current_password": "not-it-123", "new_password": "brandnew123"},
        headers=auth_headers,
    )
    assert wrong.status_code == 401
    assert wrong.json()["message"] == "Current password is incorrect"

    ok = client.post(
        "/auth/change-password",
        json={"current_password": "testpass123", "new_password": "brandnew123"},
        headers=auth_headers,
    )
    assert ok.status_code == 200

    login = client.post("/auth/login", json={"email": "jane@example.com", "password": "brandnew123"})
    assert login.status_code == 200


def test_protected_route_requires_token(client):
    missing = client.get("/auth/me")
    assert missing.status_code == 401
    assert missing.json()["message"] == "No token provided"

    invalid = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert invalid.status_code == 401
    assert invalid.json()["message"] == "Invalid token"


def test_expired_token_rejected(client, test_user):
    token = create_access_token({"sub": str(test_user.id)}, expires_delta=timedelta(seconds=-1))

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_token_for_deleted_account_rejected(client, db, test_user, auth_headers):
    db.delete(test_user)
    db.commit()

    response = client.get("/auth/me", headers=auth_headers)

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token"


def test_logout(client):
    response = client.post("/auth/logout")

    assert response.status_code == 200
    assert response.json()["success"] is True
