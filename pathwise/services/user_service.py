"""
Account lifecycle: registration, password login, email verification,
password reset and OAuth account linking.

Functions take the request's Session and commit their own changes.
Failures a client can cause raise AuthError carrying the HTTP status.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from pathwise.core import config
from pathwise.core.security import hash_password, verify_password, generate_one_time_token
from pathwise.db.models.user import User, PROVIDER_EMAIL, PROVIDER_GOOGLE
from pathwise.services.email_service import (
    EmailDeliveryError,
    send_verification_email,
    send_password_reset_email,
)

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Client-facing authentication failure."""

    def __init__(self, message: str, status_code: int = 400, **extra):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.extra = extra

    @property
    def detail(self) -> dict:
        return {"message": self.message, **self.extra}


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def _issue_verification_token(user: User) -> str:
    token = generate_one_time_token()
    user.email_verification_token = token
    user.email_verification_expires = datetime.utcnow() + timedelta(hours=config.EMAIL_VERIFICATION_TTL_HOURS)
    return token


def register_user(db: Session, email: str, password: str, name: str) -> User:
    """
    Create an unverified email/password account and send its verification link.

    Raises:
        AuthError: 400 if the email is already registered
    """
    email = normalize_email(email)
    if get_user_by_email(db, email):
        raise AuthError("User already exists with this email", 400)

    user = User(
        email=email,
        password_hash=hash_password(password),
        name=name,
        provider=PROVIDER_EMAIL,
        is_email_verified=False,
    )
    token = _issue_verification_token(user)

    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except Exception:
        db.rollback()
        # a concurrent signup can win the unique constraint race
        if get_user_by_email(db, email):
            raise AuthError("User already exists with this email", 400)
        raise

    logger.info(f"User registered: user_id={user.id}")

    try:
        send_verification_email(user.email, token, user.name)
    except EmailDeliveryError as e:
        logger.error(f"Verification email failed for user_id={user.id}: {e}")

    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    """
    Check email/password credentials and record the login.

    Only verified accounts of provider "email" can log in with a password.

    Raises:
        AuthError: 401 on bad credentials or unverified email
    """
    user = get_user_by_email(db, email)
    if not user or user.provider != PROVIDER_EMAIL:
        raise AuthError("Invalid email or password", 401)

    if not verify_password(password, user.password_hash):
        raise AuthError("Invalid email or password", 401)

    if not user.is_email_verified:
        raise AuthError("Please verify your email before logging in", 401, needs_verification=True)

    user.last_login = datetime.utcnow()
    db.commit()
    db.refresh(user)
    logger.info(f"User logged in: user_id={user.id}")
    return user


def verify_email_token(db: Session, token: str) -> User:
    """Mark the account owning an unexpired verification token as verified."""
    user = db.query(User).filter(
        User.email_verification_token == token,
        User.email_verification_expires > datetime.utcnow(),
    ).first()
    if not user:
        raise AuthError("Invalid or expired verification token", 400)

    user.is_email_verified = True
    user.email_verification_token = None
    user.email_verification_expires = None
    db.commit()
    logger.info(f"Email verified: user_id={user.id}")
    return user


def resend_verification(db: Session, email: str) -> None:
    """
    Issue a fresh verification token and email it.

    Raises:
        AuthError: 404 unknown account, 400 already verified, 500 mail failure
    """
    user = get_user_by_email(db, email)
    if not user or user.provider != PROVIDER_EMAIL:
        raise AuthError("User not found", 404)
    if user.is_email_verified:
        raise AuthError("Email is already verified", 400)

    token = _issue_verification_token(user)
    db.commit()

    try:
        send_verification_email(user.email, token, user.name)
    except EmailDeliveryError:
        raise AuthError("Failed to send verification email", 500)


def request_password_reset(db: Session, email: str) -> None:
    """
    Issue a one-hour reset token for an email/password account.

    Silent for unknown or OAuth accounts so callers cannot probe which
    emails are registered.
    """
    user = get_user_by_email(db, email)
    if not user or user.provider != PROVIDER_EMAIL:
        logger.info("Password reset requested for unknown or non-email account")
        return

    token = generate_one_time_token()
    user.password_reset_token = token
    user.password_reset_expires = datetime.utcnow() + timedelta(hours=config.PASSWORD_RESET_TTL_HOURS)
    db.commit()

    try:
        send_password_reset_email(user.email, token, user.name)
    except EmailDeliveryError as e:
        logger.error(f"Password reset email failed for user_id={user.id}: {e}")


def reset_password(db: Session, token: str, new_password: str) -> User:
    user = db.query(User).filter(
        User.password_reset_token == token,
        User.password_reset_expires > datetime.utcnow(),
    ).first()
    if not user:
        raise AuthError("Invalid or expired reset token", 400)

    user.password_hash = hash_password(new_password)
    user.password_reset_token = None
    user.password_reset_expires = None
    db.commit()
    logger.info(f"Password reset: user_id={user.id}")
    return user


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    if user.provider != PROVIDER_EMAIL:
        raise AuthError("User not found or not using email authentication", 404)
    if not verify_password(current_password, user.password_hash):
        raise AuthError("Current password is incorrect", 401)

    user.password_hash = hash_password(new_password)
    db.commit()
    logger.info(f"Password changed: user_id={user.id}")


def link_oauth_account(
    db: Session,
    google_id: str,
    email: str,
    name: Optional[str] = None,
    avatar: Optional[str] = None,
) -> User:
    """
    Find or create the account for a Google identity.

    An existing email account is linked: it adopts the Google id, switches
    provider to google, becomes verified and takes the Google avatar.
    """
    email = normalize_email(email)
    user = db.query(User).filter(User.google_id == google_id).first()
    if not user:
        user = get_user_by_email(db, email)

    if not user:
        user = User(
            email=email,
            name=name or email.split("@")[0],
            avatar=avatar,
            provider=PROVIDER_GOOGLE,
            google_id=google_id,
            is_email_verified=True,
        )
        db.add(user)
        logger.info("Creating account from Google sign-in")
    elif not user.google_id:
        user.google_id = google_id
        user.provider = PROVIDER_GOOGLE
        user.is_email_verified = True
        if avatar:
            user.avatar = avatar
        logger.info(f"Linked Google account to user_id={user.id}")

    user.last_login = datetime.utcnow()
    db.commit()
    db.refresh(user)
    return user
