import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from pathwise.core import config
from pathwise.core.auth_dependency import get_db, get_current_user_obj
from pathwise.core.security import create_session_token, create_oauth_state, verify_oauth_state
from pathwise.db.models.user import User
from pathwise.schemas.auth import (
    SignupRequest,
    LoginRequest,
    VerifyEmailRequest,
    EmailRequest,
    ResetPasswordRequest,
    ChangePasswordRequest,
    UserResponse,
)
from pathwise.services import user_service
from pathwise.services.user_service import AuthError
from pathwise.services.oauth_service import (
    OAuthError,
    build_google_auth_url,
    exchange_code_for_userinfo,
    is_google_configured,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

FORGOT_PASSWORD_MESSAGE = "If an account with that email exists, we have sent a password reset link."


def _raise_auth_error(e: AuthError):
    raise HTTPException(status_code=e.status_code, detail=e.detail)


def _user_payload(user: User) -> dict:
    return UserResponse.model_validate(user).model_dump(mode="json")


# ✅ USER SIGNUP
@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest, db: Session = Depends(get_db)):
    try:
        user = user_service.register_user(db, payload.email, payload.password, payload.name)
    except AuthError as e:
        _raise_auth_error(e)

    return {
        "success": True,
        "message": "Account created successfully. Please check your email to verify your account.",
        "user": _user_payload(user),
    }


# ✅ EMAIL / PASSWORD LOGIN
@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    try:
        user = user_service.authenticate_user(db, payload.email, payload.password)
    except AuthError as e:
        _raise_auth_error(e)

    return {
        "success": True,
        "message": "Login successful",
        "token": create_session_token(user),
        "token_type": "bearer",
        "user": _user_payload(user),
    }


@router.post("/logout")
def logout():
    # Tokens are stateless; the client discards its copy
    return {"success": True, "message": "Logged out successfully"}


@router.post("/verify-email")
def verify_email(payload: VerifyEmailRequest, db: Session = Depends(get_db)):
    try:
        user_service.verify_email_token(db, payload.token)
    except AuthError as e:
        _raise_auth_error(e)
    return {"success": True, "message": "Email verified successfully"}


@router.post("/resend-verification")
def resend_verification(payload: EmailRequest, db: Session = Depends(get_db)):
    try:
        user_service.resend_verification(db, payload.email)
    except AuthError as e:
        _raise_auth_error(e)
    return {"success": True, "message": "Verification email sent successfully"}


@router.post("/forgot-password")
def forgot_password(payload: EmailRequest, db: Session = Depends(get_db)):
    user_service.request_password_reset(db, payload.email)
    return {"success": True, "message": FORGOT_PASSWORD_MESSAGE}


@router.post("/reset-password")
def reset_password(payload: ResetPasswordRequest, db: Session = Depends(get_db)):
    try:
        user_service.reset_password(db, payload.token, payload.password)
    except AuthError as e:
        _raise_auth_error(e)
    return {"success": True, "message": "Password reset successfully"}


@router.post("/change-password")
def change_password(
    payload: ChangePasswordRequest,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    try:
        user_service.change_password(db, user, payload.current_password, payload.new_password)
    except AuthError as e:
        _raise_auth_error(e)
    return {"success": True, "message": "Password changed successfully"}


@router.get("/me")
def me(user: User = Depends(get_current_user_obj)):
    return {"success": True, "user": _user_payload(user)}


# ============================================
# Google OAuth
# ============================================

def _auth_error_redirect(message: str) -> RedirectResponse:
    return RedirectResponse(f"{config.FRONTEND_URL}/auth/error?{urlencode({'message': message})}")


@router.get("/google")
def google_login():
    if not is_google_configured():
        raise HTTPException(status_code=503, detail="Google sign-in is not configured")
    return RedirectResponse(build_google_auth_url(create_oauth_state()))


@router.get("/google/callback")
def google_callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    db: Session = Depends(get_db)
):
    if error or not code:
        logger.info(f"Google sign-in cancelled or failed: {error}")
        return _auth_error_redirect("Authentication failed")

    if not verify_oauth_state(state):
        logger.warning("Google callback with invalid state")
        return _auth_error_redirect("Authentication failed")

    try:
        info = exchange_code_for_userinfo(code)
        user = user_service.link_oauth_account(
            db,
            google_id=info["google_id"],
            email=info["email"],
            name=info["name"],
            avatar=info["avatar"],
        )
    except OAuthError as e:
        return _auth_error_redirect(str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Google sign-in failed: {e}", exc_info=True)
        return _auth_error_redirect("Authentication failed")

    token = create_session_token(user)
    return RedirectResponse(f"{config.FRONTEND_URL}/auth/success?{urlencode({'token': token})}")
