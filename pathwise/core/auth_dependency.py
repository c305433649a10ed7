from typing import Optional
from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.orm import Session
from pathwise.core.security import decode_access_token
from pathwise.db.session import SessionLocal
from pathwise.db.models.user import User

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def get_db():
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(token: Optional[str] = Depends(oauth2_scheme)) -> dict:
    """Validate the bearer token and return its identity claims."""
    if not token:
        raise HTTPException(status_code=401, detail="No token provided")

    try:
        payload = decode_access_token(token)
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")

    if payload.get("sub") is None or payload.get("purpose"):
        # OAuth state tokens share the signing key but are not sessions
        raise HTTPException(status_code=401, detail="Invalid token")

    return payload


def get_current_user_obj(
    claims: dict = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> User:
    """Get current User object from JWT token."""
    try:
        user_id = int(claims["sub"])
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        # token outlived its account
        raise HTTPException(status_code=401, detail="Invalid token")
    return user
