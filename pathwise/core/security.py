import logging
import secrets
import bcrypt
from passlib.context import CryptContext
from datetime import datetime, timedelta
from typing import Optional
from jose import jwt, JWTError
from pathwise.core.config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_DAYS

logger = logging.getLogger(__name__)

# passlib is kept only to verify hashes written by older deployments;
# new hashes go through bcrypt directly
try:
    pwd_context = CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
    )
    logger.debug("Password context initialized")
except Exception as e:
    logger.warning(f"Failed to initialize passlib context: {e}, using bcrypt directly")
    pwd_context = None

BCRYPT_MAX_BYTES = 72


def _truncate_password_bytes(password: str) -> bytes:
    """Encode password and cut it to bcrypt's 72 byte limit on a UTF-8 boundary."""
    password_bytes = password.encode("utf-8")
    if len(password_bytes) <= BCRYPT_MAX_BYTES:
        return password_bytes

    logger.warning("Password exceeds 72 bytes, truncating before hashing (validation should have caught this)")
    truncated = password_bytes[:BCRYPT_MAX_BYTES]
    # Drop a partial trailing multi-byte character, if any
    return truncated.decode("utf-8", errors="ignore").encode("utf-8")


def hash_password(password: str) -> str:
    """
    Hash a password with bcrypt.

    Args:
        password: Plain text password (max 72 bytes in UTF-8)

    Returns:
        Hashed password string (bcrypt format compatible with passlib)

    Raises:
        ValueError: If the password cannot be hashed
    """
    try:
        password_bytes = _truncate_password_bytes(password)
        return bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=12)).decode("utf-8")
    except Exception as e:
        logger.error(f"Password hashing failed: {e}", exc_info=True)
        raise ValueError("Invalid password") from e


def verify_password(password: str, hashed: Optional[str]) -> bool:
    """
    Verify a password against its hash.

    OAuth-only accounts have no hash and never verify.
    """
    if not hashed:
        return False
    try:
        password_bytes = _truncate_password_bytes(password)
        try:
            return bcrypt.checkpw(password_bytes, hashed.encode("utf-8"))
        except (ValueError, TypeError):
            if pwd_context:
                return pwd_context.verify(password, hashed)
            return False
    except Exception as e:
        logger.error(f"Password verification failed: {e}", exc_info=True)
        return False


def create_access_token(data: dict, expires_delta: timedelta = None) -> str:
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Decode and verify a JWT. Raises JWTError on bad signature or expiry."""
    return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])


def create_session_token(user) -> str:
    """Issue the login token carrying the user's identity claims."""
    return create_access_token({
        "sub": str(user.id),
        "email": user.email,
        "name": user.name,
        "avatar": user.avatar,
        "provider": user.provider,
    })


def create_oauth_state() -> str:
    """Short-lived signed value for the OAuth `state` round trip."""
    return create_access_token(
        {"purpose": "oauth_state", "nonce": secrets.token_urlsafe(8)},
        expires_delta=timedelta(minutes=10),
    )


def verify_oauth_state(state: Optional[str]) -> bool:
    if not state:
        return False
    try:
        payload = decode_access_token(state)
    except JWTError:
        return False
    return payload.get("purpose") == "oauth_state"


def generate_one_time_token() -> str:
    """Random URL-safe token for email verification and password reset links."""
    return secrets.token_urlsafe(32)
