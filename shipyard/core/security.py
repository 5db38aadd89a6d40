"""
Security Module

Handles password hashing, session token signing and TOTP codes.
Uses industry-standard libraries (passlib with bcrypt, python-jose, pyotp).

SECURITY NOTES:
- Passwords are hashed with bcrypt (slow by design to prevent brute force)
- Session tokens are signed JWTs with an expiration and an auth type, so a
  half-finished sign in (TOTP pending, password reset) cannot be used as a
  full session
"""
from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from passlib.context import CryptContext
import pyotp
from shipyard.config import get_settings

settings = get_settings()

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Uses constant-time comparison to prevent timing attacks.
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt.

    NOTE: This is intentionally slow (100ms+ at the default cost).
    """
    return pwd_context.hash(password)


def create_session_token(
    user_id: str,
    auth_type: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a signed session token.

    Token payload includes:
    - sub: user_id
    - auth: what the session grants (see shipyard.core.session.AuthType)
    - exp: expiration timestamp
    - iat: issued at timestamp
    """
    now = datetime.utcnow()
    expire = now + (expires_delta or timedelta(minutes=settings.SESSION_EXPIRE_MINUTES))

    to_encode = {
        "sub": user_id,
        "auth": auth_type,
        "exp": expire,
        "iat": now,
    }

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )


def decode_session_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode and verify a session token.

    Returns the payload if valid, None if invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
    except JWTError:
        # Token invalid, expired, or tampered with
        return None


def generate_totp_secret() -> str:
    """Generate a fresh base32 secret for an authenticator app."""
    return pyotp.random_base32()


def totp_provisioning_uri(secret: str, email: str) -> str:
    """Build the otpauth:// URI that authenticator apps scan as a QR code."""
    return pyotp.TOTP(secret).provisioning_uri(name=email, issuer_name=settings.TOTP_ISSUER)


def verify_totp(secret: str, token: str) -> bool:
    """
    Check a TOTP code.

    One step of clock drift either way is accepted.
    """
    if not token:
        return False
    try:
        return pyotp.TOTP(secret).verify(token.strip(), valid_window=1)
    except ValueError:
        # Secret is not valid base32
        return False
