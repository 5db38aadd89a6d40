"""
Session Handling

A session is a signed token kept in an HttpOnly cookie. API clients that
cannot hold cookies may send the same token as a Bearer credential.

Sign in is not always a single step, so every session carries an AuthType:

    FULL            the user is signed in
    TOTP            the password was correct, the TOTP code is still due
    PASSWORD_RESET  a reset link was opened, a new password is still due

Only FULL sessions authorize regular operations. The intermediate types
are read back by the mutation that finishes the flow.
"""
from typing import Optional
import enum
import logging

from fastapi import Request, Response
from sqlalchemy.orm import Session

from shipyard.config import get_settings
from shipyard.core.security import create_session_token, decode_session_token

logger = logging.getLogger(__name__)
settings = get_settings()


class AuthType(str, enum.Enum):
    FULL = "full"
    TOTP = "totp"
    PASSWORD_RESET = "password_reset"


def sign_in(response: Response, user, auth_type: AuthType = AuthType.FULL) -> str:
    """Start a session of the given type for the user."""
    token = create_session_token(user.id, auth_type.value)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    logger.debug(f"Session started: user={user.id} auth={auth_type.value}")
    return token


def sign_out(response: Response) -> None:
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


def _session_token(request: Request) -> Optional[str]:
    """Cookie first, then Authorization: Bearer."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        return token

    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[len("Bearer "):]

    return None


def user_from_session(request: Request, db: Session, auth_type: AuthType = AuthType.FULL):
    """
    Load the user behind the request's session.

    Returns None when there is no session, the token is invalid or expired,
    or the session is of a different type than asked for.
    """
    from shipyard.models.user import User

    token = _session_token(request)
    if not token:
        return None

    payload = decode_session_token(token)
    if not payload:
        return None

    if payload.get("auth") != auth_type.value:
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None

    return db.get(User, user_id)
