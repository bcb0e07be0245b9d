"""
Session resolution and cookie transport.

A session is a pair of signed credentials carried in two HttpOnly cookies:
a short-lived access token and a long-lived refresh token. Resolution tries
the access slot first and falls back to the refresh slot within the same
request. Every successful resolution re-reads the user row, so a deleted
account stops resolving even while its tokens are still valid.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from fastapi import Request, Response
from sqlalchemy.orm import Session

from app.core.config import ACCESS_COOKIE_NAME, REFRESH_COOKIE_NAME, IS_PRODUCTION
from app.core.errors import UnauthenticatedError
from app.core.messages import message
from app.core.security import (
    ACCESS_TOKEN_TTL,
    REFRESH_TOKEN_TTL,
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    principal_claims,
    verify_token,
)
from app.db.models.user import User

logger = logging.getLogger(__name__)

ACCESS_COOKIE_MAX_AGE = int(ACCESS_TOKEN_TTL.total_seconds())    # 900
REFRESH_COOKIE_MAX_AGE = int(REFRESH_TOKEN_TTL.total_seconds())  # 604800


@dataclass(frozen=True)
class TransportTokens:
    """Raw credential strings as received; either slot may be empty."""
    access: Optional[str] = None
    refresh: Optional[str] = None


@dataclass(frozen=True)
class SessionTokens:
    """Credential pair issued for one session."""
    access: str
    refresh: str


def tokens_from_request(request: Request) -> TransportTokens:
    return TransportTokens(
        access=request.cookies.get(ACCESS_COOKIE_NAME) or None,
        refresh=request.cookies.get(REFRESH_COOKIE_NAME) or None,
    )


def get_user_by_subject(db: Session, subject: str) -> Optional[User]:
    """Look up the user a token subject names. Non-numeric subjects name nobody."""
    if not subject or not subject.isdigit():
        return None
    return db.query(User).filter(User.id == int(subject)).first()


def _resolve_slot(
    db: Session,
    token: Optional[str],
    token_type: str,
    now: Optional[datetime],
) -> Optional[User]:
    if not token:
        return None
    claims = verify_token(token, expected_type=token_type, now=now)
    if claims is None:
        return None
    user = get_user_by_subject(db, claims.sub)
    if user is None:
        logger.info(f"Valid {token_type} token for missing user: sub={claims.sub}")
    return user


def resolve_principal(
    db: Session,
    tokens: TransportTokens,
    now: Optional[datetime] = None,
) -> Optional[User]:
    """
    Resolve the caller from the two credential slots.

    1. Access token verifies and its user exists: that user.
    2. Otherwise refresh token verifies and its user exists: that user.
    3. Otherwise None.

    Credential problems never raise; an unusable slot is treated as empty.
    """
    user = _resolve_slot(db, tokens.access, ACCESS_TOKEN_TYPE, now)
    if user is not None:
        return user
    return _resolve_slot(db, tokens.refresh, REFRESH_TOKEN_TYPE, now)


def _cookie_options() -> dict:
    if IS_PRODUCTION:
        return {"httponly": True, "secure": True, "samesite": "none", "path": "/"}
    return {"httponly": True, "secure": False, "samesite": "lax", "path": "/"}


def issue_session_tokens(user: User, now: Optional[datetime] = None) -> SessionTokens:
    """Both tokens are issued from the same claim set."""
    claims = principal_claims(user)
    return SessionTokens(
        access=create_access_token(claims, now=now),
        refresh=create_refresh_token(claims, now=now),
    )


def set_session_cookies(response: Response, tokens: SessionTokens) -> None:
    options = _cookie_options()
    response.set_cookie(ACCESS_COOKIE_NAME, tokens.access, max_age=ACCESS_COOKIE_MAX_AGE, **options)
    response.set_cookie(REFRESH_COOKIE_NAME, tokens.refresh, max_age=REFRESH_COOKIE_MAX_AGE, **options)


def begin_session(response: Response, user: User, now: Optional[datetime] = None) -> SessionTokens:
    """Issue a fresh credential pair for user and bind it to the response cookies."""
    tokens = issue_session_tokens(user, now=now)
    set_session_cookies(response, tokens)
    logger.info(f"Session started: user_id={user.id}, role={user.role}")
    return tokens


def end_session(response: Response) -> None:
    """
    Clear both cookies.

    Tokens already handed out stay valid until they expire; there is no
    server-side revocation list.
    """
    options = _cookie_options()
    response.delete_cookie(ACCESS_COOKIE_NAME, **options)
    response.delete_cookie(REFRESH_COOKIE_NAME, **options)


def refresh_session(
    db: Session,
    response: Response,
    refresh_token: Optional[str],
    now: Optional[datetime] = None,
) -> User:
    """
    Rotate the session from a refresh token.

    The user is re-read and both tokens are reissued, so every refresh extends
    the session window (sliding expiration). Older tokens are not revoked.

    Raises:
        UnauthenticatedError: token missing or invalid, or its user is gone
    """
    if not refresh_token:
        raise UnauthenticatedError()

    claims = verify_token(refresh_token, expected_type=REFRESH_TOKEN_TYPE, now=now)
    if claims is None:
        raise UnauthenticatedError(message("session_expired"))

    user = get_user_by_subject(db, claims.sub)
    if user is None:
        raise UnauthenticatedError(message("user_not_found"))

    set_session_cookies(response, issue_session_tokens(user, now=now))
    logger.info(f"Session refreshed: user_id={user.id}")
    return user
