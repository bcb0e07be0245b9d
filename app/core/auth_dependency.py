from fastapi import Depends, Request
from sqlalchemy.orm import Session
from app.core.errors import ForbiddenError, UnauthenticatedError
from app.core.messages import message
from app.core.roles import ANY_AUTHENTICATED, Role, authorize
from app.core.session import resolve_principal, tokens_from_request
from app.db.session import SessionLocal
from app.db.models.user import User


def get_db():
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_optional_user(request: Request, db: Session = Depends(get_db)):
    """Resolve the caller from session cookies; None for anonymous callers."""
    return resolve_principal(db, tokens_from_request(request))


def _enforce(user, required, forbidden_key: str = "forbidden") -> User:
    decision = authorize(user, required)
    if decision.allowed:
        return user
    if decision.reason == "unauthenticated":
        raise UnauthenticatedError()
    raise ForbiddenError(message(forbidden_key))


def get_current_user(user=Depends(get_optional_user)) -> User:
    """Resolved caller of any role. 401 when anonymous."""
    return _enforce(user, ANY_AUTHENTICATED)


def require_role(*roles: Role, forbidden_key: str = "forbidden"):
    """
    Dependency factory admitting only the listed roles.

    401 for anonymous callers, 403 for any other role. forbidden_key picks
    the message of the 403.
    """
    allowed = frozenset(roles)

    def dependency(user=Depends(get_optional_user)) -> User:
        return _enforce(user, allowed, forbidden_key)

    return dependency


require_admin = require_role(Role.ADMIN)
require_owner = require_role(Role.OWNER, forbidden_key="owners_only")
require_driver = require_role(Role.DRIVER)
