"""
Account service: registration, credential checks, profile edits and the
admin-side user management the admin routes expose.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import ADMIN_EMAIL, ADMIN_USERNAME, ADMIN_PASSWORD
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.core.messages import message
from app.core.roles import Role, SELF_SERVICE_ROLES, parse_role
from app.core.security import hash_password, verify_password
from app.db.models.job import Job
from app.db.models.subscription import Subscription
from app.db.models.user import User

logger = logging.getLogger(__name__)

DRIVER_PROFILE_FIELDS = ("location", "experience", "categories", "bio", "phone", "work_zone")
OWNER_PROFILE_FIELDS = ("company_name", "phone")
ADMIN_USER_FIELDS = ("role", "verified", "name", "phone", "company_name", "license_category")
ADMIN_DRIVER_FIELDS = DRIVER_PROFILE_FIELDS + ("verified", "trips")

_STRIPPED_FIELDS = {
    "name", "phone", "company_name", "license_category", "location", "experience", "work_zone",
}


def normalize_identifier(value: Optional[str]) -> str:
    """Emails and usernames are stored lower-cased and trimmed."""
    return (value or "").strip().lower()


def _clean_updates(updates: Dict[str, Any], allowed) -> Dict[str, Any]:
    cleaned = {}
    for field in allowed:
        if field not in updates or updates[field] is None:
            continue
        value = updates[field]
        if field in _STRIPPED_FIELDS and isinstance(value, str):
            value = value.strip()
        if field == "categories":
            value = [str(c) for c in value]
        cleaned[field] = value
    return cleaned


def _apply(db: Session, user: User, changes: Dict[str, Any]) -> User:
    for field, value in changes.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    return user


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise NotFoundError("user_not_found")
    return user


def register_user(
    db: Session,
    email: str,
    password: str,
    name: str,
    role: str,
    license_category: Optional[str] = None,
    company_name: Optional[str] = None,
) -> User:
    """
    Create a driver or owner account.

    Raises:
        ValidationError: role is not driver or owner
        ConflictError: email already registered
    """
    parsed = parse_role(role)
    if parsed not in SELF_SERVICE_ROLES:
        raise ValidationError(message("invalid_role"), code="invalid_role")

    email = normalize_identifier(email)
    if db.query(User).filter(User.email == email).first():
        raise ConflictError(message("email_taken"), code="email_taken")

    user = User(
        email=email,
        password_hash=hash_password(password),
        name=name.strip(),
        role=parsed.value,
        license_category=(license_category or "").strip() or None,
        company_name=(company_name or "").strip() or None,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        db.rollback()
        raise ConflictError(message("email_taken"), code="email_taken")
    db.refresh(user)

    logger.info(f"User registered: id={user.id}, role={user.role}")
    return user


def authenticate(db: Session, identifier: str, password: str, role: Optional[Role] = None) -> Optional[User]:
    """
    Match identifier (email or username) and password.

    Returns:
        The user, or None on any mismatch. Callers do not learn which part failed.
    """
    key = normalize_identifier(identifier)
    if not key:
        return None

    query = db.query(User).filter(or_(User.email == key, User.username == key))
    if role is not None:
        query = query.filter(User.role == role.value)
    user = query.first()

    if user is None or not verify_password(password, user.password_hash):
        logger.warning(f"Failed login attempt: role={role.value if role else 'any'}")
        return None
    return user


def upsert_admin(db: Session, email: str, username: str, password: str, name: Optional[str] = None) -> User:
    """
    Create the admin account, or take over the account holding email or username.

    The matched account is promoted to admin and its password replaced.
    """
    email = normalize_identifier(email)
    username = normalize_identifier(username)

    admin = db.query(User).filter(or_(User.email == email, User.username == username)).first()
    if admin is None:
        admin = User(email=email, role=Role.ADMIN.value)
        db.add(admin)

    admin.email = email
    admin.username = username
    admin.name = (name or "").strip() or "Admin"
    admin.role = Role.ADMIN.value
    admin.password_hash = hash_password(password)

    try:
        db.commit()
    except IntegrityError:
        # email and username belong to two different accounts
        db.rollback()
        raise ConflictError(message("username_taken"), code="username_taken")
    db.refresh(admin)

    logger.info(f"Admin ensured: id={admin.id}, username={admin.username}")
    return admin


def ensure_admin_user(db: Session) -> Optional[User]:
    """Upsert the admin named by ADMIN_EMAIL / ADMIN_USERNAME / ADMIN_PASSWORD, if all are set."""
    if not (ADMIN_EMAIL and ADMIN_USERNAME and ADMIN_PASSWORD):
        logger.info("Admin ensure skipped: ADMIN_EMAIL/ADMIN_USERNAME/ADMIN_PASSWORD not set")
        return None
    return upsert_admin(db, ADMIN_EMAIL, ADMIN_USERNAME, ADMIN_PASSWORD)


def update_own_profile(db: Session, user: User, updates: Dict[str, Any]) -> User:
    """
    Self-service profile edit.

    Drivers may change their driver profile fields, owners their company name
    and phone. Anything else in updates is ignored.
    """
    role = parse_role(user.role)
    if role == Role.DRIVER:
        allowed = DRIVER_PROFILE_FIELDS
    elif role == Role.OWNER:
        allowed = OWNER_PROFILE_FIELDS
    else:
        allowed = ()
    return _apply(db, user, _clean_updates(updates, allowed))


def list_users(db: Session, q: Optional[str] = None, role: Optional[str] = None, limit: int = 500) -> List[User]:
    query = db.query(User)
    if role and role != "all":
        query = query.filter(User.role == role)
    if q:
        pattern = f"%{q.strip()}%"
        query = query.filter(or_(
            User.email.ilike(pattern),
            User.name.ilike(pattern),
            User.username.ilike(pattern),
        ))
    return query.order_by(User.created_at.desc(), User.id.desc()).limit(limit).all()


def admin_update_user(db: Session, user_id: int, updates: Dict[str, Any]) -> User:
    user = get_user(db, user_id)
    changes = _clean_updates(updates, ADMIN_USER_FIELDS)
    if "role" in changes:
        role = parse_role(changes["role"])
        if role is None:
            raise ValidationError(message("invalid_role"), code="invalid_role")
        changes["role"] = role.value
        if changes["role"] != user.role:
            logger.info(f"Role change: user_id={user.id}, {user.role} -> {changes['role']}")
    return _apply(db, user, changes)


def reset_password(db: Session, user_id: int, new_password: str) -> User:
    user = get_user(db, user_id)
    user.password_hash = hash_password(new_password)
    db.commit()
    logger.info(f"Password reset by admin: user_id={user.id}")
    return user


def delete_user(db: Session, user: User) -> None:
    """
    Hard delete.

    The user's subscriptions go with them and their jobs stay listed without
    an owner account, so ids reused later never inherit old quota.
    """
    user_id = user.id
    db.query(Subscription).filter(Subscription.user_id == user_id).delete(synchronize_session=False)
    db.query(Job).filter(Job.created_by == user_id).update({Job.created_by: None}, synchronize_session=False)
    db.delete(user)
    db.commit()
    logger.info(f"User deleted: user_id={user_id}")


def get_driver(db: Session, driver_id: int) -> User:
    driver = db.query(User).filter(User.id == driver_id, User.role == Role.DRIVER.value).first()
    if driver is None:
        raise NotFoundError("driver_not_found")
    return driver


def admin_update_driver(db: Session, driver_id: int, updates: Dict[str, Any]) -> User:
    driver = get_driver(db, driver_id)
    return _apply(db, driver, _clean_updates(updates, ADMIN_DRIVER_FIELDS))
