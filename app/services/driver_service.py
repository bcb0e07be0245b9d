"""
Driver directory queries.

Access to the directory is decided by app.core.gating before these run.
"""
from typing import List, Optional

from sqlalchemy import String, cast, or_
from sqlalchemy.orm import Session

from app.core.roles import Role
from app.db.models.user import User

PREVIEW_LIMIT = 8
FULL_LIMIT = 200
ADMIN_LIMIT = 500


def _categories_text():
    # categories is a JSON list; its text form looks like ["C", "CE"]
    return cast(User.categories, String)


def list_drivers(
    db: Session,
    preview: bool,
    q: Optional[str] = None,
    category: Optional[str] = None,
) -> List[User]:
    """
    Drivers ordered verified first, then by rating, then newest.

    Args:
        preview: Anonymous listing, capped at PREVIEW_LIMIT rows
        q: Substring of name, location or categories
        category: Exact licence category, matched upper-cased
    """
    query = db.query(User).filter(User.role == Role.DRIVER.value)
    if q:
        pattern = f"%{q.strip()}%"
        query = query.filter(or_(
            User.name.ilike(pattern),
            User.location.ilike(pattern),
            _categories_text().ilike(pattern),
        ))
    if category:
        query = query.filter(_categories_text().like(f'%"{category.strip().upper()}"%'))

    limit = PREVIEW_LIMIT if preview else FULL_LIMIT
    return query.order_by(
        User.verified.desc(),
        User.rating.desc(),
        User.created_at.desc(),
        User.id.desc(),
    ).limit(limit).all()


def list_drivers_for_admin(db: Session, q: Optional[str] = None) -> List[User]:
    query = db.query(User).filter(User.role == Role.DRIVER.value)
    if q:
        pattern = f"%{q.strip()}%"
        query = query.filter(or_(
            User.email.ilike(pattern),
            User.name.ilike(pattern),
            User.location.ilike(pattern),
        ))
    return query.order_by(User.created_at.desc(), User.id.desc()).limit(ADMIN_LIMIT).all()
