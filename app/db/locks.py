"""
Per-owner serialization for entitlement writes.

Subscription activation and job creation both read state and then write
based on it. Two requests for the same owner must not interleave between
the read and the write, so both take this lock first. The lock belongs to
the current transaction and is released on commit or rollback.
"""
import logging

from sqlalchemy import text
from sqlalchemy.orm import Session

from app.db.models.user import User

logger = logging.getLogger(__name__)

# First key of the two-int advisory lock; keeps owner locks apart from the
# migration lock and any other advisory lock users.
OWNER_LOCK_NAMESPACE = 7301


def lock_owner(db: Session, owner_id: int) -> None:
    """
    Block until this transaction holds the lock for owner_id.

    PostgreSQL: transaction-scoped advisory lock keyed by (namespace, owner_id).
    Other backends: a no-op UPDATE of the owner's user row. It opens the write
    transaction before anything is read, which takes the row lock on server
    databases and SQLite's RESERVED lock (one writer per database file).
    """
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        db.execute(
            text("SELECT pg_advisory_xact_lock(:namespace, :owner_id)"),
            {"namespace": OWNER_LOCK_NAMESPACE, "owner_id": owner_id},
        )
    else:
        # Setting updated_at to itself keeps its onupdate default from firing
        db.query(User).filter(User.id == owner_id).update(
            {User.updated_at: User.updated_at}, synchronize_session=False
        )
    logger.debug(f"Owner lock acquired: owner_id={owner_id}, dialect={dialect}")
