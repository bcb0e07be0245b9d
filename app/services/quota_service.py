"""
Job quota service.

Job creation counts the owner's existing jobs against the active
subscription's limit and inserts the new job inside one transaction, holding
the per-owner lock throughout, so two concurrent posts near the limit cannot
both pass the check.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from app.core.errors import AppError
from app.core.gating import check_job_quota, count_owner_jobs
from app.core.plan_limits import UNLIMITED_JOBS
from app.db.locks import lock_owner
from app.db.models.job import Job
from app.db.models.user import User
from app.services.subscription_service import get_active_subscription

logger = logging.getLogger(__name__)

JOB_FIELDS = ("title", "route", "price", "type", "date", "description", "requirements", "phone")


def owner_display_name(owner: User) -> str:
    return owner.company_name or owner.name


def create_job_within_quota(
    db: Session,
    owner: User,
    data: Dict[str, Any],
    now: Optional[datetime] = None,
) -> Job:
    """
    Create a job for owner if the active subscription still has room.

    Args:
        db: Database session
        owner: Owner user
        data: Job fields (title, route, price, type, date, description, requirements, phone)
        now: Instant used for the subscription expiry check

    Returns:
        The created Job

    Raises:
        SubscriptionRequiredError: no active subscription
        QuotaExceededError: limit reached
    """
    lock_owner(db, owner.id)
    try:
        decision = check_job_quota(db, owner, now=now)
    except AppError:
        # Release the lock before the error reaches the client
        db.rollback()
        raise

    job = Job(
        **{field: data[field] for field in JOB_FIELDS if data.get(field) is not None},
        owner=owner_display_name(owner),
        created_by=owner.id,
    )
    db.add(job)
    db.commit()
    db.refresh(job)

    logger.info(
        f"Job created: id={job.id}, owner_id={owner.id}, "
        f"used={decision.used + 1}/{decision.subscription.job_limit}"
    )
    return job


def get_quota_summary(db: Session, owner: User, now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Quota numbers for the owner's current subscription.

    Returns:
        Dictionary with plan, limit, used, remaining, unlimited and expires_at.
        Without an active subscription plan and limit are None and remaining is 0.
    """
    used = count_owner_jobs(db, owner.id)
    subscription = get_active_subscription(db, owner.id, now=now)
    if subscription is None:
        return {
            "plan": None,
            "limit": None,
            "used": used,
            "remaining": 0,
            "unlimited": False,
            "expires_at": None,
        }

    return {
        "plan": subscription.plan,
        "limit": subscription.job_limit,
        "used": used,
        "remaining": max(0, subscription.job_limit - used),
        "unlimited": subscription.job_limit >= UNLIMITED_JOBS,
        "expires_at": subscription.expires_at,
    }
