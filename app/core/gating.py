"""
Entitlement gates.

Decides who may read the driver directory and who may post jobs, based on
role and the caller's active subscription. The can_* functions return a
GateDecision and never raise; the check_* functions raise the matching
ForbiddenError subclass so routes can call them as one-liners.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import DriverGateError, ForbiddenError, QuotaExceededError, SubscriptionRequiredError
from app.core.roles import Role, parse_role
from app.db.models.job import Job
from app.db.models.subscription import Subscription
from app.db.models.user import User
from app.services.subscription_service import get_active_subscription

logger = logging.getLogger(__name__)

GATE_DRIVER = "driver"
GATE_NO_SUBSCRIPTION = "no_subscription"
REASON_QUOTA_EXCEEDED = "quota_exceeded"
REASON_FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class GateDecision:
    allowed: bool
    gate: Optional[str] = None
    preview: bool = False
    subscription: Optional[Subscription] = None
    used: Optional[int] = None


def count_owner_jobs(db: Session, owner_id: int) -> int:
    """Jobs ever created by owner that still exist."""
    return db.query(Job).filter(Job.created_by == owner_id).count()


def can_view_driver_directory(
    db: Session,
    principal: Optional[User],
    now: Optional[datetime] = None,
) -> GateDecision:
    """
    Directory access for principal.

    - anonymous: allowed in preview mode
    - driver: denied with gate "driver", whatever their subscriptions
    - owner: allowed with an active subscription, else gate "no_subscription"
    - admin: allowed
    """
    if principal is None:
        return GateDecision(allowed=True, preview=True)

    role = parse_role(principal.role)
    if role == Role.DRIVER:
        return GateDecision(allowed=False, gate=GATE_DRIVER)
    if role == Role.ADMIN:
        return GateDecision(allowed=True)
    if role == Role.OWNER:
        subscription = get_active_subscription(db, principal.id, now=now)
        if subscription is None:
            return GateDecision(allowed=False, gate=GATE_NO_SUBSCRIPTION)
        return GateDecision(allowed=True, subscription=subscription)
    return GateDecision(allowed=False, gate=REASON_FORBIDDEN)


def can_post_job(db: Session, owner: User, now: Optional[datetime] = None) -> GateDecision:
    """
    Job posting entitlement for owner.

    Requires an active subscription and fewer existing jobs than its limit.
    Only owners post jobs.
    """
    if parse_role(owner.role) != Role.OWNER:
        return GateDecision(allowed=False, gate=REASON_FORBIDDEN)

    subscription = get_active_subscription(db, owner.id, now=now)
    if subscription is None:
        return GateDecision(allowed=False, gate=GATE_NO_SUBSCRIPTION)

    used = count_owner_jobs(db, owner.id)
    if used >= subscription.job_limit:
        return GateDecision(allowed=False, gate=REASON_QUOTA_EXCEEDED, subscription=subscription, used=used)
    return GateDecision(allowed=True, subscription=subscription, used=used)


def check_subscription_gate(
    db: Session,
    principal: Optional[User],
    now: Optional[datetime] = None,
) -> GateDecision:
    """
    Enforce directory access.

    Returns the decision when allowed (preview flag included).

    Raises:
        DriverGateError: principal is a driver
        SubscriptionRequiredError: owner without an active subscription
        ForbiddenError: any other denial
    """
    decision = can_view_driver_directory(db, principal, now=now)
    if decision.allowed:
        return decision

    logger.warning(f"Directory gate denied: user_id={principal.id}, gate={decision.gate}")
    if decision.gate == GATE_DRIVER:
        raise DriverGateError()
    if decision.gate == GATE_NO_SUBSCRIPTION:
        raise SubscriptionRequiredError()
    raise ForbiddenError()


def check_job_quota(db: Session, owner: User, now: Optional[datetime] = None) -> GateDecision:
    """
    Enforce job posting entitlement.

    Raises:
        SubscriptionRequiredError: no active subscription
        QuotaExceededError: job count reached the plan limit
        ForbiddenError: caller is not an owner
    """
    decision = can_post_job(db, owner, now=now)
    if decision.allowed:
        return decision

    logger.warning(
        f"Job posting denied: user_id={owner.id}, reason={decision.gate}, used={decision.used}"
    )
    if decision.gate == GATE_NO_SUBSCRIPTION:
        raise SubscriptionRequiredError("no_subscription_post")
    if decision.gate == REASON_QUOTA_EXCEEDED:
        raise QuotaExceededError(
            limit=decision.subscription.job_limit,
            used=decision.used,
            plan=decision.subscription.plan,
        )
    raise ForbiddenError()
