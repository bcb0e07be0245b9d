"""
Subscription lifecycle.

State machine per subscription:

    pending --> active | cancelled
    active  --> expired | cancelled

expired and cancelled are terminal. An owner holds at most one active
subscription: every write that can produce an active row takes the per-owner
lock, retires the owner's other rows, and inserts or promotes the new one in
the same transaction.

A subscription counts as active only while status is "active" and expires_at
is still in the future. Nothing flips rows to "expired" on a timer, so every
read that asks "is this owner subscribed" compares expires_at itself.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.errors import ConflictError, InvalidTransitionError, NotFoundError, ValidationError
from app.core.messages import message
from app.core.plan_limits import SUBSCRIPTION_PERIOD, PlanSpec, get_plan
from app.db.locks import lock_owner
from app.db.models.subscription import Subscription, SubscriptionStatus
from app.db.models.user import User

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    SubscriptionStatus.PENDING: {SubscriptionStatus.ACTIVE, SubscriptionStatus.CANCELLED},
    SubscriptionStatus.ACTIVE: {SubscriptionStatus.EXPIRED, SubscriptionStatus.CANCELLED},
    SubscriptionStatus.EXPIRED: set(),
    SubscriptionStatus.CANCELLED: set(),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _require_plan(plan_name: Optional[str]) -> PlanSpec:
    plan = get_plan(plan_name)
    if plan is None:
        raise ValidationError(message("invalid_plan"), code="invalid_plan")
    return plan


def _parse_status(value) -> SubscriptionStatus:
    try:
        return SubscriptionStatus(value)
    except ValueError:
        raise ValidationError(message("validation_error"), details={"field": "status"})


def _retire_other_subscriptions(db: Session, user_id: int, keep_id: Optional[int] = None) -> None:
    """Expire the owner's active rows and cancel pending ones. Caller holds the owner lock."""
    base = db.query(Subscription).filter(Subscription.user_id == user_id)
    if keep_id is not None:
        base = base.filter(Subscription.id != keep_id)

    expired = base.filter(
        Subscription.status == SubscriptionStatus.ACTIVE.value
    ).update({Subscription.status: SubscriptionStatus.EXPIRED.value}, synchronize_session="fetch")
    cancelled = base.filter(
        Subscription.status == SubscriptionStatus.PENDING.value
    ).update({Subscription.status: SubscriptionStatus.CANCELLED.value}, synchronize_session="fetch")

    if expired or cancelled:
        logger.info(
            f"Retired subscriptions: user_id={user_id}, expired={expired}, cancelled={cancelled}"
        )


def _commit_activation(db: Session, user_id: int) -> None:
    try:
        db.commit()
    except IntegrityError:
        # The partial unique index caught a second active row
        db.rollback()
        logger.warning(f"Activation conflict: user_id={user_id}")
        raise ConflictError(message("activation_conflict"), code="activation_conflict")


def activate_for_plan(
    db: Session,
    owner: User,
    plan_name: str,
    now: Optional[datetime] = None,
) -> Subscription:
    """
    Activate a new subscription for owner, replacing any current one.

    Under the owner lock, active rows become expired and pending rows become
    cancelled, then a new active row is inserted with expires_at = now + 30 days.
    All of it commits as one transaction.

    Args:
        db: Database session
        owner: Owner user
        plan_name: starter | business | corporate
        now: Activation instant (defaults to the current time)

    Returns:
        The new active Subscription

    Raises:
        ValidationError: unknown plan
        ConflictError: a concurrent activation committed first
    """
    plan = _require_plan(plan_name)
    now = now or _utcnow()

    lock_owner(db, owner.id)
    _retire_other_subscriptions(db, owner.id)

    subscription = Subscription(
        user_id=owner.id,
        plan=plan.name,
        status=SubscriptionStatus.ACTIVE.value,
        job_limit=plan.job_limit,
        price_gel=plan.price_gel,
        activated_at=now,
        expires_at=now + SUBSCRIPTION_PERIOD,
    )
    db.add(subscription)
    _commit_activation(db, owner.id)
    db.refresh(subscription)

    logger.info(
        f"Subscription activated: id={subscription.id}, user_id={owner.id}, plan={plan.name}"
    )
    return subscription


def create_pending_subscription(db: Session, owner: User, plan_name: str) -> Subscription:
    """Record a pending subscription, cancelling the owner's older pending rows."""
    plan = _require_plan(plan_name)

    lock_owner(db, owner.id)
    db.query(Subscription).filter(
        Subscription.user_id == owner.id,
        Subscription.status == SubscriptionStatus.PENDING.value,
    ).update({Subscription.status: SubscriptionStatus.CANCELLED.value}, synchronize_session="fetch")

    subscription = Subscription(
        user_id=owner.id,
        plan=plan.name,
        status=SubscriptionStatus.PENDING.value,
        job_limit=plan.job_limit,
        price_gel=plan.price_gel,
    )
    db.add(subscription)
    db.commit()
    db.refresh(subscription)

    logger.info(f"Subscription pending: id={subscription.id}, user_id={owner.id}, plan={plan.name}")
    return subscription


def _apply_transition(
    db: Session,
    subscription: Subscription,
    target: SubscriptionStatus,
    now: datetime,
) -> Subscription:
    lock_owner(db, subscription.user_id)
    # Re-read under the lock; another request may have moved it meanwhile
    db.refresh(subscription)

    current = SubscriptionStatus(subscription.status)
    if target not in ALLOWED_TRANSITIONS[current]:
        db.rollback()
        logger.warning(
            f"Rejected subscription transition: id={subscription.id}, {current.value} -> {target.value}"
        )
        raise InvalidTransitionError(current.value, target.value)

    if target == SubscriptionStatus.ACTIVE:
        _retire_other_subscriptions(db, subscription.user_id, keep_id=subscription.id)
        subscription.activated_at = now
        subscription.expires_at = now + SUBSCRIPTION_PERIOD

    subscription.status = target.value
    _commit_activation(db, subscription.user_id)
    db.refresh(subscription)

    logger.info(
        f"Subscription transition: id={subscription.id}, user_id={subscription.user_id}, "
        f"{current.value} -> {target.value}"
    )
    return subscription


def transition_subscription(
    db: Session,
    subscription_id: int,
    new_status: str,
    now: Optional[datetime] = None,
) -> Subscription:
    """
    Move a subscription to new_status if the state machine allows it.

    Promoting pending to active retires the owner's other subscriptions and
    stamps activated_at / expires_at, exactly like a paid activation.

    Raises:
        ValidationError: unknown status value
        NotFoundError: no such subscription
        InvalidTransitionError: transition not allowed from the current status
    """
    target = _parse_status(new_status)
    subscription = db.query(Subscription).filter(Subscription.id == subscription_id).first()
    if subscription is None:
        raise NotFoundError("subscription_not_found")
    return _apply_transition(db, subscription, target, now or _utcnow())


def cancel_subscription(db: Session, owner: User, subscription_id: int) -> Subscription:
    """Owner cancels one of their own pending or active subscriptions."""
    subscription = db.query(Subscription).filter(
        Subscription.id == subscription_id,
        Subscription.user_id == owner.id,
    ).first()
    if subscription is None:
        raise NotFoundError("subscription_not_found")
    return _apply_transition(db, subscription, SubscriptionStatus.CANCELLED, _utcnow())


def get_active_subscription(
    db: Session,
    user_id: int,
    now: Optional[datetime] = None,
) -> Optional[Subscription]:
    """Subscription with status active whose expiry is still ahead, if any."""
    now = now or _utcnow()
    return db.query(Subscription).filter(
        Subscription.user_id == user_id,
        Subscription.status == SubscriptionStatus.ACTIVE.value,
        Subscription.expires_at > now,
    ).order_by(Subscription.activated_at.desc()).first()


def list_subscriptions(
    db: Session,
    status: Optional[str] = None,
    limit: int = 500,
) -> List[Subscription]:
    """Newest first, with the owning user loaded for display."""
    query = db.query(Subscription).options(joinedload(Subscription.user))
    if status:
        query = query.filter(Subscription.status == _parse_status(status).value)
    return query.order_by(Subscription.created_at.desc(), Subscription.id.desc()).limit(limit).all()
