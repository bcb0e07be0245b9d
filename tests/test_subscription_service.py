"""
Unit tests for the subscription lifecycle.
"""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from app.core.errors import InvalidTransitionError, NotFoundError, ValidationError
from app.db.models.subscription import Subscription
from app.services.subscription_service import (
    activate_for_plan,
    cancel_subscription,
    create_pending_subscription,
    get_active_subscription,
    list_subscriptions,
    transition_subscription,
)


def _statuses(db, user_id):
    db.expire_all()
    rows = db.query(Subscription).filter(Subscription.user_id == user_id).order_by(Subscription.id).all()
    return [row.status for row in rows]


def test_activate_creates_active_subscription_for_thirty_days(db, owner):
    sub = activate_for_plan(db, owner, "starter")

    assert sub.status == "active"
    assert sub.plan == "starter"
    assert sub.job_limit == 2
    assert sub.price_gel == 20
    assert sub.expires_at - sub.activated_at == timedelta(days=30)


def test_plan_name_is_case_insensitive(db, owner):
    assert activate_for_plan(db, owner, "Business").plan == "business"


def test_unknown_plan_is_rejected(db, owner):
    with pytest.raises(ValidationError) as exc_info:
        activate_for_plan(db, owner, "platinum")
    assert exc_info.value.code == "invalid_plan"


def test_reactivation_leaves_exactly_one_active(db, owner):
    first = activate_for_plan(db, owner, "starter")
    second = activate_for_plan(db, owner, "business")

    assert _statuses(db, owner.id) == ["expired", "active"]
    db.refresh(first)
    assert first.status == "expired"
    assert get_active_subscription(db, owner.id).id == second.id


def test_activation_cancels_pending_subscriptions(db, owner):
    pending = create_pending_subscription(db, owner, "corporate")
    activate_for_plan(db, owner, "starter")

    db.refresh(pending)
    assert pending.status == "cancelled"


def test_new_pending_cancels_older_pending(db, owner):
    create_pending_subscription(db, owner, "starter")
    create_pending_subscription(db, owner, "business")
    assert _statuses(db, owner.id) == ["cancelled", "pending"]


def test_activation_does_not_touch_other_owners(db, owner, make_user):
    other = make_user("other@example.com", role="owner")
    activate_for_plan(db, other, "starter")
    activate_for_plan(db, owner, "starter")

    assert _statuses(db, other.id) == ["active"]


def test_database_rejects_second_active_row(db, owner):
    now = datetime.now(timezone.utc)
    for _ in range(2):
        db.add(Subscription(
            user_id=owner.id, plan="starter", status="active", job_limit=2, price_gel=20,
            activated_at=now, expires_at=now + timedelta(days=30),
        ))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_lapsed_active_subscription_does_not_count(db, owner):
    long_ago = datetime.now(timezone.utc) - timedelta(days=31)
    sub = activate_for_plan(db, owner, "starter", now=long_ago)

    assert sub.status == "active"
    assert get_active_subscription(db, owner.id) is None


def test_expiry_boundary_is_exclusive(db, owner):
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    activate_for_plan(db, owner, "starter", now=start)
    end = start + timedelta(days=30)

    assert get_active_subscription(db, owner.id, now=end - timedelta(seconds=1)) is not None
    assert get_active_subscription(db, owner.id, now=end) is None


def test_pending_to_active_retires_siblings(db, owner):
    current = activate_for_plan(db, owner, "starter")
    pending = create_pending_subscription(db, owner, "business")

    promoted = transition_subscription(db, pending.id, "active")

    assert promoted.status == "active"
    assert promoted.activated_at is not None
    assert promoted.expires_at - promoted.activated_at == timedelta(days=30)
    db.refresh(current)
    assert current.status == "expired"
    assert _statuses(db, owner.id).count("active") == 1


@pytest.mark.parametrize(
    "start, target",
    [
        ("expired", "active"),
        ("expired", "cancelled"),
        ("cancelled", "active"),
        ("cancelled", "expired"),
        ("pending", "expired"),
        ("active", "pending"),
        ("active", "active"),
    ],
)
def test_disallowed_transitions(db, owner, start, target):
    sub = Subscription(user_id=owner.id, plan="starter", status=start, job_limit=2, price_gel=20)
    db.add(sub)
    db.commit()

    with pytest.raises(InvalidTransitionError) as exc_info:
        transition_subscription(db, sub.id, target)
    assert exc_info.value.status_code == 400
    assert exc_info.value.details == {"current": start, "target": target}


def test_active_to_expired_and_cancelled(db, owner, make_user):
    sub = activate_for_plan(db, owner, "starter")
    assert transition_subscription(db, sub.id, "expired").status == "expired"

    other = make_user("other@example.com", role="owner")
    sub = activate_for_plan(db, other, "starter")
    assert transition_subscription(db, sub.id, "cancelled").status == "cancelled"


def test_transition_rejects_unknown_status_and_missing_row(db, owner):
    sub = activate_for_plan(db, owner, "starter")
    with pytest.raises(ValidationError):
        transition_subscription(db, sub.id, "paused")
    with pytest.raises(NotFoundError):
        transition_subscription(db, 9999, "cancelled")


def test_owner_cancels_own_subscription_only(db, owner, make_user):
    sub = activate_for_plan(db, owner, "starter")
    other = make_user("other@example.com", role="owner")

    with pytest.raises(NotFoundError):
        cancel_subscription(db, other, sub.id)

    assert cancel_subscription(db, owner, sub.id).status == "cancelled"
    assert get_active_subscription(db, owner.id) is None

    with pytest.raises(InvalidTransitionError):
        cancel_subscription(db, owner, sub.id)


def test_list_subscriptions_filters_by_status(db, owner):
    activate_for_plan(db, owner, "starter")
    activate_for_plan(db, owner, "business")

    assert [s.plan for s in list_subscriptions(db, status="active")] == ["business"]
    assert [s.plan for s in list_subscriptions(db, status="expired")] == ["starter"]
    assert len(list_subscriptions(db)) == 2
    assert list_subscriptions(db)[0].user.email == owner.email
