"""
Unit tests for directory gates, job quota and quota-checked job creation.
"""
from datetime import datetime, timedelta, timezone

import pytest

from app.core.errors import DriverGateError, QuotaExceededError, SubscriptionRequiredError
from app.core.gating import can_post_job, can_view_driver_directory, check_job_quota, check_subscription_gate
from app.db.models.job import Job
from app.services.quota_service import create_job_within_quota, get_quota_summary
from app.services.subscription_service import activate_for_plan

JOB = {"title": "Cargo", "route": "Tbilisi - Batumi", "price": "500 GEL", "type": "Tent", "date": "2026-03-01"}


def test_anonymous_gets_preview(db):
    decision = can_view_driver_directory(db, None)
    assert decision.allowed
    assert decision.preview


def test_driver_is_always_denied(db, driver):
    assert can_view_driver_directory(db, driver).gate == "driver"

    # Even a subscription row on the driver's account changes nothing
    activate_for_plan(db, driver, "corporate")
    decision = can_view_driver_directory(db, driver)
    assert not decision.allowed
    assert decision.gate == "driver"

    with pytest.raises(DriverGateError) as exc_info:
        check_subscription_gate(db, driver)
    assert exc_info.value.to_dict()["gate"] == "driver"


def test_owner_needs_active_subscription(db, owner):
    decision = can_view_driver_directory(db, owner)
    assert not decision.allowed
    assert decision.gate == "no_subscription"

    activate_for_plan(db, owner, "starter")
    decision = can_view_driver_directory(db, owner)
    assert decision.allowed
    assert not decision.preview


def test_lapsed_subscription_closes_the_gate(db, owner):
    activate_for_plan(db, owner, "starter", now=datetime.now(timezone.utc) - timedelta(days=31))
    with pytest.raises(SubscriptionRequiredError) as exc_info:
        check_subscription_gate(db, owner)
    body = exc_info.value.to_dict()
    assert body["gate"] == "no_subscription"
    assert body["code"] == "no_subscription"


def test_admin_is_allowed(db, admin):
    decision = can_view_driver_directory(db, admin)
    assert decision.allowed
    assert not decision.preview


def test_can_post_job_requires_subscription(db, owner):
    decision = can_post_job(db, owner)
    assert not decision.allowed
    assert decision.gate == "no_subscription"


def test_can_post_job_counts_against_limit(db, owner):
    activate_for_plan(db, owner, "starter")
    for _ in range(2):
        assert can_post_job(db, owner).allowed
        db.add(Job(created_by=owner.id, owner="x", **JOB))
        db.commit()

    decision = can_post_job(db, owner)
    assert not decision.allowed
    assert decision.gate == "quota_exceeded"

    with pytest.raises(QuotaExceededError) as exc_info:
        check_job_quota(db, owner)
    body = exc_info.value.to_dict()
    assert body["reason"] == "quota_exceeded"
    assert body["limit"] == 2
    assert body["used"] == 2
    assert body["remaining"] == 0
    assert body["plan"] == "starter"


def test_driver_cannot_post_jobs(db, driver):
    assert can_post_job(db, driver).gate == "forbidden"


def test_create_job_within_quota_stops_at_limit(db, owner):
    activate_for_plan(db, owner, "starter")

    first = create_job_within_quota(db, owner, dict(JOB, phone="555"))
    create_job_within_quota(db, owner, JOB)
    with pytest.raises(QuotaExceededError):
        create_job_within_quota(db, owner, JOB)

    assert db.query(Job).filter(Job.created_by == owner.id).count() == 2
    assert first.owner == "Kartli Logistics"
    assert first.phone == "555"


def test_create_job_without_subscription(db, owner):
    with pytest.raises(SubscriptionRequiredError) as exc_info:
        create_job_within_quota(db, owner, JOB)
    assert exc_info.value.to_dict()["reason"] == "no_subscription"
    assert db.query(Job).count() == 0


def test_upgrade_restores_room(db, owner):
    activate_for_plan(db, owner, "starter")
    create_job_within_quota(db, owner, JOB)
    create_job_within_quota(db, owner, JOB)

    activate_for_plan(db, owner, "business")
    create_job_within_quota(db, owner, JOB)
    assert get_quota_summary(db, owner)["used"] == 3


def test_quota_summary(db, owner):
    summary = get_quota_summary(db, owner)
    assert summary["plan"] is None
    assert summary["remaining"] == 0

    activate_for_plan(db, owner, "starter")
    create_job_within_quota(db, owner, JOB)
    summary = get_quota_summary(db, owner)
    assert summary["plan"] == "starter"
    assert summary["limit"] == 2
    assert summary["used"] == 1
    assert summary["remaining"] == 1
    assert summary["unlimited"] is False

    activate_for_plan(db, owner, "corporate")
    assert get_quota_summary(db, owner)["unlimited"] is True
