"""
Subscription endpoints for owners.

Payment is a stub: POST /subscriptions/pay activates the chosen plan at once.
"""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_current_user, get_db, require_owner
from app.core.plan_limits import list_plans
from app.core.roles import Role, parse_role
from app.db.models.user import User
from app.schemas.subscription import (
    PayRequest,
    PlanListResponse,
    PlanResponse,
    SubscriptionEnvelope,
    SubscriptionResponse,
)
from app.schemas.usage import QuotaUsageResponse
from app.services.quota_service import get_quota_summary
from app.services.subscription_service import activate_for_plan, cancel_subscription, get_active_subscription

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])


@router.get("/plans", response_model=PlanListResponse)
def get_plans():
    return {
        "plans": [
            PlanResponse(name=p.name, job_limit=p.job_limit, price_gel=p.price_gel, unlimited=p.unlimited)
            for p in list_plans()
        ]
    }


@router.get("/me", response_model=SubscriptionEnvelope)
def get_my_subscription(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Active subscription of the caller. Always null for non-owners."""
    if parse_role(user.role) != Role.OWNER:
        return {"subscription": None}
    subscription = get_active_subscription(db, user.id)
    if subscription is None:
        return {"subscription": None}
    return {"subscription": SubscriptionResponse.model_validate(subscription)}


@router.get("/me/usage", response_model=QuotaUsageResponse)
def get_my_usage(user: User = Depends(require_owner), db: Session = Depends(get_db)):
    summary = get_quota_summary(db, user)
    logger.debug(f"Quota summary requested: user_id={user.id}, plan={summary['plan']}")
    return summary


@router.post("/pay", response_model=SubscriptionEnvelope, status_code=status.HTTP_201_CREATED)
def pay(payload: PayRequest, user: User = Depends(require_owner), db: Session = Depends(get_db)):
    """
    Payment stub.

    Replaces the owner's current subscription with a new active one for 30 days.
    """
    subscription = activate_for_plan(db, user, payload.plan)
    return {"subscription": SubscriptionResponse.model_validate(subscription)}


@router.post("/{subscription_id}/cancel", response_model=SubscriptionEnvelope)
def cancel(subscription_id: int, user: User = Depends(require_owner), db: Session = Depends(get_db)):
    subscription = cancel_subscription(db, user, subscription_id)
    return {"subscription": SubscriptionResponse.model_validate(subscription)}
