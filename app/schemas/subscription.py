"""
Pydantic schemas for subscription endpoints.
"""
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field


class PlanResponse(BaseModel):
    """One entry of the plan catalog."""
    name: str = Field(..., description="starter, business or corporate")
    job_limit: int = Field(..., description="Jobs the owner may have at once")
    price_gel: int = Field(..., description="Price per 30 days in GEL")
    unlimited: bool = Field(..., description="Whether job_limit is the unlimited sentinel")

    class Config:
        from_attributes = True


class PlanListResponse(BaseModel):
    plans: List[PlanResponse]


class PayRequest(BaseModel):
    """Request schema for the payment stub."""
    plan: str = Field(..., min_length=1, description="starter, business or corporate")

    class Config:
        json_schema_extra = {"example": {"plan": "starter"}}


class SubscriptionResponse(BaseModel):
    id: int
    plan: str
    status: str
    job_limit: int
    price_gel: int
    activated_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": 1,
                "plan": "starter",
                "status": "active",
                "job_limit": 2,
                "price_gel": 20,
                "activated_at": "2026-01-15T10:00:00Z",
                "expires_at": "2026-02-14T10:00:00Z",
                "created_at": "2026-01-15T10:00:00Z"
            }
        }


class SubscriptionEnvelope(BaseModel):
    subscription: Optional[SubscriptionResponse] = None


class SubscriptionOwner(BaseModel):
    id: int
    email: str
    name: str
    company_name: Optional[str] = None

    class Config:
        from_attributes = True


class AdminSubscriptionResponse(SubscriptionResponse):
    """Subscription with its owner, for the admin list."""
    user: Optional[SubscriptionOwner] = None


class AdminSubscriptionList(BaseModel):
    subscriptions: List[AdminSubscriptionResponse]


class AdminSubscriptionEnvelope(BaseModel):
    subscription: AdminSubscriptionResponse


class SubscriptionStatusUpdate(BaseModel):
    """Admin status change; the state machine decides whether it is allowed."""
    status: str = Field(..., description="active, expired or cancelled")

    class Config:
        json_schema_extra = {"example": {"status": "cancelled"}}
