"""
Pydantic schemas for quota usage.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class QuotaUsageResponse(BaseModel):
    """Response schema for GET /subscriptions/me/usage."""
    plan: Optional[str] = Field(None, description="Active plan, or null without a subscription")
    limit: Optional[int] = Field(None, description="Job limit of the active plan")
    used: int = Field(..., description="Jobs the owner currently has")
    remaining: int = Field(..., description="Jobs that can still be posted")
    unlimited: bool = Field(..., description="Whether the plan has no practical limit")
    expires_at: Optional[datetime] = Field(None, description="End of the current subscription")

    class Config:
        json_schema_extra = {
            "example": {
                "plan": "starter",
                "limit": 2,
                "used": 1,
                "remaining": 1,
                "unlimited": False,
                "expires_at": "2026-02-14T10:00:00Z"
            }
        }


class QuotaExceededResponse(BaseModel):
    """Error body returned when job posting is denied."""
    error: str = Field(..., description="Human-readable message")
    code: str = Field(..., description="quota_exceeded or no_subscription")
    reason: str = Field(..., description="Machine-readable denial reason")
    plan: Optional[str] = Field(None, description="Active plan")
    limit: Optional[int] = Field(None, description="Job limit of the plan")
    used: Optional[int] = Field(None, description="Jobs the owner has")
    remaining: Optional[int] = Field(None, description="Always 0 when denied")

    class Config:
        json_schema_extra = {
            "example": {
                "error": "Your plan allows at most 2 jobs. Upgrade your plan to post more.",
                "code": "quota_exceeded",
                "reason": "quota_exceeded",
                "plan": "starter",
                "limit": 2,
                "used": 2,
                "remaining": 0
            }
        }
