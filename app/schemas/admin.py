"""
Pydantic schemas for admin endpoints.
"""
from typing import Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.auth import _check_password_bytes


class BootstrapRequest(BaseModel):
    """Create or take over the admin account. Guarded by X-Admin-Bootstrap-Token."""
    email: EmailStr
    username: str = Field(..., min_length=1, max_length=100)
    password: str
    name: Optional[str] = Field(None, max_length=200)

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        return _check_password_bytes(v)

    class Config:
        json_schema_extra = {
            "example": {
                "email": "admin@example.com",
                "username": "admin",
                "password": "change-me-now"
            }
        }


class AdminLoginRequest(BaseModel):
    username_or_email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AdminUserItem(BaseModel):
    id: int
    email: str
    username: Optional[str] = None
    name: str
    role: str
    company_name: Optional[str] = None
    license_category: Optional[str] = None
    verified: bool = False
    phone: str = ""
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AdminUserList(BaseModel):
    users: List[AdminUserItem]


class AdminUserEnvelope(BaseModel):
    user: AdminUserItem


class BootstrapResponse(BaseModel):
    ok: bool = True
    user: AdminUserItem


class AdminUserUpdate(BaseModel):
    """Fields an admin may change on any account. Role changes happen only here."""
    role: Optional[str] = None
    verified: Optional[bool] = None
    name: Optional[str] = Field(None, max_length=200)
    phone: Optional[str] = Field(None, max_length=50)
    company_name: Optional[str] = Field(None, max_length=200)
    license_category: Optional[str] = Field(None, max_length=50)


class ResetPasswordRequest(BaseModel):
    new_password: str

    @field_validator("new_password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        return _check_password_bytes(v)


class LatestUser(BaseModel):
    id: int
    email: str
    name: str
    role: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LatestJob(BaseModel):
    id: int
    title: str
    route: str
    type: str
    price: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StatsResponse(BaseModel):
    counts: Dict[str, int]
    latest_users: List[LatestUser]
    latest_jobs: List[LatestJob]
