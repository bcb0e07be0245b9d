"""
Pydantic schemas for authentication endpoints.
"""
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator


def _check_password_bytes(v: str) -> str:
    """Validate password length (min 6 characters, bcrypt limit is 72 bytes)."""
    if len(v) < 6:
        raise ValueError("Password must be at least 6 characters")
    if len(v.encode("utf-8")) > 72:
        raise ValueError("Password too long (bcrypt limit 72 bytes)")
    return v


class LoginRequest(BaseModel):
    """Request schema for login. Any one of identifier, email or username names the account."""
    identifier: Optional[str] = Field(None, description="Email or username")
    email: Optional[str] = Field(None, description="User's email address")
    username: Optional[str] = Field(None, description="Username (admins)")
    password: str = Field(..., min_length=1, description="User's password")

    def login_key(self) -> Optional[str]:
        for value in (self.identifier, self.email, self.username):
            if value and value.strip():
                return value
        return None

    class Config:
        json_schema_extra = {
            "example": {
                "email": "owner@example.com",
                "password": "pw123456"
            }
        }


class RegisterRequest(BaseModel):
    """Request schema for driver and owner signup."""
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., description="Password (min 6 characters)")
    name: str = Field(..., min_length=1, max_length=200, description="Display name")
    role: str = Field(..., description="driver or owner")
    license_category: Optional[str] = Field(None, max_length=50, description="Driver licence category")
    company_name: Optional[str] = Field(None, max_length=200, description="Owner company name")

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        return _check_password_bytes(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name is required")
        return v.strip()

    class Config:
        json_schema_extra = {
            "example": {
                "email": "owner@example.com",
                "password": "pw123456",
                "name": "Giorgi",
                "role": "owner",
                "company_name": "Kartli Logistics"
            }
        }


class UserPublic(BaseModel):
    """Identity returned by every auth endpoint."""
    id: int = Field(..., description="User ID")
    email: str = Field(..., description="Email address")
    name: str = Field(..., description="Display name")
    role: str = Field(..., description="driver, owner or admin")

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    """Response for login, register and refresh."""
    user: UserPublic


class MeResponse(BaseModel):
    """Response for GET /auth/me. user is null for anonymous callers."""
    user: Optional[UserPublic] = None


class OkResponse(BaseModel):
    ok: bool = True
