"""
Pydantic schemas for profile endpoints.
"""
from typing import List, Optional
from pydantic import BaseModel, Field


class UserProfile(BaseModel):
    """Full profile of the calling user."""
    id: int
    email: str
    name: str
    role: str
    company_name: Optional[str] = None
    license_category: Optional[str] = None
    location: Optional[str] = None
    experience: Optional[str] = None
    categories: List[str] = Field(default_factory=list)
    rating: float = 0
    bio: str = ""
    verified: bool = False
    trips: int = 0
    phone: str = ""
    work_zone: str = ""

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    """
    Self-service profile edit.

    Drivers may set location, experience, categories, bio, phone and work_zone.
    Owners may set company_name and phone. Other fields are ignored for the role.
    """
    location: Optional[str] = Field(None, max_length=200)
    experience: Optional[str] = Field(None, max_length=200)
    categories: Optional[List[str]] = None
    bio: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=50)
    work_zone: Optional[str] = Field(None, max_length=200)
    company_name: Optional[str] = Field(None, max_length=200)

    class Config:
        json_schema_extra = {
            "example": {
                "location": "Tbilisi",
                "experience": "8 years",
                "categories": ["C", "CE"],
                "phone": "+995 555 12 34 56"
            }
        }


class ProfileResponse(BaseModel):
    user: UserProfile
