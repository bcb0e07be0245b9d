"""
Pydantic schemas for the driver directory.

Preview rows deliberately lack verified, trips and phone.
"""
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field


class DriverPreview(BaseModel):
    id: int
    name: str
    location: Optional[str] = None
    experience: Optional[str] = None
    categories: List[str] = Field(default_factory=list)
    rating: float = 0

    class Config:
        from_attributes = True


class DriverListItem(DriverPreview):
    verified: bool = False
    trips: int = 0
    phone: str = ""


class DriverDetail(DriverListItem):
    bio: str = ""
    email: str
    work_zone: str = ""


class DriverDetailEnvelope(BaseModel):
    driver: DriverDetail


class AdminDriverItem(DriverDetail):
    created_at: Optional[datetime] = None


class AdminDriverList(BaseModel):
    drivers: List[AdminDriverItem]


class AdminDriverUpdate(BaseModel):
    verified: Optional[bool] = None
    location: Optional[str] = Field(None, max_length=200)
    experience: Optional[str] = Field(None, max_length=200)
    categories: Optional[List[str]] = None
    bio: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=50)
    work_zone: Optional[str] = Field(None, max_length=200)
    trips: Optional[int] = Field(None, ge=0)
