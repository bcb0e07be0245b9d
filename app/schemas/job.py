"""
Pydantic schemas for job endpoints.
"""
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field, field_validator


class JobCreate(BaseModel):
    """Schema for posting a new job."""
    title: str = Field(..., description="Job title", min_length=1, max_length=255)
    route: str = Field(..., description="Route, e.g. Tbilisi - Batumi", min_length=1, max_length=255)
    price: str = Field(..., description="Price as shown on the listing", min_length=1, max_length=100)
    type: str = Field(..., description="Transport type", min_length=1, max_length=100)
    date: str = Field(..., description="Date as shown on the listing", min_length=1, max_length=100)
    description: str = Field(default="", description="Free-text description")
    requirements: List[str] = Field(default_factory=list, description="Requirements for the driver")
    phone: Optional[str] = Field(None, max_length=50, description="Contact phone (defaults to the owner's)")

    @field_validator("title", "route", "price", "type", "date")
    @classmethod
    def strip_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field is required")
        return v.strip()

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Refrigerated cargo",
                "route": "Tbilisi - Batumi",
                "price": "1200 GEL",
                "type": "Refrigerator",
                "date": "2026-03-01",
                "requirements": ["CE licence"]
            }
        }


class JobSummary(BaseModel):
    """Job as shown in lists."""
    id: int
    title: str
    route: str
    price: str
    type: str
    date: str

    class Config:
        from_attributes = True


class JobDetail(JobSummary):
    """Job with everything a signed-in user may see."""
    description: str = ""
    requirements: List[str] = Field(default_factory=list)
    owner: str = ""
    phone: str = ""


class JobListResponse(BaseModel):
    preview: bool = Field(..., description="True for anonymous callers; list is truncated")
    jobs: List[JobSummary]


class MyJobsResponse(BaseModel):
    jobs: List[JobSummary]


class JobEnvelope(BaseModel):
    job: JobSummary


class JobDetailEnvelope(BaseModel):
    job: JobDetail


class AdminJobItem(JobDetail):
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None


class AdminJobList(BaseModel):
    jobs: List[AdminJobItem]


class AdminJobUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    route: Optional[str] = Field(None, max_length=255)
    price: Optional[str] = Field(None, max_length=100)
    type: Optional[str] = Field(None, max_length=100)
    date: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    requirements: Optional[List[str]] = None
    owner: Optional[str] = Field(None, max_length=200)
    phone: Optional[str] = Field(None, max_length=50)
