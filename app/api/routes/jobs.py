"""
Job board endpoints.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_current_user, get_db, get_optional_user, require_driver, require_owner
from app.db.models.user import User
from app.schemas.auth import OkResponse
from app.schemas.job import JobCreate, JobDetail, JobDetailEnvelope, JobEnvelope, JobListResponse, JobSummary, MyJobsResponse
from app.schemas.usage import QuotaExceededResponse
from app.services.job_service import apply_to_job, get_job, list_jobs, list_owner_jobs
from app.services.quota_service import create_job_within_quota

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.get("", response_model=JobListResponse)
def get_jobs(
    q: Optional[str] = None,
    job_type: Optional[str] = Query(None, alias="type"),
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """Anonymous callers get a preview of the newest jobs; signed-in users get the full board."""
    preview = user is None
    jobs = list_jobs(db, preview=preview, q=q, job_type=job_type)
    return {"preview": preview, "jobs": [JobSummary.model_validate(j) for j in jobs]}


@router.get("/mine", response_model=MyJobsResponse)
def get_my_jobs(user: User = Depends(require_owner), db: Session = Depends(get_db)):
    return {"jobs": [JobSummary.model_validate(j) for j in list_owner_jobs(db, user)]}


@router.post(
    "",
    response_model=JobEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={403: {"model": QuotaExceededResponse}},
)
def create_job(payload: JobCreate, user: User = Depends(require_owner), db: Session = Depends(get_db)):
    """
    Post a job.

    Requires an active subscription with room left under its job limit;
    otherwise 403 with reason no_subscription or quota_exceeded.
    """
    data = payload.model_dump()
    if data.get("phone") is None:
        data["phone"] = user.phone or ""
    job = create_job_within_quota(db, user, data)
    return {"job": JobSummary.model_validate(job)}


@router.get("/{job_id}", response_model=JobDetailEnvelope)
def get_job_detail(job_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"job": JobDetail.model_validate(get_job(db, job_id))}


@router.post("/{job_id}/apply", response_model=OkResponse)
def apply(job_id: int, user: User = Depends(require_driver), db: Session = Depends(get_db)):
    """Email the job owner about the applying driver. Delivery is best effort."""
    apply_to_job(db, user, job_id)
    return {"ok": True}
