"""
Job listing, lookup and application.

Job creation goes through quota_service.create_job_within_quota; everything
here is plain reads and admin edits.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, ValidationError
from app.core.messages import message
from app.db.models.job import Job
from app.db.models.user import User
from app.services.notification_service import notify_job_application

logger = logging.getLogger(__name__)

PREVIEW_LIMIT = 8
FULL_LIMIT = 200
ADMIN_LIMIT = 500

# "all" in either UI language means no type filter
_ALL_TYPES = {"all", "ყველა"}

ADMIN_JOB_FIELDS = ("title", "route", "price", "type", "date", "description", "requirements", "owner", "phone")
_STRIPPED_FIELDS = {"title", "route", "price", "type", "date", "owner", "phone"}


def _filtered(db: Session, q: Optional[str], job_type: Optional[str], include_owner: bool = False):
    query = db.query(Job)
    if q:
        pattern = f"%{q.strip()}%"
        columns = [Job.title.ilike(pattern), Job.route.ilike(pattern)]
        if include_owner:
            columns.append(Job.owner.ilike(pattern))
        query = query.filter(or_(*columns))
    if job_type and job_type.strip().lower() not in _ALL_TYPES:
        query = query.filter(Job.type == job_type.strip())
    return query.order_by(Job.created_at.desc(), Job.id.desc())


def list_jobs(db: Session, preview: bool, q: Optional[str] = None, job_type: Optional[str] = None) -> List[Job]:
    """Public job board. Anonymous callers get the first PREVIEW_LIMIT rows."""
    limit = PREVIEW_LIMIT if preview else FULL_LIMIT
    return _filtered(db, q, job_type).limit(limit).all()


def list_all_jobs(db: Session, q: Optional[str] = None, job_type: Optional[str] = None) -> List[Job]:
    return _filtered(db, q, job_type, include_owner=True).limit(ADMIN_LIMIT).all()


def list_owner_jobs(db: Session, owner: User) -> List[Job]:
    return db.query(Job).filter(Job.created_by == owner.id).order_by(Job.created_at.desc(), Job.id.desc()).all()


def get_job(db: Session, job_id: int) -> Job:
    job = db.query(Job).filter(Job.id == job_id).first()
    if job is None:
        raise NotFoundError("job_not_found")
    return job


def apply_to_job(db: Session, driver: User, job_id: int) -> Job:
    """
    Record a driver's interest by emailing the job owner.

    Raises:
        NotFoundError: no such job
        ValidationError: the job has no owner account to notify
    """
    job = get_job(db, job_id)
    owner = None
    if job.created_by is not None:
        owner = db.query(User).filter(User.id == job.created_by).first()
    if owner is None or not owner.email:
        raise ValidationError(message("job_owner_missing"), code="job_owner_missing")

    notify_job_application(owner.email, job, driver)
    logger.info(f"Job application: job_id={job.id}, driver_id={driver.id}, owner_id={owner.id}")
    return job


def admin_update_job(db: Session, job_id: int, updates: Dict[str, Any]) -> Job:
    job = get_job(db, job_id)
    for field in ADMIN_JOB_FIELDS:
        value = updates.get(field)
        if value is None:
            continue
        if field in _STRIPPED_FIELDS:
            value = value.strip()
        if field == "requirements":
            value = [str(r) for r in value]
        setattr(job, field, value)
    db.commit()
    db.refresh(job)
    return job


def delete_job(db: Session, job_id: int) -> None:
    job = get_job(db, job_id)
    db.delete(job)
    db.commit()
    logger.info(f"Job deleted: job_id={job_id}")
