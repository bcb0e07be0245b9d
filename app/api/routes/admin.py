"""
Admin endpoints.

Everything except /admin/bootstrap and /admin/login requires the admin role.
Bootstrap is guarded by the X-Admin-Bootstrap-Token header instead.
"""
import hmac
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Header, Query, Response, status
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_db, require_admin
from app.core.config import ADMIN_BOOTSTRAP_TOKEN
from app.core.errors import InternalError, UnauthenticatedError
from app.core.messages import message
from app.core.roles import Role
from app.core.session import begin_session
from app.db.models.job import Job
from app.db.models.user import User
from app.schemas.admin import (
    AdminLoginRequest,
    AdminUserEnvelope,
    AdminUserItem,
    AdminUserList,
    AdminUserUpdate,
    BootstrapRequest,
    BootstrapResponse,
    LatestJob,
    LatestUser,
    ResetPasswordRequest,
    StatsResponse,
)
from app.schemas.auth import AuthResponse, OkResponse, UserPublic
from app.schemas.driver import AdminDriverItem, AdminDriverList, AdminDriverUpdate, DriverDetailEnvelope, DriverDetail
from app.schemas.job import AdminJobItem, AdminJobList, AdminJobUpdate, JobEnvelope, JobSummary
from app.schemas.subscription import (
    AdminSubscriptionEnvelope,
    AdminSubscriptionList,
    AdminSubscriptionResponse,
    SubscriptionStatusUpdate,
)
from app.services import job_service, user_service
from app.services.driver_service import list_drivers_for_admin
from app.services.subscription_service import list_subscriptions, transition_subscription

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


# ============================================
# ✅ BOOTSTRAP + LOGIN
# ============================================

@router.post("/bootstrap", response_model=BootstrapResponse, status_code=status.HTTP_201_CREATED)
def bootstrap(
    payload: BootstrapRequest,
    x_admin_bootstrap_token: Optional[str] = Header(None),
    db: Session = Depends(get_db),
):
    """Create the admin account, or promote the account holding the email or username."""
    if not ADMIN_BOOTSTRAP_TOKEN:
        raise InternalError(message("bootstrap_not_configured"), code="bootstrap_not_configured")
    if not x_admin_bootstrap_token or not hmac.compare_digest(x_admin_bootstrap_token, ADMIN_BOOTSTRAP_TOKEN):
        logger.warning("Admin bootstrap rejected: bad token")
        raise UnauthenticatedError(message("invalid_bootstrap_token"), code="invalid_bootstrap_token")

    admin = user_service.upsert_admin(db, payload.email, payload.username, payload.password, payload.name)
    return {"ok": True, "user": AdminUserItem.model_validate(admin)}


@router.post("/login", response_model=AuthResponse)
def admin_login(payload: AdminLoginRequest, response: Response, db: Session = Depends(get_db)):
    admin = user_service.authenticate(db, payload.username_or_email, payload.password, role=Role.ADMIN)
    if admin is None:
        raise UnauthenticatedError(message("invalid_credentials"), code="invalid_credentials")
    begin_session(response, admin)
    return {"user": UserPublic.model_validate(admin)}


# ============================================
# ✅ STATS
# ============================================

@router.get("/stats", response_model=StatsResponse)
def stats(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    counts = {
        "users": db.query(User).count(),
        "drivers": db.query(User).filter(User.role == Role.DRIVER.value).count(),
        "owners": db.query(User).filter(User.role == Role.OWNER.value).count(),
        "jobs": db.query(Job).count(),
    }
    latest_users = db.query(User).order_by(User.created_at.desc(), User.id.desc()).limit(5).all()
    latest_jobs = db.query(Job).order_by(Job.created_at.desc(), Job.id.desc()).limit(5).all()
    return {
        "counts": counts,
        "latest_users": [LatestUser.model_validate(u) for u in latest_users],
        "latest_jobs": [LatestJob.model_validate(j) for j in latest_jobs],
    }


# ============================================
# ✅ USERS
# ============================================

@router.get("/users", response_model=AdminUserList)
def get_users(
    q: Optional[str] = None,
    role: Optional[str] = None,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    users = user_service.list_users(db, q=q, role=role)
    return {"users": [AdminUserItem.model_validate(u) for u in users]}


@router.patch("/users/{user_id}", response_model=AdminUserEnvelope)
def patch_user(
    user_id: int,
    payload: AdminUserUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = user_service.admin_update_user(db, user_id, payload.model_dump(exclude_unset=True))
    return {"user": AdminUserItem.model_validate(user)}


@router.post("/users/{user_id}/reset-password", response_model=OkResponse)
def reset_user_password(
    user_id: int,
    payload: ResetPasswordRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user_service.reset_password(db, user_id, payload.new_password)
    return {"ok": True}


@router.delete("/users/{user_id}", response_model=OkResponse)
def delete_user(user_id: int, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    user_service.delete_user(db, user_service.get_user(db, user_id))
    return {"ok": True}


# ============================================
# ✅ JOBS
# ============================================

@router.get("/jobs", response_model=AdminJobList)
def get_jobs(
    q: Optional[str] = None,
    job_type: Optional[str] = Query(None, alias="type"),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    jobs = job_service.list_all_jobs(db, q=q, job_type=job_type)
    return {"jobs": [AdminJobItem.model_validate(j) for j in jobs]}


@router.patch("/jobs/{job_id}", response_model=JobEnvelope)
def patch_job(
    job_id: int,
    payload: AdminJobUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    job = job_service.admin_update_job(db, job_id, payload.model_dump(exclude_unset=True))
    return {"job": JobSummary.model_validate(job)}


@router.delete("/jobs/{job_id}", response_model=OkResponse)
def delete_job(job_id: int, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    job_service.delete_job(db, job_id)
    return {"ok": True}


# ============================================
# ✅ DRIVERS
# ============================================

@router.get("/drivers", response_model=AdminDriverList)
def get_drivers(q: Optional[str] = None, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return {"drivers": [AdminDriverItem.model_validate(d) for d in list_drivers_for_admin(db, q=q)]}


@router.patch("/drivers/{driver_id}", response_model=DriverDetailEnvelope)
def patch_driver(
    driver_id: int,
    payload: AdminDriverUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    driver = user_service.admin_update_driver(db, driver_id, payload.model_dump(exclude_unset=True))
    return {"driver": DriverDetail.model_validate(driver)}


@router.delete("/drivers/{driver_id}", response_model=OkResponse)
def delete_driver(driver_id: int, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    user_service.delete_user(db, user_service.get_driver(db, driver_id))
    return {"ok": True}


# ============================================
# ✅ SUBSCRIPTIONS
# ============================================

@router.get("/subscriptions", response_model=AdminSubscriptionList)
def get_subscriptions(
    subscription_status: Optional[str] = Query(None, alias="status"),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    if subscription_status == "all":
        subscription_status = None
    subscriptions = list_subscriptions(db, status=subscription_status)
    return {"subscriptions": [AdminSubscriptionResponse.model_validate(s) for s in subscriptions]}


@router.patch("/subscriptions/{subscription_id}", response_model=AdminSubscriptionEnvelope)
def patch_subscription(
    subscription_id: int,
    payload: SubscriptionStatusUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Status change through the subscription state machine; 400 when the transition is not allowed."""
    subscription = transition_subscription(db, subscription_id, payload.status)
    logger.info(f"Admin subscription update: admin_id={admin.id}, id={subscription.id}, status={subscription.status}")
    return {"subscription": AdminSubscriptionResponse.model_validate(subscription)}
