"""
Driver directory.

Anonymous callers get a short preview without verification, trip count or
phone. Drivers are turned away, owners need an active subscription.
"""
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_current_user, get_db, get_optional_user
from app.core.gating import check_subscription_gate
from app.db.models.user import User
from app.schemas.driver import DriverDetail, DriverDetailEnvelope, DriverListItem, DriverPreview
from app.services.driver_service import list_drivers
from app.services.user_service import get_driver

router = APIRouter(prefix="/drivers", tags=["Drivers"])


@router.get("")
def get_drivers(
    q: Optional[str] = None,
    category: Optional[str] = None,
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    decision = check_subscription_gate(db, user)
    drivers = list_drivers(db, preview=decision.preview, q=q, category=category)
    row_schema = DriverPreview if decision.preview else DriverListItem
    return {
        "preview": decision.preview,
        "drivers": [row_schema.model_validate(d).model_dump() for d in drivers],
    }


@router.get("/{driver_id}", response_model=DriverDetailEnvelope)
def get_driver_detail(
    driver_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    check_subscription_gate(db, user)
    return {"driver": DriverDetail.model_validate(get_driver(db, driver_id))}
