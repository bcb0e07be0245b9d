"""
Profile endpoints for the signed-in user.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_current_user, get_db
from app.db.models.user import User
from app.schemas.user import ProfileResponse, ProfileUpdate, UserProfile
from app.services.user_service import update_own_profile

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=ProfileResponse)
def get_profile(user: User = Depends(get_current_user)):
    return {"user": UserProfile.model_validate(user)}


@router.patch("/me", response_model=ProfileResponse)
def patch_profile(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Role decides which fields are writable; the rest are ignored."""
    updated = update_own_profile(db, user, payload.model_dump(exclude_unset=True))
    return {"user": UserProfile.model_validate(updated)}
