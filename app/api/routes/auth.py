import logging
from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_db
from app.core.config import REFRESH_COOKIE_NAME
from app.core.errors import UnauthenticatedError, ValidationError
from app.core.messages import message
from app.core.session import begin_session, end_session, refresh_session, resolve_principal, tokens_from_request
from app.schemas.auth import AuthResponse, LoginRequest, MeResponse, OkResponse, RegisterRequest, UserPublic
from app.services.user_service import authenticate, register_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


# ✅ LOGIN (email or username + password, sets session cookies)
@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    key = payload.login_key()
    if not key:
        raise ValidationError(details={"field": "identifier"})

    user = authenticate(db, key, payload.password)
    if user is None:
        raise UnauthenticatedError(message("invalid_credentials"), code="invalid_credentials")

    begin_session(response, user)
    return {"user": UserPublic.model_validate(user)}


# ✅ REGISTER (drivers and owners only)
@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, response: Response, db: Session = Depends(get_db)):
    user = register_user(
        db,
        email=payload.email,
        password=payload.password,
        name=payload.name,
        role=payload.role,
        license_category=payload.license_category,
        company_name=payload.company_name,
    )
    begin_session(response, user)
    return {"user": UserPublic.model_validate(user)}


# ✅ REFRESH (rotates both cookies)
@router.post("/refresh", response_model=AuthResponse)
def refresh(request: Request, response: Response, db: Session = Depends(get_db)):
    user = refresh_session(db, response, request.cookies.get(REFRESH_COOKIE_NAME))
    return {"user": UserPublic.model_validate(user)}


# ✅ CURRENT USER (never errors; null for anonymous callers)
@router.get("/me", response_model=MeResponse)
def me(request: Request, db: Session = Depends(get_db)):
    try:
        user = resolve_principal(db, tokens_from_request(request))
    except SQLAlchemyError:
        logger.exception("Session lookup failed in /auth/me")
        return {"user": None}
    if user is None:
        return {"user": None}
    return {"user": UserPublic.model_validate(user)}


# ✅ LOGOUT
@router.post("/logout", response_model=OkResponse)
def logout(response: Response):
    end_session(response)
    return {"ok": True}
