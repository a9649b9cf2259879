"""
Authentication endpoints: organization registration, login and the
current-user profile.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from staysync.api import deps
from staysync.config.settings import Settings
from staysync.models import User
from staysync.models.base.enums import AuditAction
from staysync.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from staysync.services.audit import AuditContext, AuditService
from staysync.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    db: Session = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    audit: AuditService = Depends(deps.get_audit_service),
):
    user, token = AuthService(db, settings).register(payload)
    audit.log(AuditContext.for_user(user), AuditAction.CREATE, "Organization", user.organization_id)
    return TokenResponse(access_token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=TokenResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    audit: AuditService = Depends(deps.get_audit_service),
):
    user, token = AuthService(db, settings).login(payload.email, payload.password)
    audit.log(AuditContext.for_user(user), AuditAction.LOGIN, "User", user.id)
    return TokenResponse(access_token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
def read_me(current_user: User = Depends(deps.get_current_user)):
    return current_user
