from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from staysync.api import deps
from staysync.config.settings import Settings
from staysync.models import User
from staysync.models.base.enums import AuditAction, UserRole
from staysync.schemas.auth import UserInviteRequest, UserInviteResponse, UserResponse, UserUpdateRequest
from staysync.schemas.common import MessageResponse
from staysync.services.audit import AuditContext, AuditService
from staysync.services.user import UserService

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(
    db: Session = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
) -> UserService:
    return UserService(db, settings)


@router.get("", response_model=List[UserResponse])
def list_users(
    current_user: User = Depends(deps.require_permission("users", "read")),
    service: UserService = Depends(get_user_service),
):
    return service.list_users(current_user.organization_id)


@router.post("/invite", response_model=UserInviteResponse, status_code=status.HTTP_201_CREATED)
def invite_user(
    payload: UserInviteRequest,
    current_user: User = Depends(deps.require_roles(UserRole.OWNER)),
    service: UserService = Depends(get_user_service),
    audit: AuditService = Depends(deps.get_audit_service),
    context: AuditContext = Depends(deps.get_audit_context),
):
    user, temporary_password = service.invite(current_user, payload)
    audit.log(
        context,
        AuditAction.INVITE_USER,
        "User",
        user.id,
        {"email": user.email, "role": user.role},
    )
    return UserInviteResponse(user=UserResponse.model_validate(user), temporary_password=temporary_password)


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: str,
    payload: UserUpdateRequest,
    current_user: User = Depends(deps.require_roles(UserRole.OWNER)),
    service: UserService = Depends(get_user_service),
    audit: AuditService = Depends(deps.get_audit_service),
    context: AuditContext = Depends(deps.get_audit_context),
):
    user, diff = service.update(current_user, user_id, payload)
    if diff:
        action = AuditAction.CHANGE_ROLE if "role" in diff else AuditAction.UPDATE
        audit.log(context, action, "User", user.id, diff)
    return user


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    current_user: User = Depends(deps.require_roles(UserRole.OWNER)),
    service: UserService = Depends(get_user_service),
    audit: AuditService = Depends(deps.get_audit_service),
    context: AuditContext = Depends(deps.get_audit_context),
):
    user = service.delete(current_user, user_id)
    audit.log(context, AuditAction.DELETE, "User", user.id, {"email": user.email})
    return MessageResponse(message="User deleted")
