from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from staysync.api import deps
from staysync.config.settings import Settings
from staysync.models import User
from staysync.models.base.enums import AuditAction
from staysync.schemas.system import SystemConfigResponse, SystemConfigUpdate
from staysync.services.audit import AuditContext, AuditService
from staysync.services.system import SystemConfigService

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=SystemConfigResponse)
def read_settings(
    current_user: User = Depends(deps.require_permission("settings", "read")),
    db: Session = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
):
    return SystemConfigService(db, settings).get_or_create(current_user.organization_id)


@router.put("", response_model=SystemConfigResponse)
def update_settings(
    payload: SystemConfigUpdate,
    current_user: User = Depends(deps.require_permission("settings", "update")),
    db: Session = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    audit: AuditService = Depends(deps.get_audit_service),
    context: AuditContext = Depends(deps.get_audit_context),
):
    config, diff = SystemConfigService(db, settings).update(current_user.organization_id, payload)
    if diff:
        audit.log(context, AuditAction.UPDATE, "SystemConfig", config.id, diff)
    return config
