"""
Whole-database backup and restore.

Manual export and restore are limited to the deployment owner; the
scheduled export authenticates with the ``BACKUP_API_KEY`` bearer token.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from staysync.api import deps
from staysync.models import User
from staysync.models.base.enums import AuditAction
from staysync.services.audit import AuditContext, AuditService
from staysync.services.backup import BackupService

router = APIRouter(prefix="/backup", tags=["backup"])


@router.post("/export")
def export_backup(
    current_user: User = Depends(deps.require_deployment_owner),
    db: Session = Depends(deps.get_db),
) -> Dict[str, Any]:
    return BackupService(db).export()


@router.post("/auto-export", dependencies=[Depends(deps.require_backup_key)])
def auto_export_backup(db: Session = Depends(deps.get_db)) -> Dict[str, Any]:
    return BackupService(db).export(source="auto")


@router.post("/restore")
def restore_backup(
    payload: Dict[str, Any] = Body(...),
    current_user: User = Depends(deps.require_deployment_owner),
    db: Session = Depends(deps.get_db),
    audit: AuditService = Depends(deps.get_audit_service),
    context: AuditContext = Depends(deps.get_audit_context),
) -> Dict[str, Any]:
    """Body: ``{"backup": <export document>}``. Replaces every table."""
    results = BackupService(db).restore(payload.get("backup"))
    audit.log(context, AuditAction.RESTORE, "Database", None, {"restored": results})
    return {"success": True, "restored": results}
