from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from staysync.api import deps
from staysync.models import User
from staysync.models.base.enums import AuditAction
from staysync.schemas.audit import AuditLogResponse
from staysync.services.audit import AuditService

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("", response_model=List[AuditLogResponse])
def search_audit_log(
    entity: Optional[str] = None,
    action: Optional[AuditAction] = None,
    user_id: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1),
    current_user: User = Depends(deps.require_permission("audit", "read")),
    service: AuditService = Depends(deps.get_audit_service),
):
    """Newest entries first; ``limit`` defaults to 50 and is capped at 500."""
    return service.search(
        current_user.organization_id,
        entity=entity,
        action=action,
        user_id=user_id,
        limit=limit,
    )
