"""
Audit log schemas.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from staysync.models.base.enums import AuditAction
from staysync.schemas.common.base import BaseSchema

__all__ = ["AuditLogResponse"]


class AuditLogResponse(BaseSchema):
    id: str
    organization_id: Optional[str] = None
    user_id: Optional[str] = None
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    action: AuditAction
    entity: str
    entity_id: Optional[str] = None
    changes: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime
