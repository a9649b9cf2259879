"""Audit log repository."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from staysync.models import AuditLog
from staysync.models.base.enums import AuditAction
from staysync.repositories.base import BaseRepository


class AuditLogRepository(BaseRepository[AuditLog]):
    def __init__(self, db: Session):
        super().__init__(AuditLog, db)

    def search(
        self,
        organization_id: str,
        entity: Optional[str] = None,
        action: Optional[AuditAction] = None,
        user_id: Optional[str] = None,
        limit: int = 50,
    ) -> List[AuditLog]:
        """Newest-first audit entries matching every given filter."""
        stmt = select(AuditLog).where(AuditLog.organization_id == organization_id)
        if entity:
            stmt = stmt.where(AuditLog.entity == entity)
        if action:
            stmt = stmt.where(AuditLog.action == action)
        if user_id:
            stmt = stmt.where(AuditLog.user_id == user_id)
        stmt = stmt.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).limit(limit)
        return list(self.db.scalars(stmt).all())
