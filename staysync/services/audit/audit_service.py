"""
Audit trail service.

Entries are written after the business transaction has committed, in a
transaction of their own. Writing an entry is best-effort: a failure is
rolled back and logged and never reaches the caller.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from staysync.config.settings import Settings
from staysync.models import AuditLog, User
from staysync.models.base.enums import AuditAction
from staysync.repositories.audit import AuditLogRepository
from staysync.services.base import BaseService


@dataclass(frozen=True)
class AuditContext:
    """Who performed a request, captured by the API layer."""

    user_id: Optional[str] = None
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    organization_id: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    @classmethod
    def for_user(cls, user: User, ip_address: Optional[str] = None, user_agent: Optional[str] = None) -> "AuditContext":
        return cls(
            user_id=user.id,
            user_email=user.email,
            user_name=user.full_name,
            organization_id=user.organization_id,
            ip_address=ip_address,
            user_agent=user_agent,
        )


def to_json_safe(value: Any) -> Any:
    """Make model values (Decimal, dates, enums) storable in a JSON column."""
    return jsonable_encoder(value, custom_encoder={Decimal: str})


def diff_changes(
    before: Dict[str, Any],
    after: Dict[str, Any],
    fields: Optional[Iterable[str]] = None,
) -> Dict[str, Dict[str, Any]]:
    """
    Field-level ``{field: {"from": old, "to": new}}`` diff.

    Only keys present in ``after`` (or in ``fields`` when given) are compared.
    """
    keys = list(fields) if fields is not None else list(after.keys())
    return {
        key: {"from": before.get(key), "to": after.get(key)}
        for key in keys
        if before.get(key) != after.get(key)
    }


class AuditService(BaseService):
    def __init__(self, db_session: Session, settings: Settings):
        super().__init__(db_session)
        self.settings = settings
        self.logs = AuditLogRepository(db_session)

    def log(
        self,
        context: AuditContext,
        action: AuditAction,
        entity: str,
        entity_id: Optional[str] = None,
        changes: Optional[Dict[str, Any]] = None,
    ) -> Optional[AuditLog]:
        """
        Record one audit entry.

        Returns:
            The stored entry, or ``None`` when it could not be written
        """
        entry = AuditLog(
            organization_id=context.organization_id,
            user_id=context.user_id,
            user_email=context.user_email,
            user_name=context.user_name,
            action=action,
            entity=entity,
            entity_id=entity_id,
            changes=to_json_safe(changes) if changes else None,
            ip_address=context.ip_address,
            user_agent=context.user_agent,
        )
        try:
            self.db.add(entry)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            self._logger.error(
                f"Failed to write audit entry: {e}",
                extra={"action": action.value, "entity": entity, "entity_id": entity_id},
            )
            return None
        return entry

    def search(
        self,
        organization_id: str,
        entity: Optional[str] = None,
        action: Optional[AuditAction] = None,
        user_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[AuditLog]:
        """Newest-first entries; ``limit`` is clamped to the configured maximum."""
        limit = limit or self.settings.AUDIT_DEFAULT_LIMIT
        limit = max(1, min(limit, self.settings.AUDIT_MAX_LIMIT))
        return self.logs.search(organization_id, entity=entity, action=action, user_id=user_id, limit=limit)


__all__ = ["AuditService", "AuditContext", "diff_changes", "to_json_safe"]
