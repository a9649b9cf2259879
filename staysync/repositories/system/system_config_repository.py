"""System configuration repository."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from staysync.models import SystemConfig
from staysync.repositories.base import BaseRepository


class SystemConfigRepository(BaseRepository[SystemConfig]):
    def __init__(self, db: Session):
        super().__init__(SystemConfig, db)

    def get_for_org(self, organization_id: str) -> Optional[SystemConfig]:
        stmt = select(SystemConfig).where(SystemConfig.organization_id == organization_id)
        return self.db.scalars(stmt).first()

    def organizations_with_auto_reminders(self) -> List[str]:
        stmt = select(SystemConfig.organization_id).where(SystemConfig.enable_auto_reminders.is_(True))
        return list(self.db.scalars(stmt).all())
