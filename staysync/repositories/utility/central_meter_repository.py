"""Central meter repository."""

from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from staysync.models import CentralMeter
from staysync.repositories.base import BaseRepository


class CentralMeterRepository(BaseRepository[CentralMeter]):
    def __init__(self, db: Session):
        super().__init__(CentralMeter, db)

    def latest(self, organization_id: str) -> Optional[CentralMeter]:
        stmt = (
            select(CentralMeter)
            .where(CentralMeter.organization_id == organization_id)
            .order_by(CentralMeter.month.desc(), CentralMeter.created_at.desc())
        )
        return self.db.scalars(stmt).first()

    def for_month(self, organization_id: str, month: date) -> List[CentralMeter]:
        stmt = select(CentralMeter).where(
            CentralMeter.organization_id == organization_id,
            CentralMeter.month == month,
        )
        return list(self.db.scalars(stmt).all())

    def list_recent(self, organization_id: str, limit: int = 24) -> List[CentralMeter]:
        stmt = (
            select(CentralMeter)
            .where(CentralMeter.organization_id == organization_id)
            .order_by(CentralMeter.month.desc())
            .limit(limit)
        )
        return list(self.db.scalars(stmt).all())
