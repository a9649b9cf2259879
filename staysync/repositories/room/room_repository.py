"""Room repository."""

from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from staysync.models import Room
from staysync.models.base.enums import RoomStatus
from staysync.repositories.base import BaseRepository


class RoomRepository(BaseRepository[Room]):
    def __init__(self, db: Session):
        super().__init__(Room, db)

    def get_by_number(self, organization_id: str, number: str) -> Optional[Room]:
        stmt = select(Room).where(
            Room.organization_id == organization_id,
            Room.number == number,
        )
        return self.db.scalars(stmt).first()

    def list_for_org(self, organization_id: str, status: Optional[RoomStatus] = None) -> List[Room]:
        stmt = (
            select(Room)
            .where(Room.organization_id == organization_id)
            .options(selectinload(Room.residents))
            .order_by(Room.number)
            .execution_options(populate_existing=True)
        )
        if status is not None:
            stmt = stmt.where(Room.status == status)
        return list(self.db.scalars(stmt).all())

    def count_by_status(self, organization_id: str) -> Dict[RoomStatus, int]:
        stmt = (
            select(Room.status, func.count(Room.id))
            .where(Room.organization_id == organization_id)
            .group_by(Room.status)
        )
        counts = {status: 0 for status in RoomStatus}
        for status, count in self.db.execute(stmt).all():
            counts[RoomStatus(status)] = count
        return counts
