"""Resident repository."""

from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from staysync.models import Billing, Resident, Room
from staysync.models.base.enums import PaymentStatus, ResidentStatus
from staysync.repositories.base import BaseRepository


class ResidentRepository(BaseRepository[Resident]):
    def __init__(self, db: Session):
        super().__init__(Resident, db)

    def list_active(self, organization_id: str) -> List[Resident]:
        stmt = (
            select(Resident)
            .where(
                Resident.organization_id == organization_id,
                Resident.status == ResidentStatus.ACTIVE,
            )
            .order_by(Resident.check_in_date)
        )
        return list(self.db.scalars(stmt).all())

    def active_in_room(self, room_id: str, exclude_id: Optional[str] = None) -> List[Resident]:
        """
        Active residents of a room, main tenant first then by check-in date.
        """
        stmt = select(Resident).where(
            Resident.room_id == room_id,
            Resident.status == ResidentStatus.ACTIVE,
        )
        if exclude_id is not None:
            stmt = stmt.where(Resident.id != exclude_id)
        stmt = stmt.order_by(Resident.is_main_tenant.desc(), Resident.check_in_date, Resident.id)
        return list(self.db.scalars(stmt).all())

    def count_active_in_room(self, room_id: str, exclude_id: Optional[str] = None) -> int:
        stmt = select(func.count(Resident.id)).where(
            Resident.room_id == room_id,
            Resident.status == ResidentStatus.ACTIVE,
        )
        if exclude_id is not None:
            stmt = stmt.where(Resident.id != exclude_id)
        return self.db.scalar(stmt) or 0

    def unset_main_tenant(self, room_id: str) -> None:
        self.db.flush()
        self.db.execute(
            update(Resident)
            .where(Resident.room_id == room_id)
            .values(is_main_tenant=False)
            .execution_options(synchronize_session="fetch")
        )

    def get_active_by_line_user_id(self, line_user_id: str) -> Optional[Resident]:
        stmt = (
            select(Resident)
            .where(
                Resident.line_user_id == line_user_id,
                Resident.status == ResidentStatus.ACTIVE,
            )
            .order_by(Resident.check_in_date.desc())
        )
        return self.db.scalars(stmt).first()

    def get_by_verify_code(self, code: str) -> Optional[Resident]:
        stmt = select(Resident).where(Resident.line_verify_code == code)
        return self.db.scalars(stmt).first()

    def first_line_user_in_room(self, room_id: str) -> Optional[Resident]:
        """Any active resident of the room that has a linked LINE account."""
        stmt = (
            select(Resident)
            .where(
                Resident.room_id == room_id,
                Resident.status == ResidentStatus.ACTIVE,
                Resident.line_user_id.is_not(None),
            )
            .order_by(Resident.is_main_tenant.desc(), Resident.check_in_date)
        )
        return self.db.scalars(stmt).first()

    def line_recipients(
        self,
        organization_id: str,
        floor: Optional[str] = None,
        room_number: Optional[str] = None,
        unpaid_only: bool = False,
    ) -> List[Resident]:
        """
        Active residents with a linked LINE account, for announcements.

        ``room_number`` matches exactly and takes precedence over ``floor``,
        which matches room numbers by prefix. ``unpaid_only`` keeps residents
        holding at least one bill that is not Paid.
        """
        stmt = (
            select(Resident)
            .join(Room, Resident.room_id == Room.id)
            .where(
                Resident.organization_id == organization_id,
                Resident.status == ResidentStatus.ACTIVE,
                Resident.line_user_id.is_not(None),
            )
        )
        if room_number:
            stmt = stmt.where(Room.number == room_number)
        elif floor:
            stmt = stmt.where(Room.number.startswith(floor, autoescape=True))
        if unpaid_only:
            stmt = stmt.where(
                select(Billing.id)
                .where(
                    Billing.resident_id == Resident.id,
                    Billing.payment_status != PaymentStatus.PAID,
                )
                .exists()
            )
        stmt = stmt.order_by(Room.number, Resident.check_in_date)
        return list(self.db.scalars(stmt).all())
