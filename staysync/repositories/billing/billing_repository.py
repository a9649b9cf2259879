"""Billing repository."""

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from staysync.models import Billing, Room
from staysync.models.base.enums import PaymentStatus
from staysync.repositories.base import BaseRepository


class BillingRepository(BaseRepository[Billing]):
    def __init__(self, db: Session):
        super().__init__(Billing, db)

    # ==================== Lookups ====================

    def latest_for_room(self, room_id: str) -> Optional[Billing]:
        stmt = (
            select(Billing)
            .where(Billing.room_id == room_id)
            .order_by(Billing.billing_month.desc(), Billing.created_at.desc())
        )
        return self.db.scalars(stmt).first()

    def find_for_room_month(self, room_id: str, billing_month: date) -> Optional[Billing]:
        stmt = select(Billing).where(
            Billing.room_id == room_id,
            Billing.billing_month == billing_month,
        )
        return self.db.scalars(stmt).first()

    def latest_for_resident(self, resident_id: str) -> Optional[Billing]:
        stmt = (
            select(Billing)
            .where(Billing.resident_id == resident_id)
            .order_by(Billing.billing_month.desc(), Billing.created_at.desc())
        )
        return self.db.scalars(stmt).first()

    def list_for_resident(self, resident_id: str, limit: int = 12) -> List[Billing]:
        stmt = (
            select(Billing)
            .where(Billing.resident_id == resident_id)
            .order_by(Billing.billing_month.desc(), Billing.created_at.desc())
            .limit(limit)
        )
        return list(self.db.scalars(stmt).all())

    def list_for_org(
        self,
        organization_id: str,
        status: Optional[PaymentStatus] = None,
        room_id: Optional[str] = None,
        billing_month: Optional[date] = None,
        limit: int = 200,
    ) -> List[Billing]:
        stmt = (
            select(Billing)
            .where(Billing.organization_id == organization_id)
            .options(selectinload(Billing.room), selectinload(Billing.resident))
        )
        if status is not None:
            stmt = stmt.where(Billing.payment_status == status)
        if room_id is not None:
            stmt = stmt.where(Billing.room_id == room_id)
        if billing_month is not None:
            stmt = stmt.where(Billing.billing_month == billing_month)
        stmt = stmt.order_by(Billing.billing_month.desc(), Billing.created_at.desc()).limit(limit)
        return list(self.db.scalars(stmt).all())

    def list_for_month(
        self,
        organization_id: str,
        billing_month: date,
        status: Optional[PaymentStatus] = None,
    ) -> List[Billing]:
        """Every bill of one month, ordered by room number."""
        stmt = (
            select(Billing)
            .join(Billing.room)
            .where(
                Billing.organization_id == organization_id,
                Billing.billing_month == billing_month,
            )
            .options(selectinload(Billing.room), selectinload(Billing.resident))
            .order_by(Room.number)
        )
        if status is not None:
            stmt = stmt.where(Billing.payment_status == status)
        return list(self.db.scalars(stmt).all())

    def list_pending(self, organization_ids: Optional[Iterable[str]] = None) -> List[Billing]:
        stmt = (
            select(Billing)
            .where(Billing.payment_status == PaymentStatus.PENDING)
            .options(selectinload(Billing.room), selectinload(Billing.resident))
            .order_by(Billing.billing_month, Billing.created_at)
        )
        if organization_ids is not None:
            stmt = stmt.where(Billing.organization_id.in_(list(organization_ids)))
        return list(self.db.scalars(stmt).all())

    # ==================== Aggregates ====================

    def count_for_room(self, room_id: str) -> int:
        stmt = select(func.count(Billing.id)).where(Billing.room_id == room_id)
        return self.db.scalar(stmt) or 0

    def paid_total_between(self, organization_id: str, start: datetime, end: datetime) -> Decimal:
        """Sum of Paid bills whose payment date falls in ``[start, end)``."""
        stmt = select(func.coalesce(func.sum(Billing.total_amount), 0)).where(
            Billing.organization_id == organization_id,
            Billing.payment_status == PaymentStatus.PAID,
            Billing.payment_date >= start,
            Billing.payment_date < end,
        )
        return Decimal(str(self.db.scalar(stmt) or 0))

    def outstanding_total(self, organization_id: str) -> Decimal:
        stmt = select(func.coalesce(func.sum(Billing.total_amount), 0)).where(
            Billing.organization_id == organization_id,
            Billing.payment_status.in_([PaymentStatus.PENDING, PaymentStatus.REVIEW]),
        )
        return Decimal(str(self.db.scalar(stmt) or 0))

    def count_by_status(self, organization_id: str, status: PaymentStatus) -> int:
        stmt = select(func.count(Billing.id)).where(
            Billing.organization_id == organization_id,
            Billing.payment_status == status,
        )
        return self.db.scalar(stmt) or 0
