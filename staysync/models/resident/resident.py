# staysync/models/resident/resident.py
"""
Resident model covering the whole tenancy: check-in, contract, deposit and
checkout.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staysync.models.base.base_model import BaseModel, enum_column
from staysync.models.base.enums import DepositStatus, ResidentStatus
from staysync.models.base.mixins import OrganizationScopedMixin, TimestampMixin
from staysync.utils.date_utils import utc_now

__all__ = ["Resident"]


class Resident(BaseModel, OrganizationScopedMixin, TimestampMixin):
    """
    A person renting (or having rented) a room.

    ``room_id`` is cleared at checkout; ``is_main_tenant`` is true for exactly
    one Active resident per occupied room.
    """

    __tablename__ = "residents"

    room_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("rooms.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    line_user_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    line_verify_code: Mapped[Optional[str]] = mapped_column(String(10), nullable=True, unique=True)

    status: Mapped[ResidentStatus] = mapped_column(
        enum_column(ResidentStatus),
        nullable=False,
        default=ResidentStatus.ACTIVE,
        index=True,
    )
    is_main_tenant: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    check_in_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utc_now)
    check_out_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Contract
    contract_start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    contract_end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    contract_duration_months: Mapped[Optional[int]] = mapped_column(nullable=True)

    # Deposit
    deposit: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    deposit_status: Mapped[DepositStatus] = mapped_column(
        enum_column(DepositStatus),
        nullable=False,
        default=DepositStatus.HELD,
    )
    deposit_returned_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    deposit_returned_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    deposit_forfeit_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    room: Mapped[Optional["Room"]] = relationship("Room", back_populates="residents")
    billings: Mapped[List["Billing"]] = relationship(
        "Billing",
        back_populates="resident",
        order_by="Billing.created_at.desc()",
    )

    @property
    def is_active(self) -> bool:
        return self.status == ResidentStatus.ACTIVE
