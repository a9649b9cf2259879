# staysync/models/billing/billing.py
"""
Billing model.

A bill is an immutable snapshot of one room's monthly charges: meter
readings, the rates in force when it was created, flat fees and the total.
Only the payment fields change after creation, and bills are never deleted.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, DateTime, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staysync.models.base.base_model import BaseModel, enum_column
from staysync.models.base.enums import PaymentStatus
from staysync.models.base.mixins import OrganizationScopedMixin, TimestampMixin

__all__ = ["Billing"]


def _money(default: str = "0") -> Mapped[Decimal]:
    return mapped_column(Numeric(12, 2), nullable=False, default=Decimal(default))


class Billing(BaseModel, OrganizationScopedMixin, TimestampMixin):
    __tablename__ = "billings"
    __table_args__ = (
        Index("ix_billing_room_month", "room_id", "billing_month"),
        Index("ix_billing_status_month", "payment_status", "billing_month"),
    )

    room_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("rooms.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    resident_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("residents.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    # First day of the billed month
    billing_month: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    # Snapshot of the room price
    room_price: Mapped[Decimal] = _money()

    # Meter readings
    water_meter_last: Mapped[Decimal] = _money()
    water_meter_current: Mapped[Decimal] = _money()
    water_units: Mapped[Decimal] = _money()
    water_rate: Mapped[Decimal] = _money()
    water_cost: Mapped[Decimal] = _money()

    electric_meter_last: Mapped[Decimal] = _money()
    electric_meter_current: Mapped[Decimal] = _money()
    electric_units: Mapped[Decimal] = _money()
    electric_rate: Mapped[Decimal] = _money()
    electric_cost: Mapped[Decimal] = _money()

    # Flat fees
    trash_fee: Mapped[Decimal] = _money()
    internet_fee: Mapped[Decimal] = _money()
    other_fees: Mapped[Decimal] = _money()
    common_fee: Mapped[Decimal] = _money()

    total_amount: Mapped[Decimal] = _money()

    # Payment workflow
    payment_status: Mapped[PaymentStatus] = mapped_column(
        enum_column(PaymentStatus),
        nullable=False,
        default=PaymentStatus.PENDING,
        index=True,
    )
    payment_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    slip_image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    reviewed_by: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    review_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    room: Mapped["Room"] = relationship("Room", back_populates="billings")
    resident: Mapped[Optional["Resident"]] = relationship("Resident", back_populates="billings")

    @property
    def room_number(self) -> Optional[str]:
        return self.room.number if self.room is not None else None

    @property
    def resident_name(self) -> Optional[str]:
        return self.resident.full_name if self.resident is not None else None
