# staysync/models/room/room.py
"""
Room model.

A rentable unit. Occupancy status is derived from the residents living in
the room and kept in sync by the tenancy lifecycle service.
"""

from decimal import Decimal
from typing import List

from sqlalchemy import Boolean, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staysync.models.base.base_model import BaseModel, enum_column
from staysync.models.base.enums import ResidentStatus, RoomStatus
from staysync.models.base.mixins import OrganizationScopedMixin, TimestampMixin

__all__ = ["Room"]


class Room(BaseModel, OrganizationScopedMixin, TimestampMixin):
    """
    Rentable room.

    Invariant: ``status`` is Occupied iff at least one Active resident
    references the room (Reserved is set only by booking confirmation).
    """

    __tablename__ = "rooms"
    __table_args__ = (
        UniqueConstraint("organization_id", "number", name="uq_room_number_per_organization"),
    )

    number: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[RoomStatus] = mapped_column(
        enum_column(RoomStatus),
        nullable=False,
        default=RoomStatus.AVAILABLE,
        index=True,
    )

    # Check-in defaults
    default_contract_months: Mapped[int] = mapped_column(Integer, nullable=False, default=12)
    default_deposit: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    charge_common_area: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    organization: Mapped["Organization"] = relationship("Organization", back_populates="rooms")
    residents: Mapped[List["Resident"]] = relationship(
        "Resident",
        back_populates="room",
        order_by="Resident.check_in_date",
    )
    billings: Mapped[List["Billing"]] = relationship(
        "Billing",
        back_populates="room",
        order_by="Billing.created_at.desc()",
    )

    @property
    def active_residents(self) -> List["Resident"]:
        return [r for r in self.residents if r.status == ResidentStatus.ACTIVE]
