# staysync/models/booking/booking.py
"""
Booking request model. A confirmed booking reserves its room.
"""

from datetime import date
from typing import Optional

from sqlalchemy import Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staysync.models.base.base_model import BaseModel, enum_column
from staysync.models.base.enums import BookingStatus
from staysync.models.base.mixins import OrganizationScopedMixin, TimestampMixin

__all__ = ["Booking"]


class Booking(BaseModel, OrganizationScopedMixin, TimestampMixin):
    __tablename__ = "bookings"

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    room_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    check_in_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[BookingStatus] = mapped_column(
        enum_column(BookingStatus),
        nullable=False,
        default=BookingStatus.PENDING,
        index=True,
    )
    special_request: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    room: Mapped["Room"] = relationship("Room")
    user: Mapped["User"] = relationship("User")
