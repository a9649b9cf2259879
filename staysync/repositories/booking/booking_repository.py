"""Booking repository."""

from typing import List

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from staysync.models import Booking
from staysync.models.base.enums import BookingStatus
from staysync.repositories.base import BaseRepository

OPEN_BOOKING_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


class BookingRepository(BaseRepository[Booking]):
    def __init__(self, db: Session):
        super().__init__(Booking, db)

    def has_open_booking(self, room_id: str) -> bool:
        stmt = select(func.count(Booking.id)).where(
            Booking.room_id == room_id,
            Booking.status.in_(OPEN_BOOKING_STATUSES),
        )
        return (self.db.scalar(stmt) or 0) > 0

    def list_for_user(self, user_id: str) -> List[Booking]:
        stmt = select(Booking).where(Booking.user_id == user_id).order_by(Booking.created_at.desc())
        return list(self.db.scalars(stmt).all())
