"""
Room bookings.

Transitions:

    Pending   -> Confirmed | Rejected | Cancelled
    Confirmed -> Completed | Cancelled

Confirming reserves the room (refused while residents live there); rejecting or cancelling releases a reserved
room back to Available.
"""

from typing import Dict, FrozenSet, List

from sqlalchemy.orm import Session

from staysync.core.exceptions import ConflictError, InvalidStateTransitionError, ResourceNotFoundError, RoomNotFoundError
from staysync.models import Booking, User
from staysync.models.base.enums import BookingStatus, RoomStatus, UserRole
from staysync.repositories.booking import BookingRepository
from staysync.repositories.resident import ResidentRepository
from staysync.repositories.room import RoomRepository
from staysync.schemas.booking import BookingCreate
from staysync.services.base import BaseService

BOOKING_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.REJECTED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.REJECTED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
}


def check_booking_transition(current: BookingStatus, target: BookingStatus) -> None:
    current = BookingStatus(current)
    if target not in BOOKING_TRANSITIONS[current]:
        raise InvalidStateTransitionError(
            f"Booking cannot move from {current.value} to {target.value}",
            current_state=current.value,
            event=target.value,
        )


class BookingService(BaseService):
    def __init__(self, db_session: Session):
        super().__init__(db_session)
        self.bookings = BookingRepository(db_session)
        self.rooms = RoomRepository(db_session)
        self.residents = ResidentRepository(db_session)

    def list_for(self, user: User) -> List[Booking]:
        """Tenants see their own bookings; staff see the organization's."""
        if user.role == UserRole.TENANT:
            return self.bookings.list_for_user(user.id)
        return self.bookings.list_in_org(user.organization_id, order_by=[Booking.created_at.desc()])

    def create(self, user: User, data: BookingCreate) -> Booking:
        """
        Raises:
            RoomNotFoundError: If the room is not in the user's organization
            ConflictError: If the room is not available or already booked
        """
        room = self.rooms.get_in_org(data.room_id, user.organization_id)
        if room is None:
            raise RoomNotFoundError(data.room_id)
        if room.status != RoomStatus.AVAILABLE:
            raise ConflictError(f"Room {room.number} is not available")
        if self.bookings.has_open_booking(room.id):
            raise ConflictError(f"Room {room.number} already has an open booking")

        booking = Booking(
            organization_id=user.organization_id,
            user_id=user.id,
            room_id=room.id,
            check_in_date=data.check_in_date,
            special_request=data.special_request,
            status=BookingStatus.PENDING,
        )
        with self.transaction():
            self.bookings.create(booking)
        self._logger.info("Booking requested", extra={"booking_id": booking.id, "room_id": room.id})
        return booking

    def update_status(self, organization_id: str, booking_id: str, status: BookingStatus) -> Booking:
        booking = self.bookings.get_in_org(booking_id, organization_id)
        if booking is None:
            raise ResourceNotFoundError("Booking", booking_id)
        check_booking_transition(booking.status, status)

        room = self.rooms.get_by_id(booking.room_id)
        if status == BookingStatus.CONFIRMED and self.residents.count_active_in_room(room.id) > 0:
            raise ConflictError(f"Room {room.number} is occupied and cannot be reserved")

        with self.transaction():
            booking.status = status
            if status == BookingStatus.CONFIRMED:
                room.status = RoomStatus.RESERVED
            elif status in (BookingStatus.REJECTED, BookingStatus.CANCELLED):
                if room.status == RoomStatus.RESERVED and self.residents.count_active_in_room(room.id) == 0:
                    room.status = RoomStatus.AVAILABLE

        self._logger.info(
            "Booking status changed",
            extra={"booking_id": booking.id, "status": status.value, "room_status": room.status.value},
        )
        return booking
