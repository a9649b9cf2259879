"""
Room management.
"""

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from staysync.core.exceptions import ConflictError, DuplicateEntryError, RoomNotFoundError
from staysync.models import Room
from staysync.models.base.enums import RoomStatus
from staysync.repositories.billing import BillingRepository
from staysync.repositories.resident import ResidentRepository
from staysync.repositories.room import RoomRepository
from staysync.schemas.room import RoomCreate, RoomUpdate
from staysync.services.base import BaseService


class RoomService(BaseService):
    def __init__(self, db_session: Session):
        super().__init__(db_session)
        self.rooms = RoomRepository(db_session)
        self.residents = ResidentRepository(db_session)
        self.bills = BillingRepository(db_session)

    def list_rooms(self, organization_id: str, status: Optional[RoomStatus] = None) -> List[Room]:
        return self.rooms.list_for_org(organization_id, status=status)

    def list_available(self, organization_id: str) -> List[Room]:
        return self.rooms.list_for_org(organization_id, status=RoomStatus.AVAILABLE)

    def get_room(self, organization_id: str, room_id: str) -> Room:
        room = self.rooms.get_in_org(room_id, organization_id)
        if room is None:
            raise RoomNotFoundError(room_id)
        self.db.refresh(room)
        return room

    def create_room(self, organization_id: str, data: RoomCreate) -> Room:
        """
        Raises:
            DuplicateEntryError: If the number is already used in the organization
        """
        if self.rooms.get_by_number(organization_id, data.number) is not None:
            raise DuplicateEntryError("Room", "number", data.number)

        room = Room(organization_id=organization_id, status=RoomStatus.AVAILABLE, **data.model_dump())
        with self.transaction():
            self.rooms.create(room)
        self._logger.info("Room created", extra={"room_id": room.id, "number": room.number})
        return room

    def update_room(self, organization_id: str, room_id: str, data: RoomUpdate) -> Tuple[Room, Dict[str, Any]]:
        room = self.get_room(organization_id, room_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        number = changes.get("number")
        if number and number != room.number:
            existing = self.rooms.get_by_number(organization_id, number)
            if existing is not None and existing.id != room.id:
                raise DuplicateEntryError("Room", "number", number)

        diff = {
            field: {"from": getattr(room, field), "to": value}
            for field, value in changes.items()
            if getattr(room, field) != value
        }
        with self.transaction():
            self.rooms.update(room, changes)
        return room, diff

    def delete_room(self, organization_id: str, room_id: str) -> Room:
        """
        Delete a room with no tenancy or billing history.

        Raises:
            ConflictError: If residents live there or any bill references it
        """
        room = self.get_room(organization_id, room_id)
        if self.residents.count_active_in_room(room.id) > 0:
            raise ConflictError("Room has active residents and cannot be deleted")
        if self.bills.count_for_room(room.id) > 0:
            raise ConflictError("Room has billing history and cannot be deleted")

        with self.transaction():
            self.rooms.delete(room)
        self._logger.info("Room deleted", extra={"room_id": room.id, "number": room.number})
        return room
