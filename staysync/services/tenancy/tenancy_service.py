"""
Tenancy lifecycle: check-in, profile edits and transfers, checkout,
main-tenant designation and LINE link codes.

Every operation that touches more than one row runs inside a single
transaction; room occupancy and the main-tenant flag are reconciled in the
same transaction as the resident change that affects them.
"""

import secrets
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from staysync.config.settings import Settings
from staysync.core.exceptions import (
    ConflictError,
    InvalidStateTransitionError,
    ResidentNotFoundError,
    RoomNotFoundError,
    ValidationError,
)
from staysync.models import Billing, Resident, Room
from staysync.models.base.enums import DepositStatus, ResidentStatus, RoomStatus
from staysync.repositories.billing import BillingRepository
from staysync.repositories.resident import ResidentRepository
from staysync.repositories.room import RoomRepository
from staysync.schemas.resident import CheckInRequest, CheckoutRequest, ResidentUpdate
from staysync.services.base import BaseService
from staysync.utils.date_utils import add_months, today as utc_today, utc_now

EARLY_TERMINATION_REASON = "Early termination before contract end"
VERIFY_CODE_ATTEMPTS = 20


def resolve_contract_months(data: CheckInRequest, room: Room) -> int:
    """Catalog duration, else custom duration, else the room default."""
    if data.contract_duration is not None:
        return data.contract_duration
    if data.custom_duration_months is not None:
        return data.custom_duration_months
    return room.default_contract_months


def classify_checkout(contract_end: Optional[date], today: date, grace_days: int) -> bool:
    """
    True when a checkout on ``today`` terminates the contract early.

    Early means ``today + grace_days`` is still before the contract end, so
    checking out up to ``grace_days`` ahead of the end date counts as on time.
    """
    if contract_end is None:
        return False
    return today + timedelta(days=grace_days) < contract_end


@dataclass
class CheckoutOutcome:
    resident: Resident
    early_termination: bool
    deposit_returned_amount: Decimal
    deposit_status: DepositStatus
    room_id: str
    room_status: RoomStatus


class TenancyService(BaseService):
    def __init__(self, db_session: Session, settings: Settings):
        super().__init__(db_session)
        self.settings = settings
        self.rooms = RoomRepository(db_session)
        self.residents = ResidentRepository(db_session)
        self.bills = BillingRepository(db_session)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def list_active(self, organization_id: str) -> List[Resident]:
        return self.residents.list_active(organization_id)

    def get_resident(self, organization_id: str, resident_id: str) -> Resident:
        resident = self.residents.get_in_org(resident_id, organization_id)
        if resident is None:
            raise ResidentNotFoundError(resident_id)
        return resident

    def get_detail(self, organization_id: str, resident_id: str) -> Tuple[Resident, List[Billing]]:
        """Resident with their twelve most recent bills."""
        resident = self.get_resident(organization_id, resident_id)
        return resident, self.bills.list_for_resident(resident.id, limit=12)

    # -------------------------------------------------------------------------
    # Check-in
    # -------------------------------------------------------------------------

    def check_in(
        self,
        organization_id: str,
        room_id: str,
        data: CheckInRequest,
        now: Optional[datetime] = None,
    ) -> Resident:
        """
        Check a resident into a room.

        The resident becomes main tenant when nobody else is living in the
        room, and the room becomes Occupied.

        Raises:
            RoomNotFoundError: If the room is not in the organization
        """
        room = self._get_room(organization_id, room_id)
        months = resolve_contract_months(data, room)
        is_first = self.residents.count_active_in_room(room.id) == 0

        resident = Resident(
            organization_id=organization_id,
            room_id=room.id,
            full_name=data.full_name,
            phone=data.phone,
            line_user_id=data.line_user_id,
            status=ResidentStatus.ACTIVE,
            is_main_tenant=is_first,
            check_in_date=now or utc_now(),
            contract_start_date=data.contract_start_date,
            contract_end_date=add_months(data.contract_start_date, months),
            contract_duration_months=months,
            deposit=data.deposit if data.deposit is not None else room.default_deposit,
            deposit_status=DepositStatus.HELD,
        )

        with self.transaction():
            self.residents.create(resident)
            room.status = RoomStatus.OCCUPIED

        self._logger.info(
            "Resident checked in",
            extra={"resident_id": resident.id, "room_id": room.id, "contract_months": months},
        )
        return resident

    # -------------------------------------------------------------------------
    # Profile edits and transfers
    # -------------------------------------------------------------------------

    def update_resident(
        self,
        organization_id: str,
        resident_id: str,
        data: ResidentUpdate,
    ) -> Tuple[Resident, Dict[str, Any]]:
        """
        Edit a resident; a different ``room_id`` transfers them.

        The transfer moves the resident, occupies the target room, frees the
        source room when nobody is left and reconciles the main tenant of
        both rooms, all in one transaction.

        Returns:
            The resident and a ``{field: {"from", "to"}}`` diff
        """
        resident = self.get_resident(organization_id, resident_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        target_room_id = changes.pop("room_id", None)

        target: Optional[Room] = None
        if target_room_id is not None and target_room_id != resident.room_id:
            if not resident.is_active:
                raise InvalidStateTransitionError(
                    "Checked-out residents cannot be transferred",
                    current_state=ResidentStatus(resident.status).value,
                    event="transfer",
                )
            target = self._get_room(organization_id, target_room_id)

        diff = {
            field: {"from": getattr(resident, field), "to": value}
            for field, value in changes.items()
            if getattr(resident, field) != value
        }

        with self.transaction():
            self.residents.update(resident, changes)
            if target is not None:
                source_room_id = resident.room_id
                diff["room_id"] = {"from": source_room_id, "to": target.id}
                self._transfer(resident, source_room_id, target)

        if target is not None:
            self.db.refresh(resident)
            self._logger.info(
                "Resident transferred",
                extra={
                    "resident_id": resident.id,
                    "from_room_id": diff["room_id"]["from"],
                    "to_room_id": target.id,
                },
            )
        return resident, diff

    def _transfer(self, resident: Resident, source_room_id: Optional[str], target: Room) -> None:
        target_has_residents = self.residents.count_active_in_room(target.id, exclude_id=resident.id) > 0
        resident.room_id = target.id
        resident.is_main_tenant = not target_has_residents
        target.status = RoomStatus.OCCUPIED
        if source_room_id is not None:
            self._reconcile_room(source_room_id, departing_id=resident.id)

    def _reconcile_room(self, room_id: str, departing_id: str) -> RoomStatus:
        """
        Restore the room invariants after ``departing_id`` leaves.

        Frees the room when no Active resident remains, otherwise keeps it
        Occupied and makes sure one of the remaining residents is the main
        tenant.
        """
        room = self.rooms.get_by_id(room_id)
        remaining = self.residents.active_in_room(room_id, exclude_id=departing_id)
        if not remaining:
            room.status = RoomStatus.AVAILABLE
            return room.status

        room.status = RoomStatus.OCCUPIED
        if not any(r.is_main_tenant for r in remaining):
            remaining[0].is_main_tenant = True
            self._logger.info(
                "Main tenant promoted",
                extra={"room_id": room_id, "resident_id": remaining[0].id},
            )
        return room.status

    # -------------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------------

    def checkout(
        self,
        organization_id: str,
        resident_id: str,
        data: CheckoutRequest,
        today: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> CheckoutOutcome:
        """
        Check a resident out and settle the deposit.

        Early termination forfeits the whole deposit. On time, the returned
        amount may be anything from zero to the deposit held.

        Raises:
            ResidentNotFoundError: If the resident is unknown or has no room
            InvalidStateTransitionError: If the resident already checked out
            ValidationError: If the returned amount exceeds the deposit
        """
        resident = self.get_resident(organization_id, resident_id)
        if not resident.is_active:
            raise InvalidStateTransitionError(
                "Resident has already checked out",
                current_state=ResidentStatus(resident.status).value,
                event="checkout",
            )
        if resident.room_id is None:
            raise ResidentNotFoundError(resident.id, message="Resident is not assigned to a room")

        today = today or utc_today()
        early = classify_checkout(resident.contract_end_date, today, self.settings.CHECKOUT_GRACE_DAYS)
        reason = data.deposit_forfeit_reason

        if early:
            returned = Decimal("0")
            deposit_status = DepositStatus.FORFEITED
            reason = reason or EARLY_TERMINATION_REASON
        else:
            returned = data.deposit_returned_amount if data.deposit_returned_amount is not None else resident.deposit
            if returned < 0 or returned > resident.deposit:
                raise ValidationError(
                    f"Returned amount must be between 0 and the deposit of {resident.deposit}",
                    field="deposit_returned_amount",
                )
            deposit_status = DepositStatus.RETURNED if returned > 0 else DepositStatus.FORFEITED

        room_id = resident.room_id
        timestamp = now or utc_now()
        with self.transaction():
            resident.status = ResidentStatus.CHECKED_OUT
            resident.check_out_date = timestamp
            resident.deposit_returned_amount = returned
            resident.deposit_returned_date = timestamp
            resident.deposit_status = deposit_status
            resident.deposit_forfeit_reason = reason
            resident.is_main_tenant = False
            resident.room_id = None
            room_status = self._reconcile_room(room_id, departing_id=resident.id)

        self._logger.info(
            "Resident checked out",
            extra={
                "resident_id": resident.id,
                "room_id": room_id,
                "early_termination": early,
                "deposit_status": deposit_status.value,
            },
        )
        return CheckoutOutcome(
            resident=resident,
            early_termination=early,
            deposit_returned_amount=returned,
            deposit_status=deposit_status,
            room_id=room_id,
            room_status=room_status,
        )

    # -------------------------------------------------------------------------
    # Main tenant and LINE link code
    # -------------------------------------------------------------------------

    def set_main_tenant(self, organization_id: str, resident_id: str) -> Resident:
        """Make ``resident_id`` the only main tenant of their room."""
        resident = self.get_resident(organization_id, resident_id)
        if not resident.is_active or resident.room_id is None:
            raise ConflictError("Only active residents with a room can be main tenant")

        with self.transaction():
            self.residents.unset_main_tenant(resident.room_id)
            resident.is_main_tenant = True

        self._logger.info("Main tenant set", extra={"resident_id": resident.id, "room_id": resident.room_id})
        return resident

    def generate_verify_code(self, organization_id: str, resident_id: str) -> str:
        """
        Issue a fresh ``#NNNN`` code the resident sends to the chat bot to
        link their LINE account.
        """
        resident = self.get_resident(organization_id, resident_id)
        for _ in range(VERIFY_CODE_ATTEMPTS):
            code = f"#{secrets.randbelow(10000):04d}"
            holder = self.residents.get_by_verify_code(code)
            if holder is None or holder.id == resident.id:
                break
        else:
            raise ConflictError("Could not allocate a unique verification code, try again")

        with self.transaction():
            resident.line_verify_code = code

        self._logger.info("Verification code issued", extra={"resident_id": resident.id})
        return code

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _get_room(self, organization_id: str, room_id: str) -> Room:
        room = self.rooms.get_in_org(room_id, organization_id)
        if room is None:
            raise RoomNotFoundError(room_id)
        return room


__all__ = [
    "TenancyService",
    "CheckoutOutcome",
    "classify_checkout",
    "resolve_contract_months",
    "EARLY_TERMINATION_REASON",
]
