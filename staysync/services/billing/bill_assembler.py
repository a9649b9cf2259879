"""
Bill assembly: single-room and bulk monthly billing.

A bill freezes the room price, both meter readings, the rates in force and
the flat fees at creation time. ``total_amount`` is computed once and never
recomputed, so later rate changes never alter existing bills.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from staysync.config.settings import Settings
from staysync.core.exceptions import BillingNotFoundError, RoomNotFoundError
from staysync.models import Billing, Resident, Room, SystemConfig
from staysync.models.base.enums import PaymentStatus
from staysync.repositories.billing import BillingRepository
from staysync.repositories.resident import ResidentRepository
from staysync.repositories.room import RoomRepository
from staysync.schemas.billing import BillCreate, BulkBillError, BulkBillRequest, BulkBillResult
from staysync.services.base import BaseService
from staysync.services.billing.meter_calculator import calculate_meter_charge
from staysync.services.billing.rates import RateSet
from staysync.services.communication import message_templates as templates
from staysync.services.communication.notification_dispatcher import NotificationDispatcher
from staysync.services.system.system_config_service import SystemConfigService
from staysync.utils.date_utils import month_start, parse_month, today as utc_today


@dataclass(frozen=True)
class MeterReadings:
    water_last: Decimal
    water_current: Decimal
    electric_last: Decimal
    electric_current: Decimal


def compute_total(
    room_price: Decimal,
    water_cost: Decimal,
    electric_cost: Decimal,
    rates: RateSet,
) -> Decimal:
    """Rent plus both utility costs plus every flat fee."""
    return (
        room_price
        + water_cost
        + electric_cost
        + rates.trash_fee
        + rates.internet_fee
        + rates.other_fees
        + rates.common_fee
    )


def build_bill(
    organization_id: str,
    room: Room,
    resident: Optional[Resident],
    billing_month: date,
    readings: MeterReadings,
    rates: RateSet,
) -> Billing:
    """
    Assemble an unsaved ``Billing`` snapshot.

    Args:
        organization_id: Owning organization
        room: Billed room (price is snapshotted)
        resident: Billing resident, if the room has one
        billing_month: First day of the billed month
        readings: Last/current meter readings
        rates: Resolved rate set

    Returns:
        A Pending bill with its total computed
    """
    water = calculate_meter_charge(readings.water_last, readings.water_current, rates.water_rate)
    electric = calculate_meter_charge(readings.electric_last, readings.electric_current, rates.electric_rate)

    return Billing(
        organization_id=organization_id,
        room_id=room.id,
        resident_id=resident.id if resident else None,
        billing_month=billing_month,
        room_price=room.price,
        water_meter_last=readings.water_last,
        water_meter_current=readings.water_current,
        water_units=water.units,
        water_rate=rates.water_rate,
        water_cost=water.cost,
        electric_meter_last=readings.electric_last,
        electric_meter_current=readings.electric_current,
        electric_units=electric.units,
        electric_rate=rates.electric_rate,
        electric_cost=electric.cost,
        trash_fee=rates.trash_fee,
        internet_fee=rates.internet_fee,
        other_fees=rates.other_fees,
        common_fee=rates.common_fee,
        total_amount=compute_total(room.price, water.cost, electric.cost, rates),
        payment_status=PaymentStatus.PENDING,
    )


class BillAssemblerService(BaseService):
    """
    Creates bills and sends invoice notifications.

    Notification failures are logged by the dispatcher and never affect the
    created bill.
    """

    def __init__(self, db_session: Session, settings: Settings, dispatcher: NotificationDispatcher):
        super().__init__(db_session)
        self.settings = settings
        self.dispatcher = dispatcher
        self.bills = BillingRepository(db_session)
        self.rooms = RoomRepository(db_session)
        self.residents = ResidentRepository(db_session)
        self.config_service = SystemConfigService(db_session, settings)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_bill(self, organization_id: str, bill_id: str) -> Billing:
        bill = self.bills.get_in_org(bill_id, organization_id)
        if bill is None:
            raise BillingNotFoundError(bill_id)
        return bill

    def list_bills(
        self,
        organization_id: str,
        status: Optional[PaymentStatus] = None,
        room_id: Optional[str] = None,
        billing_month: Optional[date] = None,
    ) -> List[Billing]:
        return self.bills.list_for_org(organization_id, status=status, room_id=room_id, billing_month=billing_month)

    def latest_for_room(self, organization_id: str, room_id: str) -> Optional[Billing]:
        self._get_room(organization_id, room_id)
        return self.bills.latest_for_room(room_id)

    def billing_resident(self, room_id: str) -> Optional[Resident]:
        """
        The resident a room's bill is addressed to: the main tenant when
        there is one, otherwise the earliest checked-in active resident.
        """
        active = self.residents.active_in_room(room_id)
        return active[0] if active else None

    # -------------------------------------------------------------------------
    # Single bill
    # -------------------------------------------------------------------------

    def create_bill(self, organization_id: str, data: BillCreate, today: Optional[date] = None) -> Billing:
        """
        Create one room's bill for a month.

        Raises:
            RoomNotFoundError: If the room is not in the organization
        """
        room = self._get_room(organization_id, data.room_id)
        config = self.config_service.get_or_create(organization_id)
        billing_month = parse_month(data.bill_month) or month_start(today or utc_today())

        rates = RateSet.from_config(config, room).with_overrides(
            trash_fee=data.trash_fee,
            internet_fee=data.internet_fee,
            other_fees=data.other_fees,
            common_fee=data.common_fee,
        )
        readings = MeterReadings(
            water_last=data.water_meter_last,
            water_current=data.water_meter_current,
            electric_last=data.electric_meter_last,
            electric_current=data.electric_meter_current,
        )
        resident = self.billing_resident(room.id)

        with self.transaction():
            bill = self.bills.create(build_bill(organization_id, room, resident, billing_month, readings, rates))

        self._logger.info(
            "Bill created",
            extra={"bill_id": bill.id, "room_id": room.id, "total_amount": str(bill.total_amount)},
        )
        self._send_invoice(bill, room, resident, config)
        return bill

    # -------------------------------------------------------------------------
    # Bulk billing
    # -------------------------------------------------------------------------

    def create_bulk(self, organization_id: str, data: BulkBillRequest) -> BulkBillResult:
        """
        Bill many rooms for one month, sequentially and independently.

        Each entry commits on its own; one failing entry never aborts the
        others. Rooms that do not exist are skipped, as are entries missing a
        reading. A room already billed for the month is skipped with an error
        entry because bills are never replaced.
        """
        billing_month = parse_month(data.bill_month)
        config = self.config_service.get_or_create(organization_id)
        result = BulkBillResult()

        for entry in data.entries:
            if entry.water_current is None or entry.electric_current is None:
                result.skipped += 1
                continue

            room = self.rooms.get_in_org(entry.room_id, organization_id)
            if room is None:
                self._logger.warning("Bulk billing skipped unknown room", extra={"room_id": entry.room_id})
                result.skipped += 1
                continue

            if self.bills.find_for_room_month(room.id, billing_month) is not None:
                result.skipped += 1
                result.errors.append(BulkBillError(room_id=room.id, reason=f"Room {room.number} is already billed for {data.bill_month}"))
                continue

            previous = self.bills.latest_for_room(room.id)
            readings = MeterReadings(
                water_last=self._last_reading(entry.water_last, previous, "water_meter_current"),
                water_current=entry.water_current,
                electric_last=self._last_reading(entry.electric_last, previous, "electric_meter_current"),
                electric_current=entry.electric_current,
            )
            rates = RateSet.from_config(config, room).with_overrides(
                water_rate=data.water_rate,
                electric_rate=data.electric_rate,
                trash_fee=data.trash_fee,
                internet_fee=data.internet_fee,
                other_fees=data.other_fees,
            )
            resident = self.billing_resident(room.id)

            try:
                with self.transaction():
                    bill = self.bills.create(build_bill(organization_id, room, resident, billing_month, readings, rates))
            except Exception as e:
                self._logger.error(
                    f"Bulk billing failed for room: {e}",
                    exc_info=True,
                    extra={"room_id": room.id},
                )
                result.errors.append(BulkBillError(room_id=room.id, reason=str(e)))
                continue

            result.created += 1
            result.bill_ids.append(bill.id)
            self._send_invoice(bill, room, resident, config)

        self._logger.info(
            "Bulk billing finished",
            extra={"created": result.created, "skipped": result.skipped, "errors": len(result.errors)},
        )
        return result

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _get_room(self, organization_id: str, room_id: str) -> Room:
        room = self.rooms.get_in_org(room_id, organization_id)
        if room is None:
            raise RoomNotFoundError(room_id)
        return room

    @staticmethod
    def _last_reading(explicit: Optional[Decimal], previous: Optional[Billing], field: str) -> Decimal:
        if explicit is not None:
            return explicit
        if previous is not None:
            return getattr(previous, field)
        return Decimal("0")

    def _send_invoice(
        self,
        bill: Billing,
        room: Room,
        resident: Optional[Resident],
        config: Optional[SystemConfig],
    ) -> None:
        recipient = resident.line_user_id if resident else None
        link = templates.pay_url(self.settings.APP_PUBLIC_URL, bill.id)
        self.dispatcher.push_text(
            recipient,
            templates.invoice(bill, room.number, config, link),
            context={"purpose": "invoice", "bill_id": bill.id},
        )


__all__ = ["BillAssemblerService", "MeterReadings", "build_bill", "compute_total"]
