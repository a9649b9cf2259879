"""
Building-level (central) meter readings used for utility cost analysis.
"""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from staysync.models import CentralMeter
from staysync.repositories.utility import CentralMeterRepository
from staysync.schemas.report import CentralMeterCreate
from staysync.services.base import BaseService
from staysync.services.billing.meter_calculator import calculate_meter_charge
from staysync.utils.date_utils import parse_month


def _reading(explicit: Optional[Decimal], previous: Optional[CentralMeter], field: str) -> Decimal:
    if explicit is not None:
        return explicit
    if previous is not None:
        return getattr(previous, field)
    return Decimal("0")


class CentralMeterService(BaseService):
    def __init__(self, db_session: Session):
        super().__init__(db_session)
        self.meters = CentralMeterRepository(db_session)

    def list_recent(self, organization_id: str, limit: int = 24) -> List[CentralMeter]:
        return self.meters.list_recent(organization_id, limit=limit)

    def record(self, organization_id: str, data: CentralMeterCreate) -> CentralMeter:
        """
        Store a month's utility-company readings.

        Last readings default to the previous record's current readings; a
        total cost that is not given is usage times the utility rate.
        """
        previous = self.meters.latest(organization_id)
        water_last = _reading(data.water_meter_last, previous, "water_meter_current")
        electric_last = _reading(data.electric_meter_last, previous, "electric_meter_current")

        water = calculate_meter_charge(water_last, data.water_meter_current, data.water_rate_from_utility)
        electric = calculate_meter_charge(electric_last, data.electric_meter_current, data.electric_rate_from_utility)

        meter = CentralMeter(
            organization_id=organization_id,
            month=parse_month(data.month),
            water_meter_last=water_last,
            water_meter_current=data.water_meter_current,
            water_usage=water.units,
            water_rate_from_utility=data.water_rate_from_utility,
            water_total_cost=data.water_total_cost if data.water_total_cost is not None else water.cost,
            electric_meter_last=electric_last,
            electric_meter_current=data.electric_meter_current,
            electric_usage=electric.units,
            electric_rate_from_utility=data.electric_rate_from_utility,
            electric_total_cost=data.electric_total_cost if data.electric_total_cost is not None else electric.cost,
            trash_cost=data.trash_cost,
            internet_cost=data.internet_cost,
            note=data.note,
        )
        with self.transaction():
            self.meters.create(meter)
        self._logger.info("Central meter recorded", extra={"meter_id": meter.id, "month": data.month})
        return meter
