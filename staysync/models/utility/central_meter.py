# staysync/models/utility/central_meter.py
"""
Building-level utility meter record, one per month.

The monthly report compares what residents were billed against what the
utility companies charged the building.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from staysync.models.base.base_model import BaseModel
from staysync.models.base.mixins import OrganizationScopedMixin, TimestampMixin

__all__ = ["CentralMeter"]


class CentralMeter(BaseModel, OrganizationScopedMixin, TimestampMixin):
    __tablename__ = "central_meters"

    month: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    water_meter_last: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    water_meter_current: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    water_usage: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    water_rate_from_utility: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    water_total_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))

    electric_meter_last: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    electric_meter_current: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    electric_usage: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    electric_rate_from_utility: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    electric_total_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))

    trash_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    internet_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
