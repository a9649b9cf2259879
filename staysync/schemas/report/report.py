"""
Dashboard, monthly report and central meter schemas.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator

from staysync.schemas.common.base import (
    BaseResponseSchema,
    BaseSchema,
    NonNegativeMoney,
    validate_month_string,
)

__all__ = [
    "RevenuePoint",
    "DashboardSummary",
    "IncomeBreakdown",
    "ExpenseBreakdown",
    "ReportStats",
    "MonthlyReport",
    "CentralMeterCreate",
    "CentralMeterResponse",
]


class RevenuePoint(BaseSchema):
    month: str
    revenue: Decimal


class DashboardSummary(BaseSchema):
    revenue_this_month: Decimal = Decimal("0")
    outstanding: Decimal = Decimal("0")
    pending_count: int = 0
    review_count: int = 0
    total_rooms: int = 0
    occupied_rooms: int = 0
    available_rooms: int = 0
    reserved_rooms: int = 0
    occupancy_rate: float = 0.0
    active_issues: int = 0
    revenue_trend: List[RevenuePoint] = []


class IncomeBreakdown(BaseSchema):
    rent: Decimal = Decimal("0")
    water: Decimal = Decimal("0")
    electric: Decimal = Decimal("0")
    trash: Decimal = Decimal("0")
    internet: Decimal = Decimal("0")
    common: Decimal = Decimal("0")
    other: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    water_units: Decimal = Decimal("0")
    electric_units: Decimal = Decimal("0")
    paid_bills: int = 0


class ExpenseBreakdown(BaseSchema):
    water: Decimal = Decimal("0")
    electric: Decimal = Decimal("0")
    trash: Decimal = Decimal("0")
    internet: Decimal = Decimal("0")
    operating: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    water_units: Decimal = Decimal("0")
    electric_units: Decimal = Decimal("0")


class ReportStats(BaseSchema):
    total_rooms: int = 0
    occupied_rooms: int = 0
    total_bills_issued: int = 0
    paid_bills: int = 0
    unpaid_bills: int = 0


class MonthlyReport(BaseSchema):
    month: str
    income: IncomeBreakdown
    expenses: ExpenseBreakdown
    net_profit: Decimal
    stats: ReportStats


class CentralMeterCreate(BaseSchema):
    month: str
    water_meter_last: Optional[NonNegativeMoney] = None
    water_meter_current: NonNegativeMoney = Decimal("0")
    water_rate_from_utility: NonNegativeMoney = Decimal("0")
    water_total_cost: Optional[NonNegativeMoney] = None
    electric_meter_last: Optional[NonNegativeMoney] = None
    electric_meter_current: NonNegativeMoney = Decimal("0")
    electric_rate_from_utility: NonNegativeMoney = Decimal("0")
    electric_total_cost: Optional[NonNegativeMoney] = None
    trash_cost: NonNegativeMoney = Decimal("0")
    internet_cost: NonNegativeMoney = Decimal("0")
    note: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("month")
    @classmethod
    def check_month(cls, v: str) -> str:
        return validate_month_string(v)


class CentralMeterResponse(BaseResponseSchema):
    month: date
    water_meter_last: Decimal
    water_meter_current: Decimal
    water_usage: Decimal
    water_rate_from_utility: Decimal
    water_total_cost: Decimal
    electric_meter_last: Decimal
    electric_meter_current: Decimal
    electric_usage: Decimal
    electric_rate_from_utility: Decimal
    electric_total_cost: Decimal
    trash_cost: Decimal
    internet_cost: Decimal
    note: Optional[str] = None
