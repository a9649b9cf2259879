"""
Billing and payment schemas.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator

from staysync.models.base.enums import PaymentStatus
from staysync.schemas.common.base import (
    BaseResponseSchema,
    BaseSchema,
    NonNegativeMoney,
    validate_month_string,
)

__all__ = [
    "BillCreate",
    "BulkBillEntry",
    "BulkBillRequest",
    "BulkBillError",
    "BulkBillResult",
    "BillingResponse",
    "ReviewSlipRequest",
    "PayCashRequest",
    "OverdueRunResponse",
]


class BillCreate(BaseSchema):
    """
    Single-room bill.

    Unset fees fall back to the organization's rate configuration.
    """

    room_id: str
    water_meter_last: NonNegativeMoney = Decimal("0")
    water_meter_current: NonNegativeMoney = Decimal("0")
    electric_meter_last: NonNegativeMoney = Decimal("0")
    electric_meter_current: NonNegativeMoney = Decimal("0")
    trash_fee: Optional[NonNegativeMoney] = None
    internet_fee: Optional[NonNegativeMoney] = None
    other_fees: Optional[NonNegativeMoney] = None
    common_fee: Optional[NonNegativeMoney] = None
    bill_month: Optional[str] = Field(default=None, description="YYYY-MM, defaults to the current month")

    @field_validator("bill_month")
    @classmethod
    def check_month(cls, v: Optional[str]) -> Optional[str]:
        return validate_month_string(v)


class BulkBillEntry(BaseSchema):
    room_id: str
    water_current: Optional[NonNegativeMoney] = None
    electric_current: Optional[NonNegativeMoney] = None
    water_last: Optional[NonNegativeMoney] = None
    electric_last: Optional[NonNegativeMoney] = None


class BulkBillRequest(BaseSchema):
    bill_month: str
    water_rate: Optional[NonNegativeMoney] = None
    electric_rate: Optional[NonNegativeMoney] = None
    trash_fee: Optional[NonNegativeMoney] = None
    internet_fee: Optional[NonNegativeMoney] = None
    other_fees: Optional[NonNegativeMoney] = None
    entries: List[BulkBillEntry] = Field(..., min_length=1)

    @field_validator("bill_month")
    @classmethod
    def check_month(cls, v: str) -> str:
        return validate_month_string(v)


class BulkBillError(BaseSchema):
    room_id: str
    reason: str


class BulkBillResult(BaseSchema):
    created: int = 0
    skipped: int = 0
    errors: List[BulkBillError] = []
    bill_ids: List[str] = []


class BillingResponse(BaseResponseSchema):
    room_id: str
    room_number: Optional[str] = None
    resident_id: Optional[str] = None
    resident_name: Optional[str] = None
    billing_month: date

    room_price: Decimal
    water_meter_last: Decimal
    water_meter_current: Decimal
    water_units: Decimal
    water_rate: Decimal
    water_cost: Decimal
    electric_meter_last: Decimal
    electric_meter_current: Decimal
    electric_units: Decimal
    electric_rate: Decimal
    electric_cost: Decimal
    trash_fee: Decimal
    internet_fee: Decimal
    other_fees: Decimal
    common_fee: Decimal
    total_amount: Decimal

    payment_status: PaymentStatus
    payment_date: Optional[datetime] = None
    slip_image: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    review_note: Optional[str] = None


class ReviewSlipRequest(BaseSchema):
    # Validated by the payment service so an unknown action is a 400
    action: str
    note: Optional[str] = Field(default=None, max_length=1000)


class PayCashRequest(BaseSchema):
    note: Optional[str] = Field(default=None, max_length=1000)


class OverdueRunResponse(BaseSchema):
    success: bool = True
    total_pending: int
    overdue_count: int
    sent_count: int
    failed: List[str] = []
    logs: List[str] = []
