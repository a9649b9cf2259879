"""
Resident lifecycle schemas: check-in, profile/transfer edits and checkout.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import Field, model_validator

from staysync.models.base.enums import DepositStatus, ResidentStatus, RoomStatus
from staysync.schemas.billing.billing import BillingResponse
from staysync.schemas.common.base import BaseResponseSchema, BaseSchema, NonNegativeMoney

__all__ = [
    "CONTRACT_DURATION_CATALOG",
    "CheckInRequest",
    "ResidentUpdate",
    "CheckoutRequest",
    "ResidentResponse",
    "ResidentDetailResponse",
    "CheckoutResponse",
    "VerifyCodeResponse",
]

# Standard contract lengths offered at check-in, in months
CONTRACT_DURATION_CATALOG = (3, 6, 12)


class CheckInRequest(BaseSchema):
    """
    Check a new resident into a room.

    Exactly one of ``contract_duration`` (a catalog entry) or
    ``custom_duration_months`` may be given; when neither is, the room's
    default contract length applies.
    """

    full_name: str = Field(..., min_length=1, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=30)
    line_user_id: Optional[str] = Field(default=None, max_length=64)
    deposit: Optional[NonNegativeMoney] = None
    contract_start_date: date
    contract_duration: Optional[Literal[3, 6, 12]] = None
    custom_duration_months: Optional[int] = Field(default=None, ge=1, le=120)

    @model_validator(mode="after")
    def check_duration_choice(self) -> "CheckInRequest":
        if self.contract_duration is not None and self.custom_duration_months is not None:
            raise ValueError("Give either contract_duration or custom_duration_months, not both")
        return self


class ResidentUpdate(BaseSchema):
    """Profile edit; a different ``room_id`` transfers the resident."""

    full_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=30)
    line_user_id: Optional[str] = Field(default=None, max_length=64)
    room_id: Optional[str] = None


class CheckoutRequest(BaseSchema):
    deposit_returned_amount: Optional[NonNegativeMoney] = None
    deposit_forfeit_reason: Optional[str] = Field(default=None, max_length=1000)


class ResidentResponse(BaseResponseSchema):
    room_id: Optional[str] = None
    full_name: str
    phone: Optional[str] = None
    line_user_id: Optional[str] = None
    line_verify_code: Optional[str] = None
    status: ResidentStatus
    is_main_tenant: bool
    check_in_date: datetime
    check_out_date: Optional[datetime] = None
    contract_start_date: Optional[date] = None
    contract_end_date: Optional[date] = None
    contract_duration_months: Optional[int] = None
    deposit: Decimal
    deposit_status: DepositStatus
    deposit_returned_amount: Optional[Decimal] = None
    deposit_returned_date: Optional[datetime] = None
    deposit_forfeit_reason: Optional[str] = None


class ResidentDetailResponse(ResidentResponse):
    room_number: Optional[str] = None
    recent_bills: List[BillingResponse] = []


class CheckoutResponse(BaseSchema):
    resident: ResidentResponse
    early_termination: bool
    deposit_returned_amount: Decimal
    deposit_status: DepositStatus
    room_id: str
    room_status: RoomStatus


class VerifyCodeResponse(BaseSchema):
    resident_id: str
    code: str
