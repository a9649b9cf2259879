"""
Room schemas.
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from staysync.models.base.enums import RoomStatus
from staysync.schemas.common.base import BaseResponseSchema, BaseSchema, NonNegativeMoney

__all__ = ["RoomCreate", "RoomUpdate", "RoomResidentBrief", "RoomResponse"]


class RoomCreate(BaseSchema):
    number: str = Field(..., min_length=1, max_length=50)
    price: NonNegativeMoney
    default_contract_months: int = Field(default=12, ge=1, le=120)
    default_deposit: NonNegativeMoney = Decimal("0")
    charge_common_area: bool = False


class RoomUpdate(BaseSchema):
    number: Optional[str] = Field(default=None, min_length=1, max_length=50)
    price: Optional[NonNegativeMoney] = None
    default_contract_months: Optional[int] = Field(default=None, ge=1, le=120)
    default_deposit: Optional[NonNegativeMoney] = None
    charge_common_area: Optional[bool] = None


class RoomResidentBrief(BaseSchema):
    id: str
    full_name: str
    phone: Optional[str] = None
    is_main_tenant: bool
    line_user_id: Optional[str] = None


class RoomResponse(BaseResponseSchema):
    number: str
    price: Decimal
    status: RoomStatus
    default_contract_months: int
    default_deposit: Decimal
    charge_common_area: bool
    active_residents: List[RoomResidentBrief] = []
