"""
Booking schemas.
"""

from datetime import date
from typing import Optional

from pydantic import Field

from staysync.models.base.enums import BookingStatus
from staysync.schemas.common.base import BaseResponseSchema, BaseSchema

__all__ = ["BookingCreate", "BookingStatusUpdate", "BookingResponse"]


class BookingCreate(BaseSchema):
    room_id: str
    check_in_date: date
    special_request: Optional[str] = Field(default=None, max_length=1000)


class BookingStatusUpdate(BaseSchema):
    status: BookingStatus


class BookingResponse(BaseResponseSchema):
    user_id: str
    room_id: str
    check_in_date: date
    status: BookingStatus
    special_request: Optional[str] = None
