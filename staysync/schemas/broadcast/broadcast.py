"""
Announcement broadcast schemas.
"""

from typing import Optional

from pydantic import Field, field_validator

from staysync.schemas.common.base import BaseSchema

__all__ = ["BroadcastFilters", "BroadcastRequest", "BroadcastResponse"]


class BroadcastFilters(BaseSchema):
    floor: Optional[str] = Field(default=None, max_length=10)
    room_number: Optional[str] = Field(default=None, max_length=20)
    unpaid_only: bool = False

    @field_validator("floor", "room_number")
    @classmethod
    def blank_means_everyone(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not value or value.lower() == "all":
            return None
        return value


class BroadcastRequest(BaseSchema):
    message: str = Field(..., min_length=1, max_length=4000)
    filters: BroadcastFilters = Field(default_factory=BroadcastFilters)


class BroadcastResponse(BaseSchema):
    success: bool = True
    recipients: int = 0
    count: int = 0
