# --- File: staysync/schemas/common/base.py ---
"""
Base schema classes with common fields and configurations.
"""

from __future__ import annotations

import re
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "BaseSchema",
    "BaseResponseSchema",
    "MessageResponse",
    "Money",
    "NonNegativeMoney",
    "MONTH_PATTERN",
    "validate_month_string",
]

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"

Money = Annotated[Decimal, Field(max_digits=12, decimal_places=2)]
NonNegativeMoney = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]


def validate_month_string(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    if not re.match(MONTH_PATTERN, value):
        raise ValueError("Month must be formatted as YYYY-MM")
    return value


class BaseSchema(BaseModel):
    """
    Base schema with common Pydantic configuration.

    All application-facing schemas inherit from this to ensure consistent
    behaviour.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=False,
        str_strip_whitespace=True,
        validate_assignment=True,
    )


class BaseResponseSchema(BaseSchema):
    """Base schema for database entities with ID and timestamps."""

    id: str = Field(..., description="Unique identifier")
    created_at: datetime = Field(..., description="Creation timestamp")


class MessageResponse(BaseSchema):
    success: bool = True
    message: str
