"""
Rate configuration and dormitory profile schemas.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from staysync.schemas.common.base import BaseSchema, NonNegativeMoney

__all__ = ["SystemConfigResponse", "SystemConfigUpdate"]


class SystemConfigResponse(BaseSchema):
    organization_id: str
    dorm_name: str
    dorm_address: Optional[str] = None

    water_rate: Decimal
    electric_rate: Decimal
    trash_fee: Decimal
    internet_fee: Decimal
    other_fees: Decimal
    common_area_fee: Decimal

    bank_name: Optional[str] = None
    bank_account_name: Optional[str] = None
    bank_account_number: Optional[str] = None
    promptpay_id: Optional[str] = None

    wifi_ssid: Optional[str] = None
    wifi_password: Optional[str] = None
    rules_text: Optional[str] = None
    emergency_phone: Optional[str] = None
    admin_phone: Optional[str] = None
    admin_line_id_display: Optional[str] = None
    admin_line_user_ids: Optional[str] = None

    enable_auto_reminders: bool
    updated_at: datetime


class SystemConfigUpdate(BaseSchema):
    """Partial update; only supplied fields change."""

    dorm_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    dorm_address: Optional[str] = None

    water_rate: Optional[NonNegativeMoney] = None
    electric_rate: Optional[NonNegativeMoney] = None
    trash_fee: Optional[NonNegativeMoney] = None
    internet_fee: Optional[NonNegativeMoney] = None
    other_fees: Optional[NonNegativeMoney] = None
    common_area_fee: Optional[NonNegativeMoney] = None

    bank_name: Optional[str] = Field(default=None, max_length=100)
    bank_account_name: Optional[str] = Field(default=None, max_length=200)
    bank_account_number: Optional[str] = Field(default=None, max_length=50)
    promptpay_id: Optional[str] = Field(default=None, max_length=50)

    wifi_ssid: Optional[str] = Field(default=None, max_length=100)
    wifi_password: Optional[str] = Field(default=None, max_length=100)
    rules_text: Optional[str] = None
    emergency_phone: Optional[str] = Field(default=None, max_length=30)
    admin_phone: Optional[str] = Field(default=None, max_length=30)
    admin_line_id_display: Optional[str] = Field(default=None, max_length=100)
    admin_line_user_ids: Optional[str] = None

    enable_auto_reminders: Optional[bool] = None
