# staysync/models/system/system_config.py
"""
Per-organization rate configuration and dormitory profile.

Holds the utility rates and flat fees the bill assembler snapshots into each
bill, plus the bank, wifi, rules and contact details the chat bot and the
payment page display.
"""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import Boolean, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from staysync.models.base.base_model import BaseModel
from staysync.models.base.mixins import OrganizationScopedMixin, TimestampMixin

__all__ = ["SystemConfig"]


class SystemConfig(BaseModel, OrganizationScopedMixin, TimestampMixin):
    __tablename__ = "system_configs"
    __table_args__ = (
        UniqueConstraint("organization_id", name="uq_system_config_organization"),
    )

    # Dormitory profile
    dorm_name: Mapped[str] = mapped_column(String(200), nullable=False, default="My Dormitory")
    dorm_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Rates (per unit) and flat monthly fees
    water_rate: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("18"))
    electric_rate: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("7"))
    trash_fee: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    internet_fee: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    other_fees: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    common_area_fee: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))

    # Payment details
    bank_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    bank_account_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    bank_account_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    promptpay_id: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Chat bot content
    wifi_ssid: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    wifi_password: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    rules_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    emergency_phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    admin_phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    admin_line_id_display: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    # Comma separated LINE user ids that receive slip/repair alerts
    admin_line_user_ids: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    enable_auto_reminders: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    @property
    def admin_line_user_id_list(self) -> List[str]:
        if not self.admin_line_user_ids:
            return []
        return [item.strip() for item in self.admin_line_user_ids.split(",") if item.strip()]
