# staysync/models/user/user.py
"""
User model for staff and tenant accounts.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staysync.models.base.base_model import BaseModel, enum_column
from staysync.models.base.enums import UserRole, UserStatus
from staysync.models.base.mixins import OrganizationScopedMixin, TimestampMixin

__all__ = ["User"]


class User(BaseModel, OrganizationScopedMixin, TimestampMixin):
    """
    Account that can sign in to the management API.

    Email addresses are globally unique because login happens before the
    organization is known.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        enum_column(UserRole),
        nullable=False,
        default=UserRole.STAFF,
    )
    status: Mapped[UserStatus] = mapped_column(
        enum_column(UserStatus),
        nullable=False,
        default=UserStatus.ACTIVE,
    )
    last_login_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    organization: Mapped["Organization"] = relationship("Organization", back_populates="users")

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE
