# staysync/models/organization/organization.py
"""
Organization model.

An organization is one dormitory business; every operational row is scoped
to exactly one organization.
"""

from typing import List

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staysync.models.base.base_model import BaseModel
from staysync.models.base.mixins import TimestampMixin

__all__ = ["Organization"]


class Organization(BaseModel, TimestampMixin):
    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    users: Mapped[List["User"]] = relationship(
        "User",
        back_populates="organization",
        cascade="all, delete-orphan",
    )
    rooms: Mapped[List["Room"]] = relationship(
        "Room",
        back_populates="organization",
        cascade="all, delete-orphan",
    )
