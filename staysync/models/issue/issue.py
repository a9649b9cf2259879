# staysync/models/issue/issue.py
"""
Maintenance issue model, reported from the admin UI or through the chat bot.
"""

from typing import Optional

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staysync.models.base.base_model import BaseModel, enum_column
from staysync.models.base.enums import IssueStatus
from staysync.models.base.mixins import OrganizationScopedMixin, TimestampMixin

__all__ = ["Issue"]


class Issue(BaseModel, OrganizationScopedMixin, TimestampMixin):
    __tablename__ = "issues"

    resident_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("residents.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    category: Mapped[str] = mapped_column(String(50), nullable=False, default="Other")
    description: Mapped[str] = mapped_column(Text, nullable=False)
    photo: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    status: Mapped[IssueStatus] = mapped_column(
        enum_column(IssueStatus),
        nullable=False,
        default=IssueStatus.PENDING,
        index=True,
    )

    # Guest reporters (no linked resident)
    reporter_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    reporter_contact: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    reporter_line_user_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    resident: Mapped[Optional["Resident"]] = relationship("Resident")
