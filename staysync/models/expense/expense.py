# staysync/models/expense/expense.py
"""
Operating expense models: one-off expenses and the monthly templates that
generate them.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Date, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from staysync.models.base.base_model import BaseModel
from staysync.models.base.mixins import OrganizationScopedMixin, TimestampMixin

__all__ = ["Expense", "RecurringExpense"]


class Expense(BaseModel, OrganizationScopedMixin, TimestampMixin):
    __tablename__ = "expenses"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False, default="Other", index=True)
    expense_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class RecurringExpense(BaseModel, OrganizationScopedMixin, TimestampMixin):
    """Template materialized into an Expense on ``day_of_month`` each month."""

    __tablename__ = "recurring_expenses"
    __table_args__ = (
        CheckConstraint("day_of_month BETWEEN 1 AND 31", name="ck_recurring_expense_day"),
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False, default="Other")
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    day_of_month: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
