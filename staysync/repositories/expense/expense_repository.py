"""Expense and recurring expense repositories."""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from staysync.models import Expense, RecurringExpense
from staysync.repositories.base import BaseRepository


class ExpenseRepository(BaseRepository[Expense]):
    def __init__(self, db: Session):
        super().__init__(Expense, db)

    def list_recent(self, organization_id: str, limit: int = 100) -> List[Expense]:
        stmt = (
            select(Expense)
            .where(Expense.organization_id == organization_id)
            .order_by(Expense.expense_date.desc(), Expense.created_at.desc())
            .limit(limit)
        )
        return list(self.db.scalars(stmt).all())

    def total_between(self, organization_id: str, start: date, end: date) -> Decimal:
        stmt = select(func.coalesce(func.sum(Expense.amount), 0)).where(
            Expense.organization_id == organization_id,
            Expense.expense_date >= start,
            Expense.expense_date < end,
        )
        return Decimal(str(self.db.scalar(stmt) or 0))


class RecurringExpenseRepository(BaseRepository[RecurringExpense]):
    def __init__(self, db: Session):
        super().__init__(RecurringExpense, db)

    def list_due(self, day_of_month: int, organization_id: Optional[str] = None) -> List[RecurringExpense]:
        """Active templates scheduled for ``day_of_month``."""
        stmt = select(RecurringExpense).where(
            RecurringExpense.is_active.is_(True),
            RecurringExpense.day_of_month == day_of_month,
        )
        if organization_id is not None:
            stmt = stmt.where(RecurringExpense.organization_id == organization_id)
        return list(self.db.scalars(stmt).all())
