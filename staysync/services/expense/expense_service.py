"""
Expenses and recurring expense templates.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from staysync.core.exceptions import ResourceNotFoundError
from staysync.models import Expense, RecurringExpense
from staysync.repositories.expense import ExpenseRepository, RecurringExpenseRepository
from staysync.schemas.expense import ExpenseCreate, RecurringExpenseCreate, RecurringExpenseUpdate
from staysync.services.base import BaseService
from staysync.utils.date_utils import today as utc_today

RECURRING_NOTE = "Auto-created from recurring template"


class ExpenseService(BaseService):
    def __init__(self, db_session: Session):
        super().__init__(db_session)
        self.expenses = ExpenseRepository(db_session)

    def list_expenses(self, organization_id: str, limit: int = 100) -> List[Expense]:
        return self.expenses.list_recent(organization_id, limit=limit)

    def create_expense(self, organization_id: str, data: ExpenseCreate, today: Optional[date] = None) -> Expense:
        values = data.model_dump()
        values["expense_date"] = values.get("expense_date") or today or utc_today()
        expense = Expense(organization_id=organization_id, **values)
        with self.transaction():
            self.expenses.create(expense)
        self._logger.info("Expense recorded", extra={"expense_id": expense.id, "amount": str(expense.amount)})
        return expense

    def delete_expense(self, organization_id: str, expense_id: str) -> Expense:
        expense = self.expenses.get_in_org(expense_id, organization_id)
        if expense is None:
            raise ResourceNotFoundError("Expense", expense_id)
        with self.transaction():
            self.expenses.delete(expense)
        return expense


class RecurringExpenseService(BaseService):
    """
    Monthly expense templates.

    ``run_due`` materializes every active template scheduled for today's day
    of the month. It keeps no record of earlier runs, so invoking it twice on
    the same day creates the expenses twice.
    """

    def __init__(self, db_session: Session):
        super().__init__(db_session)
        self.templates = RecurringExpenseRepository(db_session)
        self.expenses = ExpenseRepository(db_session)

    def list_templates(self, organization_id: str) -> List[RecurringExpense]:
        return self.templates.list_in_org(
            organization_id,
            order_by=[RecurringExpense.day_of_month, RecurringExpense.title],
        )

    def get_template(self, organization_id: str, template_id: str) -> RecurringExpense:
        template = self.templates.get_in_org(template_id, organization_id)
        if template is None:
            raise ResourceNotFoundError("RecurringExpense", template_id)
        return template

    def create_template(self, organization_id: str, data: RecurringExpenseCreate) -> RecurringExpense:
        template = RecurringExpense(organization_id=organization_id, **data.model_dump())
        with self.transaction():
            self.templates.create(template)
        return template

    def update_template(
        self,
        organization_id: str,
        template_id: str,
        data: RecurringExpenseUpdate,
    ) -> Tuple[RecurringExpense, Dict[str, Any]]:
        template = self.get_template(organization_id, template_id)
        changes = data.model_dump(exclude_unset=True)
        diff = {
            field: {"from": getattr(template, field), "to": value}
            for field, value in changes.items()
            if getattr(template, field) != value
        }
        with self.transaction():
            self.templates.update(template, changes)
        return template, diff

    def delete_template(self, organization_id: str, template_id: str) -> RecurringExpense:
        template = self.get_template(organization_id, template_id)
        with self.transaction():
            self.templates.delete(template)
        return template

    def run_due(self, today: Optional[date] = None, organization_id: Optional[str] = None) -> List[Expense]:
        """Create today's expenses from the active templates due today."""
        today = today or utc_today()
        due = self.templates.list_due(today.day, organization_id)
        created: List[Expense] = []

        with self.transaction():
            for template in due:
                note = f"{template.note} ({RECURRING_NOTE})" if template.note else RECURRING_NOTE
                created.append(
                    self.expenses.create(
                        Expense(
                            organization_id=template.organization_id,
                            title=template.title,
                            amount=template.amount,
                            category=template.category,
                            expense_date=today,
                            note=note,
                        )
                    )
                )

        self._logger.info(
            "Recurring expenses generated",
            extra={"day_of_month": today.day, "created": len(created)},
        )
        return created
