"""
Scheduler hooks, authenticated with the ``CRON_SECRET`` bearer token.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from staysync.api import deps
from staysync.config.settings import Settings
from staysync.schemas.billing import OverdueRunResponse
from staysync.schemas.expense import RecurringRunResponse
from staysync.services.billing import OverdueService
from staysync.services.communication import NotificationDispatcher
from staysync.services.expense import RecurringExpenseService

router = APIRouter(prefix="/cron", tags=["cron"], dependencies=[Depends(deps.require_cron_secret)])


@router.get("/reminders", response_model=OverdueRunResponse)
def run_reminders(
    db: Session = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    dispatcher: NotificationDispatcher = Depends(deps.get_dispatcher),
):
    summary = OverdueService(db, settings, dispatcher).run_scheduled()
    return OverdueRunResponse(**summary.model_dump())


@router.get("/recurring-expenses", response_model=RecurringRunResponse)
def run_recurring_expenses(db: Session = Depends(deps.get_db)):
    expenses = RecurringExpenseService(db).run_due()
    return RecurringRunResponse(created=len(expenses), expense_ids=[expense.id for expense in expenses])
