"""
Overdue bill detection and reminders.

A Pending bill is overdue when its billing month is before the current
month, or it is the current month and today is past the due day.
"""

from datetime import date
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from staysync.config.settings import Settings
from staysync.models import Billing
from staysync.repositories.billing import BillingRepository
from staysync.repositories.resident import ResidentRepository
from staysync.repositories.system import SystemConfigRepository
from staysync.services.base import BaseService
from staysync.services.communication import message_templates as templates
from staysync.services.communication.notification_dispatcher import NotificationDispatcher
from staysync.utils.date_utils import format_month, month_index, today as utc_today


def is_overdue(billing_month: date, today: date, due_day: int) -> bool:
    """
    Decide whether a Pending bill for ``billing_month`` is overdue on ``today``.

    Example:
        is_overdue(date(2024, 5, 1), date(2024, 5, 6), 5) -> True
        is_overdue(date(2024, 5, 1), date(2024, 5, 5), 5) -> False
    """
    bill_month = month_index(billing_month)
    current = month_index(today)
    if bill_month < current:
        return True
    return bill_month == current and today.day > due_day


class OverdueRunSummary(BaseModel):
    total_pending: int = 0
    overdue_count: int = 0
    sent_count: int = 0
    failed: List[str] = Field(default_factory=list)
    logs: List[str] = Field(default_factory=list)


class OverdueService(BaseService):
    """
    Scans Pending bills and pushes reminders for the overdue ones.

    Each bill is handled on its own; a failure on one bill is recorded in the
    summary and the scan moves on.
    """

    def __init__(self, db_session: Session, settings: Settings, dispatcher: NotificationDispatcher):
        super().__init__(db_session)
        self.settings = settings
        self.dispatcher = dispatcher
        self.bills = BillingRepository(db_session)
        self.residents = ResidentRepository(db_session)
        self.configs = SystemConfigRepository(db_session)

    def run(self, organization_ids: Optional[Iterable[str]] = None, today: Optional[date] = None) -> OverdueRunSummary:
        """
        Run one reminder pass.

        Args:
            organization_ids: Restrict the scan; ``None`` scans every organization
            today: Reference date (defaults to the current UTC date)
        """
        today = today or utc_today()
        due_day = self.settings.OVERDUE_DUE_DAY
        pending = self.bills.list_pending(organization_ids)
        summary = OverdueRunSummary(total_pending=len(pending))

        for bill in pending:
            if not is_overdue(bill.billing_month, today, due_day):
                continue
            summary.overdue_count += 1
            label = f"Room {bill.room_number or '-'} ({format_month(bill.billing_month)})"

            recipient = self._recipient(bill)
            if recipient is None:
                summary.failed.append(bill.id)
                summary.logs.append(f"{label}: no LINE recipient")
                continue

            result = self.dispatcher.push_text(
                recipient,
                templates.overdue_reminder(
                    bill,
                    bill.room_number or "-",
                    templates.pay_url(self.settings.APP_PUBLIC_URL, bill.id),
                ),
                context={"purpose": "overdue_reminder", "bill_id": bill.id},
            )
            if result.delivered:
                summary.sent_count += 1
                summary.logs.append(f"{label}: reminder sent")
            else:
                summary.failed.append(bill.id)
                summary.logs.append(f"{label}: {result.error}")

        self._logger.info(
            "Overdue scan finished",
            extra={
                "total_pending": summary.total_pending,
                "overdue_count": summary.overdue_count,
                "sent_count": summary.sent_count,
                "failed": len(summary.failed),
            },
        )
        return summary

    def run_scheduled(self, today: Optional[date] = None) -> OverdueRunSummary:
        """Cron entry point: only organizations with auto reminders enabled."""
        organization_ids = self.configs.organizations_with_auto_reminders()
        if not organization_ids:
            self._logger.info("Overdue scan skipped: no organization has auto reminders enabled")
            return OverdueRunSummary()
        return self.run(organization_ids, today=today)

    def _recipient(self, bill: Billing) -> Optional[str]:
        if bill.resident is not None and bill.resident.is_active and bill.resident.line_user_id:
            return bill.resident.line_user_id
        fallback = self.residents.first_line_user_in_room(bill.room_id)
        return fallback.line_user_id if fallback else None


__all__ = ["OverdueService", "OverdueRunSummary", "is_overdue"]
