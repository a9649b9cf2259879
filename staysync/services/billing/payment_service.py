"""
Payment state machine for bills.

States: Pending, Review, Paid. Events:

    UPLOAD_SLIP  any state        -> Review
    APPROVE      Review           -> Paid
    REJECT       Review           -> Pending
    PAY_CASH     Pending | Review -> Paid

Every guard lives in ``next_payment_status``; a rejected event leaves the
bill untouched.
"""

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from staysync.config.settings import Settings
from staysync.core.exceptions import BillingNotFoundError, InvalidStateTransitionError, ValidationError
from staysync.models import Billing, User
from staysync.models.base.enums import PaymentStatus
from staysync.repositories.billing import BillingRepository
from staysync.repositories.resident import ResidentRepository
from staysync.services.base import BaseService
from staysync.services.communication import message_templates as templates
from staysync.services.communication.notification_dispatcher import NotificationDispatcher
from staysync.services.system.system_config_service import SystemConfigService
from staysync.utils.date_utils import utc_now

CASH_REVIEW_NOTE = "Paid via cash (manual entry)"


class PaymentEvent(str, enum.Enum):
    UPLOAD_SLIP = "upload_slip"
    APPROVE = "approve"
    REJECT = "reject"
    PAY_CASH = "pay_cash"


class ReviewAction(str, enum.Enum):
    APPROVE = "approve"
    REJECT = "reject"


def next_payment_status(current: PaymentStatus, event: PaymentEvent) -> PaymentStatus:
    """
    Resolve the status a bill moves to for ``event``.

    Raises:
        InvalidStateTransitionError: If the event is not allowed from ``current``
    """
    current = PaymentStatus(current)
    if event == PaymentEvent.UPLOAD_SLIP:
        return PaymentStatus.REVIEW
    if event in (PaymentEvent.APPROVE, PaymentEvent.REJECT):
        if current != PaymentStatus.REVIEW:
            raise InvalidStateTransitionError(
                "Bill is not in Review status",
                current_state=current.value,
                event=event.value,
            )
        return PaymentStatus.PAID if event == PaymentEvent.APPROVE else PaymentStatus.PENDING
    if event == PaymentEvent.PAY_CASH:
        if current == PaymentStatus.PAID:
            raise InvalidStateTransitionError(
                "Bill is already paid",
                current_state=current.value,
                event=event.value,
            )
        return PaymentStatus.PAID
    raise ValueError(f"Unknown payment event: {event}")


class PaymentService(BaseService):
    def __init__(self, db_session: Session, settings: Settings, dispatcher: NotificationDispatcher):
        super().__init__(db_session)
        self.settings = settings
        self.dispatcher = dispatcher
        self.bills = BillingRepository(db_session)
        self.residents = ResidentRepository(db_session)
        self.config_service = SystemConfigService(db_session, settings)

    def get_public_bill(self, bill_id: str) -> Billing:
        """Bill lookup for the public payment page (no organization scope)."""
        bill = self.bills.get_by_id(bill_id)
        if bill is None:
            raise BillingNotFoundError(bill_id)
        return bill

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def upload_slip(self, bill_id: str, slip_reference: str, now: Optional[datetime] = None) -> Billing:
        """
        Attach a transfer slip and move the bill to Review.

        Allowed from any state; admins are alerted to review it.
        """
        bill = self.get_public_bill(bill_id)
        previous = PaymentStatus(bill.payment_status)
        if previous != PaymentStatus.PENDING:
            self._logger.warning(
                "Slip uploaded for a bill that is not pending",
                extra={"bill_id": bill.id, "payment_status": previous.value},
            )

        with self.transaction():
            bill.payment_status = next_payment_status(previous, PaymentEvent.UPLOAD_SLIP)
            bill.slip_image = slip_reference
            bill.payment_date = now or utc_now()

        self._logger.info("Payment slip uploaded", extra={"bill_id": bill.id})

        config = self.config_service.find(bill.organization_id)
        admins = config.admin_line_user_id_list if config else []
        self.dispatcher.notify_admins(
            admins,
            templates.slip_received(bill, bill.room_number or "-"),
            context={"purpose": "slip_review", "bill_id": bill.id},
        )
        return bill

    def review_slip(
        self,
        organization_id: str,
        bill_id: str,
        action: str,
        reviewer: User,
        note: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Billing:
        """
        Approve or reject an uploaded slip.

        Raises:
            ValidationError: If ``action`` is not approve/reject
            BillingNotFoundError: If the bill is not in the organization
            InvalidStateTransitionError: If the bill is not in Review
        """
        try:
            review_action = ReviewAction((action or "").strip().lower())
        except ValueError:
            raise ValidationError("Invalid action, expected 'approve' or 'reject'", field="action") from None

        bill = self._get_bill(organization_id, bill_id)
        event = PaymentEvent.APPROVE if review_action == ReviewAction.APPROVE else PaymentEvent.REJECT
        new_status = next_payment_status(bill.payment_status, event)

        with self.transaction():
            bill.payment_status = new_status
            bill.reviewed_by = reviewer.id
            bill.reviewed_at = now or utc_now()
            bill.review_note = note

        self._logger.info(
            "Payment slip reviewed",
            extra={"bill_id": bill.id, "action": review_action.value, "reviewer_id": reviewer.id},
        )

        text = (
            templates.payment_approved(bill)
            if review_action == ReviewAction.APPROVE
            else templates.payment_rejected(bill, note)
        )
        self.dispatcher.push_text(
            self._recipient(bill),
            text,
            context={"purpose": f"slip_{review_action.value}", "bill_id": bill.id},
        )
        return bill

    def pay_cash(
        self,
        organization_id: str,
        bill_id: str,
        reviewer: User,
        note: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Billing:
        """
        Record a cash payment, moving the bill straight to Paid.

        Raises:
            InvalidStateTransitionError: If the bill is already Paid
        """
        bill = self._get_bill(organization_id, bill_id)
        new_status = next_payment_status(bill.payment_status, PaymentEvent.PAY_CASH)
        timestamp = now or utc_now()

        with self.transaction():
            bill.payment_status = new_status
            bill.payment_date = timestamp
            bill.reviewed_by = reviewer.id
            bill.reviewed_at = timestamp
            bill.review_note = note or CASH_REVIEW_NOTE

        self._logger.info("Cash payment recorded", extra={"bill_id": bill.id, "reviewer_id": reviewer.id})
        self.dispatcher.push_text(
            self._recipient(bill),
            templates.cash_received(bill),
            context={"purpose": "cash_payment", "bill_id": bill.id},
        )
        return bill

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _get_bill(self, organization_id: str, bill_id: str) -> Billing:
        bill = self.bills.get_in_org(bill_id, organization_id)
        if bill is None:
            raise BillingNotFoundError(bill_id)
        return bill

    def _recipient(self, bill: Billing) -> Optional[str]:
        if bill.resident is not None and bill.resident.line_user_id:
            return bill.resident.line_user_id
        fallback = self.residents.first_line_user_in_room(bill.room_id)
        return fallback.line_user_id if fallback else None


__all__ = [
    "PaymentEvent",
    "ReviewAction",
    "PaymentService",
    "next_payment_status",
    "CASH_REVIEW_NOTE",
]
