"""
Billing endpoints: bill creation (single and bulk), listing, and the payment
flow (slip upload from the public payment link, review, cash payment).
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from staysync.api import deps
from staysync.config.settings import Settings
from staysync.models import User
from staysync.models.base.enums import AuditAction, PaymentStatus
from staysync.schemas.billing import (
    BillCreate,
    BillingResponse,
    BulkBillRequest,
    BulkBillResult,
    PayCashRequest,
    ReviewSlipRequest,
)
from staysync.schemas.common import MONTH_PATTERN
from staysync.services.analytics import DashboardService
from staysync.services.audit import AuditContext, AuditService
from staysync.services.billing import BillAssemblerService, PaymentService, SlipStorage
from staysync.services.communication import NotificationDispatcher
from staysync.utils.date_utils import parse_month

router = APIRouter(prefix="/billing", tags=["billing"])


def get_bill_service(
    db: Session = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    dispatcher: NotificationDispatcher = Depends(deps.get_dispatcher),
) -> BillAssemblerService:
    return BillAssemblerService(db, settings, dispatcher)


def get_payment_service(
    db: Session = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    dispatcher: NotificationDispatcher = Depends(deps.get_dispatcher),
) -> PaymentService:
    return PaymentService(db, settings, dispatcher)


# --- Bills ---------------------------------------------------------------------

@router.post("", response_model=BillingResponse, status_code=status.HTTP_201_CREATED)
def create_bill(
    payload: BillCreate,
    current_user: User = Depends(deps.require_permission("billing", "create")),
    service: BillAssemblerService = Depends(get_bill_service),
    audit: AuditService = Depends(deps.get_audit_service),
    context: AuditContext = Depends(deps.get_audit_context),
    dashboard: DashboardService = Depends(deps.get_dashboard_service),
):
    bill = service.create_bill(current_user.organization_id, payload)
    audit.log(
        context,
        AuditAction.CREATE,
        "Billing",
        bill.id,
        {"room_id": bill.room_id, "billing_month": bill.billing_month, "total_amount": bill.total_amount},
    )
    dashboard.invalidate(current_user.organization_id)
    return bill


@router.post("/bulk", response_model=BulkBillResult)
def create_bulk_bills(
    payload: BulkBillRequest,
    current_user: User = Depends(deps.require_permission("billing", "create")),
    service: BillAssemblerService = Depends(get_bill_service),
    audit: AuditService = Depends(deps.get_audit_service),
    context: AuditContext = Depends(deps.get_audit_context),
    dashboard: DashboardService = Depends(deps.get_dashboard_service),
):
    result = service.create_bulk(current_user.organization_id, payload)
    if result.created:
        audit.log(
            context,
            AuditAction.CREATE,
            "Billing",
            None,
            {"bill_month": payload.bill_month, "created": result.created, "skipped": result.skipped},
        )
        dashboard.invalidate(current_user.organization_id)
    return result


@router.get("", response_model=List[BillingResponse])
def list_bills(
    status_filter: Optional[PaymentStatus] = Query(default=None, alias="status"),
    room_id: Optional[str] = None,
    month: Optional[str] = Query(default=None, pattern=MONTH_PATTERN),
    current_user: User = Depends(deps.require_permission("billing", "read")),
    service: BillAssemblerService = Depends(get_bill_service),
):
    return service.list_bills(
        current_user.organization_id,
        status=status_filter,
        room_id=room_id,
        billing_month=parse_month(month),
    )


@router.get("/{bill_id}/public", response_model=BillingResponse)
def get_public_bill(bill_id: str, service: PaymentService = Depends(get_payment_service)):
    """Bill shown on the payment link sent to the resident; no login required."""
    return service.get_public_bill(bill_id)


@router.get("/{bill_id}", response_model=BillingResponse)
def get_bill(
    bill_id: str,
    current_user: User = Depends(deps.require_permission("billing", "read")),
    service: BillAssemblerService = Depends(get_bill_service),
):
    return service.get_bill(current_user.organization_id, bill_id)


# --- Payments ------------------------------------------------------------------

@router.post("/{bill_id}/upload-slip", response_model=BillingResponse)
async def upload_slip(
    bill_id: str,
    slip: UploadFile = File(...),
    settings: Settings = Depends(deps.get_settings),
    service: PaymentService = Depends(get_payment_service),
    dashboard: DashboardService = Depends(deps.get_dashboard_service),
):
    bill = service.get_public_bill(bill_id)
    content = await slip.read()
    reference = SlipStorage.from_settings(settings).save(bill.id, content, slip.content_type)
    bill = service.upload_slip(bill.id, reference)
    dashboard.invalidate(bill.organization_id)
    return bill


@router.post("/{bill_id}/review", response_model=BillingResponse)
def review_slip(
    bill_id: str,
    payload: ReviewSlipRequest,
    current_user: User = Depends(deps.require_permission("billing", "update")),
    service: PaymentService = Depends(get_payment_service),
    audit: AuditService = Depends(deps.get_audit_service),
    context: AuditContext = Depends(deps.get_audit_context),
    dashboard: DashboardService = Depends(deps.get_dashboard_service),
):
    bill = service.review_slip(current_user.organization_id, bill_id, payload.action, current_user, payload.note)
    audit.log(
        context,
        AuditAction.PAYMENT,
        "Billing",
        bill.id,
        {"action": payload.action.strip().lower(), "payment_status": bill.payment_status, "note": payload.note},
    )
    dashboard.invalidate(current_user.organization_id)
    return bill


@router.post("/{bill_id}/pay-cash", response_model=BillingResponse)
def pay_cash(
    bill_id: str,
    payload: Optional[PayCashRequest] = None,
    current_user: User = Depends(deps.require_permission("billing", "update")),
    service: PaymentService = Depends(get_payment_service),
    audit: AuditService = Depends(deps.get_audit_service),
    context: AuditContext = Depends(deps.get_audit_context),
    dashboard: DashboardService = Depends(deps.get_dashboard_service),
):
    note = payload.note if payload else None
    bill = service.pay_cash(current_user.organization_id, bill_id, current_user, note)
    audit.log(
        context,
        AuditAction.PAYMENT,
        "Billing",
        bill.id,
        {"method": "cash", "total_amount": bill.total_amount, "payment_status": bill.payment_status},
    )
    dashboard.invalidate(current_user.organization_id)
    return bill
