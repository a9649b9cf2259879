"""
Resident endpoints: profile edits and transfers, checkout, main-tenant
designation and LINE link codes. Check-in lives on the rooms router.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from staysync.api import deps
from staysync.config.settings import Settings
from staysync.models import User
from staysync.models.base.enums import AuditAction
from staysync.schemas.billing import BillingResponse
from staysync.schemas.resident import (
    CheckoutRequest,
    CheckoutResponse,
    ResidentDetailResponse,
    ResidentResponse,
    ResidentUpdate,
    VerifyCodeResponse,
)
from staysync.services.analytics import DashboardService
from staysync.services.audit import AuditContext, AuditService
from staysync.services.tenancy import TenancyService

router = APIRouter(prefix="/residents", tags=["residents"])


def get_tenancy_service(
    db: Session = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
) -> TenancyService:
    return TenancyService(db, settings)


@router.get("", response_model=List[ResidentResponse])
def list_residents(
    current_user: User = Depends(deps.require_permission("residents", "read")),
    service: TenancyService = Depends(get_tenancy_service),
):
    return service.list_active(current_user.organization_id)


@router.get("/{resident_id}", response_model=ResidentDetailResponse)
def get_resident(
    resident_id: str,
    current_user: User = Depends(deps.require_permission("residents", "read")),
    service: TenancyService = Depends(get_tenancy_service),
):
    resident, bills = service.get_detail(current_user.organization_id, resident_id)
    detail = ResidentDetailResponse.model_validate(resident)
    detail.room_number = resident.room.number if resident.room else None
    detail.recent_bills = [BillingResponse.model_validate(bill) for bill in bills]
    return detail


@router.patch("/{resident_id}", response_model=ResidentResponse)
def update_resident(
    resident_id: str,
    payload: ResidentUpdate,
    current_user: User = Depends(deps.require_permission("residents", "update")),
    service: TenancyService = Depends(get_tenancy_service),
    audit: AuditService = Depends(deps.get_audit_service),
    context: AuditContext = Depends(deps.get_audit_context),
    dashboard: DashboardService = Depends(deps.get_dashboard_service),
):
    resident, diff = service.update_resident(current_user.organization_id, resident_id, payload)
    if diff:
        audit.log(context, AuditAction.UPDATE, "Resident", resident.id, diff)
    if "room_id" in diff:
        dashboard.invalidate(current_user.organization_id)
    return resident


@router.post("/{resident_id}/checkout", response_model=CheckoutResponse)
def checkout_resident(
    resident_id: str,
    payload: CheckoutRequest,
    current_user: User = Depends(deps.require_permission("residents", "update")),
    service: TenancyService = Depends(get_tenancy_service),
    audit: AuditService = Depends(deps.get_audit_service),
    context: AuditContext = Depends(deps.get_audit_context),
    dashboard: DashboardService = Depends(deps.get_dashboard_service),
):
    outcome = service.checkout(current_user.organization_id, resident_id, payload)
    audit.log(
        context,
        AuditAction.CHECK_OUT,
        "Resident",
        outcome.resident.id,
        {
            "room_id": outcome.room_id,
            "early_termination": outcome.early_termination,
            "deposit_returned_amount": outcome.deposit_returned_amount,
            "deposit_status": outcome.deposit_status,
            "room_status": outcome.room_status,
        },
    )
    dashboard.invalidate(current_user.organization_id)
    return CheckoutResponse(
        resident=ResidentResponse.model_validate(outcome.resident),
        early_termination=outcome.early_termination,
        deposit_returned_amount=outcome.deposit_returned_amount,
        deposit_status=outcome.deposit_status,
        room_id=outcome.room_id,
        room_status=outcome.room_status,
    )


@router.post("/{resident_id}/set-main", response_model=ResidentResponse)
def set_main_tenant(
    resident_id: str,
    current_user: User = Depends(deps.require_permission("residents", "update")),
    service: TenancyService = Depends(get_tenancy_service),
    audit: AuditService = Depends(deps.get_audit_service),
    context: AuditContext = Depends(deps.get_audit_context),
):
    resident = service.set_main_tenant(current_user.organization_id, resident_id)
    audit.log(context, AuditAction.UPDATE, "Resident", resident.id, {"is_main_tenant": {"from": False, "to": True}})
    return resident


@router.post("/{resident_id}/generate-code", response_model=VerifyCodeResponse)
def generate_verify_code(
    resident_id: str,
    current_user: User = Depends(deps.require_permission("residents", "update")),
    service: TenancyService = Depends(get_tenancy_service),
):
    code = service.generate_verify_code(current_user.organization_id, resident_id)
    return VerifyCodeResponse(resident_id=resident_id, code=code)
