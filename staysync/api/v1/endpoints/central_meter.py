from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from staysync.api import deps
from staysync.models import User
from staysync.models.base.enums import AuditAction
from staysync.schemas.report import CentralMeterCreate, CentralMeterResponse
from staysync.services.audit import AuditContext, AuditService
from staysync.services.utility import CentralMeterService

router = APIRouter(prefix="/central-meter", tags=["utilities"])


@router.get("", response_model=List[CentralMeterResponse])
def list_central_meters(
    limit: int = Query(default=24, ge=1, le=120),
    current_user: User = Depends(deps.require_permission("expenses", "read")),
    db: Session = Depends(deps.get_db),
):
    return CentralMeterService(db).list_recent(current_user.organization_id, limit=limit)


@router.post("", response_model=CentralMeterResponse, status_code=status.HTTP_201_CREATED)
def record_central_meter(
    payload: CentralMeterCreate,
    current_user: User = Depends(deps.require_permission("expenses", "create")),
    db: Session = Depends(deps.get_db),
    audit: AuditService = Depends(deps.get_audit_service),
    context: AuditContext = Depends(deps.get_audit_context),
):
    meter = CentralMeterService(db).record(current_user.organization_id, payload)
    audit.log(
        context,
        AuditAction.CREATE,
        "CentralMeter",
        meter.id,
        {"month": payload.month, "water_total_cost": meter.water_total_cost, "electric_total_cost": meter.electric_total_cost},
    )
    return meter
