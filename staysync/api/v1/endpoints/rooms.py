"""
Room endpoints, including check-in and the room's latest bill.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from staysync.api import deps
from staysync.config.settings import Settings
from staysync.models import User
from staysync.models.base.enums import AuditAction, RoomStatus
from staysync.schemas.billing import BillingResponse
from staysync.schemas.common import MessageResponse
from staysync.schemas.resident import CheckInRequest, ResidentResponse
from staysync.schemas.room import RoomCreate, RoomResponse, RoomUpdate
from staysync.services.analytics import DashboardService
from staysync.services.audit import AuditContext, AuditService
from staysync.services.billing import BillAssemblerService
from staysync.services.communication import NotificationDispatcher
from staysync.services.room import RoomService
from staysync.services.tenancy import TenancyService

router = APIRouter(prefix="/rooms", tags=["rooms"])


@router.get("", response_model=List[RoomResponse])
def list_rooms(
    status_filter: Optional[RoomStatus] = Query(default=None, alias="status"),
    current_user: User = Depends(deps.require_permission("rooms", "read")),
    db: Session = Depends(deps.get_db),
):
    return RoomService(db).list_rooms(current_user.organization_id, status=status_filter)


@router.get("/available", response_model=List[RoomResponse])
def list_available_rooms(
    current_user: User = Depends(deps.require_permission("rooms", "read")),
    db: Session = Depends(deps.get_db),
):
    return RoomService(db).list_available(current_user.organization_id)


@router.post("", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(
    payload: RoomCreate,
    current_user: User = Depends(deps.require_permission("rooms", "create")),
    db: Session = Depends(deps.get_db),
    audit: AuditService = Depends(deps.get_audit_service),
    context: AuditContext = Depends(deps.get_audit_context),
    dashboard: DashboardService = Depends(deps.get_dashboard_service),
):
    room = RoomService(db).create_room(current_user.organization_id, payload)
    audit.log(context, AuditAction.CREATE, "Room", room.id, payload.model_dump())
    dashboard.invalidate(current_user.organization_id)
    return room


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(
    room_id: str,
    current_user: User = Depends(deps.require_permission("rooms", "read")),
    db: Session = Depends(deps.get_db),
):
    return RoomService(db).get_room(current_user.organization_id, room_id)


@router.patch("/{room_id}", response_model=RoomResponse)
def update_room(
    room_id: str,
    payload: RoomUpdate,
    current_user: User = Depends(deps.require_permission("rooms", "update")),
    db: Session = Depends(deps.get_db),
    audit: AuditService = Depends(deps.get_audit_service),
    context: AuditContext = Depends(deps.get_audit_context),
):
    room, diff = RoomService(db).update_room(current_user.organization_id, room_id, payload)
    if diff:
        audit.log(context, AuditAction.UPDATE, "Room", room.id, diff)
    return room


@router.delete("/{room_id}", response_model=MessageResponse)
def delete_room(
    room_id: str,
    current_user: User = Depends(deps.require_permission("rooms", "delete")),
    db: Session = Depends(deps.get_db),
    audit: AuditService = Depends(deps.get_audit_service),
    context: AuditContext = Depends(deps.get_audit_context),
    dashboard: DashboardService = Depends(deps.get_dashboard_service),
):
    room = RoomService(db).delete_room(current_user.organization_id, room_id)
    audit.log(context, AuditAction.DELETE, "Room", room.id, {"number": room.number})
    dashboard.invalidate(current_user.organization_id)
    return MessageResponse(message=f"Room {room.number} deleted")


@router.post("/{room_id}/checkin", response_model=ResidentResponse, status_code=status.HTTP_201_CREATED)
def check_in(
    room_id: str,
    payload: CheckInRequest,
    current_user: User = Depends(deps.require_permission("residents", "create")),
    db: Session = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    audit: AuditService = Depends(deps.get_audit_service),
    context: AuditContext = Depends(deps.get_audit_context),
    dashboard: DashboardService = Depends(deps.get_dashboard_service),
):
    resident = TenancyService(db, settings).check_in(current_user.organization_id, room_id, payload)
    audit.log(
        context,
        AuditAction.CHECK_IN,
        "Resident",
        resident.id,
        {
            "room_id": room_id,
            "full_name": resident.full_name,
            "deposit": resident.deposit,
            "contract_end_date": resident.contract_end_date,
        },
    )
    dashboard.invalidate(current_user.organization_id)
    return resident


@router.get("/{room_id}/billing/latest", response_model=Optional[BillingResponse])
def latest_room_bill(
    room_id: str,
    current_user: User = Depends(deps.require_permission("billing", "read")),
    db: Session = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    dispatcher: NotificationDispatcher = Depends(deps.get_dispatcher),
):
    return BillAssemblerService(db, settings, dispatcher).latest_for_room(current_user.organization_id, room_id)
