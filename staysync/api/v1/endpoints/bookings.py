"""
Room bookings. Tenants request and list their own bookings; staff review
them through the admin router.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from staysync.api import deps
from staysync.models import User
from staysync.models.base.enums import AuditAction
from staysync.schemas.booking import BookingCreate, BookingResponse, BookingStatusUpdate
from staysync.services.analytics import DashboardService
from staysync.services.audit import AuditContext, AuditService
from staysync.services.booking import BookingService

router = APIRouter(prefix="/bookings", tags=["bookings"])
admin_router = APIRouter(prefix="/admin/bookings", tags=["bookings"])


@router.get("", response_model=List[BookingResponse])
def list_bookings(
    current_user: User = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
):
    return BookingService(db).list_for(current_user)


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreate,
    current_user: User = Depends(deps.require_permission("bookings", "create")),
    db: Session = Depends(deps.get_db),
):
    return BookingService(db).create(current_user, payload)


@admin_router.patch("/{booking_id}", response_model=BookingResponse)
def update_booking_status(
    booking_id: str,
    payload: BookingStatusUpdate,
    current_user: User = Depends(deps.require_permission("bookings", "update")),
    db: Session = Depends(deps.get_db),
    audit: AuditService = Depends(deps.get_audit_service),
    context: AuditContext = Depends(deps.get_audit_context),
    dashboard: DashboardService = Depends(deps.get_dashboard_service),
):
    booking = BookingService(db).update_status(current_user.organization_id, booking_id, payload.status)
    audit.log(context, AuditAction.UPDATE, "Booking", booking.id, {"status": booking.status})
    dashboard.invalidate(current_user.organization_id)
    return booking
