from fastapi import APIRouter, Depends

from staysync.api import deps
from staysync.models import User
from staysync.schemas.report import DashboardSummary
from staysync.services.analytics import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardSummary)
def read_dashboard(
    current_user: User = Depends(deps.require_permission("dashboard", "read")),
    service: DashboardService = Depends(deps.get_dashboard_service),
):
    """Summary for the organization, cached per organization for a short TTL."""
    return service.get_summary(current_user.organization_id)
