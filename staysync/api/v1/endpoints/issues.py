from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from staysync.api import deps
from staysync.config.settings import Settings
from staysync.models import User
from staysync.models.base.enums import IssueStatus
from staysync.schemas.issue import IssueCreate, IssueResponse, IssueUpdate
from staysync.services.analytics import DashboardService
from staysync.services.communication import NotificationDispatcher
from staysync.services.issue import IssueService

router = APIRouter(prefix="/issues", tags=["issues"])


def get_issue_service(
    db: Session = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    dispatcher: NotificationDispatcher = Depends(deps.get_dispatcher),
) -> IssueService:
    return IssueService(db, settings, dispatcher)


@router.get("", response_model=List[IssueResponse])
def list_issues(
    status_filter: Optional[IssueStatus] = Query(default=None, alias="status"),
    current_user: User = Depends(deps.require_permission("issues", "read")),
    service: IssueService = Depends(get_issue_service),
):
    return service.list_issues(current_user.organization_id, status=status_filter)


@router.post("", response_model=IssueResponse, status_code=status.HTTP_201_CREATED)
def report_issue(
    payload: IssueCreate,
    current_user: User = Depends(deps.require_permission("issues", "create")),
    service: IssueService = Depends(get_issue_service),
    dashboard: DashboardService = Depends(deps.get_dashboard_service),
):
    issue = service.report(current_user.organization_id, payload)
    dashboard.invalidate(current_user.organization_id)
    return issue


@router.patch("/{issue_id}", response_model=IssueResponse)
def update_issue(
    issue_id: str,
    payload: IssueUpdate,
    current_user: User = Depends(deps.require_permission("issues", "update")),
    service: IssueService = Depends(get_issue_service),
    dashboard: DashboardService = Depends(deps.get_dashboard_service),
):
    issue = service.update_status(current_user.organization_id, issue_id, payload.status)
    dashboard.invalidate(current_user.organization_id)
    return issue
