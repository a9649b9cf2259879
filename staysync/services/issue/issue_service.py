"""
Maintenance issues reported by staff, residents or chat-bot guests.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from staysync.config.settings import Settings
from staysync.core.exceptions import ResidentNotFoundError, ResourceNotFoundError
from staysync.models import Issue, Resident
from staysync.models.base.enums import IssueStatus
from staysync.repositories.issue import IssueRepository
from staysync.repositories.resident import ResidentRepository
from staysync.schemas.issue import IssueCreate
from staysync.services.base import BaseService
from staysync.services.communication import message_templates as templates
from staysync.services.communication.notification_dispatcher import NotificationDispatcher
from staysync.services.system.system_config_service import SystemConfigService


class IssueService(BaseService):
    def __init__(self, db_session: Session, settings: Settings, dispatcher: NotificationDispatcher):
        super().__init__(db_session)
        self.settings = settings
        self.dispatcher = dispatcher
        self.issues = IssueRepository(db_session)
        self.residents = ResidentRepository(db_session)
        self.config_service = SystemConfigService(db_session, settings)

    def list_issues(self, organization_id: str, status: Optional[IssueStatus] = None) -> List[Issue]:
        return self.issues.list_in_org(
            organization_id,
            order_by=[Issue.created_at.desc()],
            status=status,
        )

    def report(self, organization_id: str, data: IssueCreate, reporter_line_user_id: Optional[str] = None) -> Issue:
        """
        Record an issue and alert the admins.

        Raises:
            ResidentNotFoundError: If ``resident_id`` is not in the organization
        """
        resident: Optional[Resident] = None
        if data.resident_id:
            resident = self.residents.get_in_org(data.resident_id, organization_id)
            if resident is None:
                raise ResidentNotFoundError(data.resident_id)

        issue = Issue(
            organization_id=organization_id,
            status=IssueStatus.PENDING,
            reporter_line_user_id=reporter_line_user_id,
            **data.model_dump(),
        )
        with self.transaction():
            self.issues.create(issue)

        self._logger.info("Issue reported", extra={"issue_id": issue.id, "resident_id": issue.resident_id})
        self._notify_admins(issue, resident)
        return issue

    def update_status(self, organization_id: str, issue_id: str, status: IssueStatus) -> Issue:
        issue = self.issues.get_in_org(issue_id, organization_id)
        if issue is None:
            raise ResourceNotFoundError("Issue", issue_id)
        with self.transaction():
            issue.status = status
        return issue

    def _notify_admins(self, issue: Issue, resident: Optional[Resident]) -> None:
        if resident is not None:
            reporter = resident.full_name
            room_number = resident.room.number if resident.room else None
        else:
            reporter = issue.reporter_name or "Guest"
            room_number = None

        config = self.config_service.find(issue.organization_id)
        self.dispatcher.notify_admins(
            config.admin_line_user_id_list if config else [],
            templates.repair_reported(issue, room_number, reporter),
            context={"purpose": "repair_reported", "issue_id": issue.id},
        )
