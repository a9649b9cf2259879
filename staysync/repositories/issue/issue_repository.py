"""Issue repository."""

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from staysync.models import Issue
from staysync.models.base.enums import IssueStatus
from staysync.repositories.base import BaseRepository


class IssueRepository(BaseRepository[Issue]):
    def __init__(self, db: Session):
        super().__init__(Issue, db)

    def count_active(self, organization_id: str) -> int:
        stmt = select(func.count(Issue.id)).where(
            Issue.organization_id == organization_id,
            Issue.status.in_([IssueStatus.PENDING, IssueStatus.IN_PROGRESS]),
        )
        return self.db.scalar(stmt) or 0
