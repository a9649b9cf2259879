"""Organization repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from staysync.models import Organization
from staysync.repositories.base import BaseRepository


class OrganizationRepository(BaseRepository[Organization]):
    def __init__(self, db: Session):
        super().__init__(Organization, db)

    def primary(self) -> Optional[Organization]:
        """The first organization registered on this deployment."""
        stmt = select(Organization).order_by(Organization.created_at, Organization.id)
        return self.db.scalars(stmt).first()
