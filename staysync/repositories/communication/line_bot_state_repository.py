"""Chat-bot state repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from staysync.models import LineBotState
from staysync.repositories.base import BaseRepository


class LineBotStateRepository(BaseRepository[LineBotState]):
    def __init__(self, db: Session):
        super().__init__(LineBotState, db)

    def get_by_line_user_id(self, line_user_id: str) -> Optional[LineBotState]:
        stmt = select(LineBotState).where(LineBotState.line_user_id == line_user_id)
        return self.db.scalars(stmt).first()
