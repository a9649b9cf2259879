# staysync/models/communication/line_bot_state.py
"""
Per-user chat-bot conversation state.
"""

from typing import Any, Dict, Optional

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from staysync.models.base.base_model import BaseModel, enum_column
from staysync.models.base.enums import ConversationState
from staysync.models.base.mixins import TimestampMixin

__all__ = ["LineBotState"]


class LineBotState(BaseModel, TimestampMixin):
    __tablename__ = "line_bot_states"

    line_user_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    state: Mapped[ConversationState] = mapped_column(
        enum_column(ConversationState),
        nullable=False,
        default=ConversationState.IDLE,
    )
    data: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
