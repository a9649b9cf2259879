"""
Announcements pushed to residents' LINE accounts.
"""

from sqlalchemy.orm import Session

from staysync.repositories.resident import ResidentRepository
from staysync.schemas.broadcast import BroadcastRequest, BroadcastResponse
from staysync.services.base import BaseService
from staysync.services.communication import message_templates as templates
from staysync.services.communication.notification_dispatcher import NotificationDispatcher


class BroadcastService(BaseService):
    """
    Sends one announcement to every matching Active resident.

    Each push is independent; failed pushes are logged by the dispatcher
    and only delivered ones are counted.
    """

    def __init__(self, db_session: Session, dispatcher: NotificationDispatcher):
        super().__init__(db_session)
        self.dispatcher = dispatcher
        self.residents = ResidentRepository(db_session)

    def broadcast(self, organization_id: str, request: BroadcastRequest) -> BroadcastResponse:
        filters = request.filters
        recipients = self.residents.line_recipients(
            organization_id,
            floor=filters.floor,
            room_number=filters.room_number,
            unpaid_only=filters.unpaid_only,
        )
        text = templates.announcement(request.message)

        delivered = 0
        for resident in recipients:
            result = self.dispatcher.push_text(
                resident.line_user_id,
                text,
                context={"purpose": "broadcast", "resident_id": resident.id},
            )
            if result.delivered:
                delivered += 1

        self._logger.info(
            "Broadcast sent",
            extra={
                "organization_id": organization_id,
                "recipients": len(recipients),
                "delivered": delivered,
                "unpaid_only": filters.unpaid_only,
            },
        )
        return BroadcastResponse(recipients=len(recipients), count=delivered)
