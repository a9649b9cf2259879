"""
LINE chat-bot webhook handling.

Each LINE user has a ``LineBotState`` (created IDLE on first contact). The
only multi-step conversation is a repair report: a repair trigger moves the
user to REPAIR_DESC, and the next message becomes the issue description.

Text messages are matched in priority order:

1. repair trigger          -> REPAIR_DESC
2. bill query              -> latest bill status
3. wifi / rules / contact  -> information replies
4. state REPAIR_DESC       -> create the issue, back to IDLE
5. ``#CODE``               -> link the resident holding that code
6. "report..." prefix      -> REPAIR_DESC
7. anything else is ignored
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from staysync.config.settings import Settings
from staysync.models import LineBotState, Resident, SystemConfig
from staysync.models.base.enums import ConversationState
from staysync.repositories.billing import BillingRepository
from staysync.repositories.communication import LineBotStateRepository
from staysync.repositories.organization import OrganizationRepository
from staysync.repositories.resident import ResidentRepository
from staysync.schemas.issue import IssueCreate
from staysync.services.base import BaseService
from staysync.services.communication import message_templates as templates
from staysync.services.communication.notification_dispatcher import NotificationDispatcher
from staysync.services.issue.issue_service import IssueService
from staysync.services.system.system_config_service import SystemConfigService

REPAIR_TRIGGERS = {"แจ้งซ่อม", "Menu: Repair"}
BILL_TRIGGERS = {"บิลของฉัน", "Menu: Bill"}
WIFI_TRIGGERS = {"Wifi", "Menu: Wifi"}
RULES_TRIGGERS = {"Rules", "Menu: Rules"}
CONTACT_TRIGGERS = {"Admin", "Menu: Contact"}
GUEST_REPORTER_NAME = "Line User"


class ChatbotService(BaseService):
    def __init__(self, db_session: Session, settings: Settings, dispatcher: NotificationDispatcher):
        super().__init__(db_session)
        self.settings = settings
        self.dispatcher = dispatcher
        self.states = LineBotStateRepository(db_session)
        self.residents = ResidentRepository(db_session)
        self.bills = BillingRepository(db_session)
        self.organizations = OrganizationRepository(db_session)
        self.config_service = SystemConfigService(db_session, settings)
        self.issue_service = IssueService(db_session, settings, dispatcher)

    def handle_events(self, events: List[Dict[str, Any]]) -> int:
        """
        Process a webhook batch; a failing event is logged and skipped.

        Returns:
            Number of events handled without error
        """
        handled = 0
        for event in events:
            try:
                self.handle_event(event)
            except Exception as e:
                self.db.rollback()
                self._logger.error(
                    f"Webhook event failed: {e}",
                    exc_info=True,
                    extra={"event_type": event.get("type")},
                )
                continue
            handled += 1
        return handled

    def handle_event(self, event: Dict[str, Any]) -> None:
        user_id = (event.get("source") or {}).get("userId")
        reply_token = event.get("replyToken")
        if not user_id:
            return

        if event.get("type") == "follow":
            self._logger.info("New LINE follower", extra={"line_user_id": user_id})
            self.dispatcher.reply_text(reply_token, [templates.WELCOME])
            return

        message = event.get("message") or {}
        if event.get("type") == "message" and message.get("type") == "text":
            self.handle_text(user_id, (message.get("text") or "").strip(), reply_token)

    # -------------------------------------------------------------------------
    # Text messages
    # -------------------------------------------------------------------------

    def handle_text(self, line_user_id: str, text: str, reply_token: Optional[str]) -> None:
        state = self._get_or_create_state(line_user_id)

        if text in REPAIR_TRIGGERS:
            self._set_state(state, ConversationState.REPAIR_DESC)
            self.dispatcher.reply_text(reply_token, [templates.REPAIR_PROMPT])
            return

        if text.lower() == "myid" or text in BILL_TRIGGERS:
            self._set_state(state, ConversationState.IDLE)
            self.dispatcher.reply_text(reply_token, [self._bill_reply(line_user_id)])
            return

        if text in WIFI_TRIGGERS:
            self.dispatcher.reply_text(reply_token, [templates.wifi_info(self._config_for(line_user_id))])
            return
        if text in RULES_TRIGGERS:
            self.dispatcher.reply_text(reply_token, [templates.rules_info(self._config_for(line_user_id))])
            return
        if text in CONTACT_TRIGGERS:
            self.dispatcher.reply_text(reply_token, [templates.contact_info(self._config_for(line_user_id))])
            return

        if state.state == ConversationState.REPAIR_DESC:
            self._report_repair(line_user_id, text)
            self._set_state(state, ConversationState.IDLE)
            self.dispatcher.reply_text(reply_token, [templates.REPAIR_RECEIVED])
            return

        if text.startswith("#"):
            self.dispatcher.reply_text(reply_token, [self._link_account(line_user_id, text, state)])
            return

        if text.startswith("แจ้งซ่อม") or text.lower().startswith("report"):
            self._set_state(state, ConversationState.REPAIR_DESC)
            self.dispatcher.reply_text(reply_token, [templates.REPAIR_PROMPT])

    def _bill_reply(self, line_user_id: str) -> str:
        resident = self.residents.get_active_by_line_user_id(line_user_id)
        if resident is None:
            return templates.GUEST_MENU
        bill = self.bills.latest_for_resident(resident.id)
        if bill is None:
            return templates.NO_BILLS
        config = self.config_service.find(resident.organization_id)
        return templates.bill_status(bill, config, templates.pay_url(self.settings.APP_PUBLIC_URL, bill.id))

    def _report_repair(self, line_user_id: str, description: str) -> None:
        resident = self.residents.get_active_by_line_user_id(line_user_id)
        if resident is not None:
            data = IssueCreate(description=description, resident_id=resident.id)
            organization_id = resident.organization_id
        else:
            organization = self.organizations.primary()
            if organization is None:
                self._logger.warning("Guest repair report dropped: no organization", extra={"line_user_id": line_user_id})
                return
            data = IssueCreate(
                description=description,
                reporter_name=self.dispatcher.get_display_name(line_user_id) or GUEST_REPORTER_NAME,
                reporter_contact=f"Line:{line_user_id}",
            )
            organization_id = organization.id
        self.issue_service.report(organization_id, data, reporter_line_user_id=line_user_id)

    def _link_account(self, line_user_id: str, code: str, state: LineBotState) -> str:
        resident = self.residents.get_by_verify_code(code)
        if resident is None:
            return templates.LINK_FAILED

        with self.transaction():
            resident.line_user_id = line_user_id
            resident.line_verify_code = None
            state.state = ConversationState.IDLE
            state.data = None

        self._logger.info("LINE account linked", extra={"resident_id": resident.id})
        return templates.link_success(resident.full_name, resident.room.number if resident.room else None)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _get_or_create_state(self, line_user_id: str) -> LineBotState:
        state = self.states.get_by_line_user_id(line_user_id)
        if state is None:
            with self.transaction():
                state = self.states.create(LineBotState(line_user_id=line_user_id, state=ConversationState.IDLE))
        return state

    def _set_state(self, state: LineBotState, value: ConversationState) -> None:
        with self.transaction():
            state.state = value
            state.data = None

    def _config_for(self, line_user_id: str) -> Optional[SystemConfig]:
        resident: Optional[Resident] = self.residents.get_active_by_line_user_id(line_user_id)
        if resident is not None:
            return self.config_service.find(resident.organization_id)
        organization = self.organizations.primary()
        return self.config_service.find(organization.id) if organization else None


__all__ = ["ChatbotService"]
