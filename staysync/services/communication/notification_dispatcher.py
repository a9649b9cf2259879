"""
Notification dispatcher for chat messages.

Contract: notify, log on failure, never raise. Every send returns a
``NotificationResult`` that callers may inspect or discard; a missing LINE
token, a missing recipient or an API failure never interrupts the business
operation that triggered the notification.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from staysync.core.exceptions import ExternalServiceError
from staysync.core.logging import get_logger
from staysync.services.integrations.line_client import LineMessagingClient, Message, text_message


@dataclass(frozen=True)
class NotificationResult:
    """Outcome of one send attempt."""

    delivered: bool
    recipient: Optional[str] = None
    skipped: bool = False
    error: Optional[str] = None

    @classmethod
    def skip(cls, reason: str, recipient: Optional[str] = None) -> "NotificationResult":
        return cls(delivered=False, recipient=recipient, skipped=True, error=reason)


class NotificationDispatcher:
    """
    Sends LINE messages on behalf of the services.

    ``owner_line_user_id`` is the deployment-wide fallback recipient for
    operational alerts (new slips, repair requests).
    """

    def __init__(self, client: LineMessagingClient, owner_line_user_id: Optional[str] = None):
        self.client = client
        self.owner_line_user_id = owner_line_user_id
        self._logger = get_logger(self.__class__.__name__)

    # -------------------------------------------------------------------------
    # Sending
    # -------------------------------------------------------------------------

    def push_text(self, to: Optional[str], text: str, context: Optional[Dict[str, Any]] = None) -> NotificationResult:
        return self.push(to, [text_message(text)], context)

    def push(
        self,
        to: Optional[str],
        messages: List[Message],
        context: Optional[Dict[str, Any]] = None,
    ) -> NotificationResult:
        """
        Push messages to one LINE user.

        Args:
            to: LINE user id; ``None`` is a logged skip
            messages: LINE message objects
            context: Extra log fields (bill id, purpose, ...)

        Returns:
            NotificationResult describing the outcome
        """
        log_extra = dict(context or {})
        if not to:
            self._logger.info("Notification skipped: no recipient", extra=log_extra)
            return NotificationResult.skip("no recipient")
        if not self.client.enabled:
            self._logger.info("Notification skipped: LINE not configured", extra=log_extra)
            return NotificationResult.skip("line disabled", recipient=to)

        try:
            self.client.push(to, messages)
        except ExternalServiceError as e:
            self._logger.warning(
                f"Notification failed: {e.message}",
                extra={**log_extra, **e.details, "recipient": to},
            )
            return NotificationResult(delivered=False, recipient=to, error=e.message)

        self._logger.info("Notification sent", extra={**log_extra, "recipient": to})
        return NotificationResult(delivered=True, recipient=to)

    def reply_text(self, reply_token: Optional[str], texts: Iterable[str]) -> NotificationResult:
        """Reply to a webhook event; up to five messages per reply."""
        if not reply_token:
            return NotificationResult.skip("no reply token")
        if not self.client.enabled:
            self._logger.info("Reply skipped: LINE not configured")
            return NotificationResult.skip("line disabled")
        messages = [text_message(text) for text in texts][:5]
        try:
            self.client.reply(reply_token, messages)
        except ExternalServiceError as e:
            self._logger.warning(f"Reply failed: {e.message}", extra=e.details)
            return NotificationResult(delivered=False, error=e.message)
        return NotificationResult(delivered=True)

    def notify_admins(
        self,
        admin_line_user_ids: Iterable[str],
        text: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> List[NotificationResult]:
        """
        Alert every configured admin, falling back to the deployment owner.
        """
        recipients = [item for item in admin_line_user_ids if item]
        if not recipients and self.owner_line_user_id:
            recipients = [self.owner_line_user_id]
        if not recipients:
            self._logger.info("Admin notification skipped: no admin recipients", extra=dict(context or {}))
            return [NotificationResult.skip("no admin recipients")]
        return [self.push_text(recipient, text, context) for recipient in recipients]

    def get_display_name(self, line_user_id: str) -> Optional[str]:
        """Best-effort profile lookup used to label guest reports."""
        if not self.client.enabled:
            return None
        try:
            return self.client.get_profile(line_user_id).get("displayName")
        except ExternalServiceError as e:
            self._logger.warning(f"Profile lookup failed: {e.message}", extra={"line_user_id": line_user_id})
            return None
