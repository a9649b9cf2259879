"""
LINE Messaging API client.

Thin wrapper over the push, reply and profile endpoints plus webhook
signature validation. Every transport or HTTP failure is raised as
``ExternalServiceError``; deciding whether that matters is the caller's job.
"""

import base64
import hashlib
import hmac
from typing import Any, Dict, List, Optional

import requests

from staysync.config.settings import Settings
from staysync.core.exceptions import ExternalServiceError
from staysync.core.logging import get_logger

logger = get_logger(__name__)

Message = Dict[str, Any]

LINE_TEXT_LIMIT = 5000


def text_message(text: str) -> Message:
    return {"type": "text", "text": text[:LINE_TEXT_LIMIT]}


class LineMessagingClient:
    """HTTP client for the LINE Messaging API."""

    def __init__(
        self,
        access_token: Optional[str],
        channel_secret: Optional[str] = None,
        base_url: str = "https://api.line.me/v2/bot",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.access_token = access_token
        self.channel_secret = channel_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "LineMessagingClient":
        return cls(
            access_token=settings.LINE_CHANNEL_ACCESS_TOKEN,
            channel_secret=settings.LINE_CHANNEL_SECRET,
            base_url=settings.LINE_API_BASE_URL,
            timeout=settings.LINE_REQUEST_TIMEOUT,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.access_token)

    # -------------------------------------------------------------------------
    # Messaging
    # -------------------------------------------------------------------------

    def push(self, to: str, messages: List[Message]) -> None:
        """Push messages to a user id."""
        self._post("/message/push", {"to": to, "messages": messages})

    def reply(self, reply_token: str, messages: List[Message]) -> None:
        """Reply to a webhook event using its one-time reply token."""
        self._post("/message/reply", {"replyToken": reply_token, "messages": messages})

    def get_profile(self, user_id: str) -> Dict[str, Any]:
        """Fetch a user's public profile (displayName, pictureUrl, ...)."""
        try:
            response = self.session.get(
                f"{self.base_url}/profile/{user_id}",
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ExternalServiceError("line", f"Profile request failed: {e}") from e
        if response.status_code != 200:
            raise ExternalServiceError("line", "Profile request rejected", status=response.status_code)
        return response.json()

    # -------------------------------------------------------------------------
    # Webhook signature
    # -------------------------------------------------------------------------

    def verify_signature(self, body: bytes, signature: Optional[str]) -> bool:
        """
        Validate ``X-Line-Signature``: base64(HMAC-SHA256(channel_secret, body)).

        Returns True when no channel secret is configured.
        """
        if not self.channel_secret:
            return True
        if not signature:
            return False
        digest = hmac.new(self.channel_secret.encode("utf-8"), body, hashlib.sha256).digest()
        expected = base64.b64encode(digest).decode("utf-8")
        return hmac.compare_digest(expected, signature)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }

    def _post(self, path: str, payload: Dict[str, Any]) -> None:
        if not self.enabled:
            raise ExternalServiceError("line", "LINE channel access token is not configured")
        try:
            response = self.session.post(
                f"{self.base_url}{path}",
                json=payload,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ExternalServiceError("line", f"Request to {path} failed: {e}") from e
        if response.status_code >= 400:
            raise ExternalServiceError(
                "line",
                f"LINE API rejected {path}: {response.text[:200]}",
                status=response.status_code,
            )
