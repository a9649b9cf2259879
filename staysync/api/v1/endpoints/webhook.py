"""
LINE Messaging API webhook.
"""

import json
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session

from staysync.api import deps
from staysync.config.settings import Settings
from staysync.core.exceptions import AuthenticationError, ValidationError
from staysync.core.logging import get_logger
from staysync.services.communication import NotificationDispatcher
from staysync.services.communication.chatbot_service import ChatbotService
from staysync.services.integrations import LineMessagingClient

logger = get_logger(__name__)

router = APIRouter(prefix="/webhook", tags=["webhook"])


@router.post("/line")
async def line_webhook(
    request: Request,
    x_line_signature: Optional[str] = Header(default=None),
    db: Session = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    client: LineMessagingClient = Depends(deps.get_line_client),
    dispatcher: NotificationDispatcher = Depends(deps.get_dispatcher),
) -> Dict[str, Any]:
    body = await request.body()
    if not client.verify_signature(body, x_line_signature):
        logger.warning("LINE webhook rejected: bad signature")
        raise AuthenticationError("Invalid LINE signature")

    try:
        payload = json.loads(body or b"{}")
    except ValueError:
        raise ValidationError("Webhook body must be JSON") from None
    if not isinstance(payload, dict):
        raise ValidationError("Webhook body must be a JSON object")

    events = payload.get("events") or []
    handled = ChatbotService(db, settings, dispatcher).handle_events(events)
    logger.info("LINE webhook processed", extra={"events": len(events), "handled": handled})
    return {"success": True, "handled": handled}
