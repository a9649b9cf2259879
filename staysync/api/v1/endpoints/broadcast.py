from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from staysync.api import deps
from staysync.models import User
from staysync.schemas.broadcast import BroadcastRequest, BroadcastResponse
from staysync.services.communication import BroadcastService, NotificationDispatcher

router = APIRouter(prefix="/broadcast", tags=["notifications"])


@router.post("", response_model=BroadcastResponse)
def broadcast(
    payload: BroadcastRequest,
    current_user: User = Depends(deps.require_permission("broadcast", "create")),
    db: Session = Depends(deps.get_db),
    dispatcher: NotificationDispatcher = Depends(deps.get_dispatcher),
):
    """Push an announcement to Active residents with a linked LINE account."""
    return BroadcastService(db, dispatcher).broadcast(current_user.organization_id, payload)
