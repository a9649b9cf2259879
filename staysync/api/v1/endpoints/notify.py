from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from staysync.api import deps
from staysync.config.settings import Settings
from staysync.models import User
from staysync.schemas.billing import OverdueRunResponse
from staysync.services.billing import OverdueService
from staysync.services.communication import NotificationDispatcher

router = APIRouter(prefix="/notify", tags=["notifications"])


@router.post("/overdue", response_model=OverdueRunResponse)
def notify_overdue(
    current_user: User = Depends(deps.require_permission("billing", "update")),
    db: Session = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    dispatcher: NotificationDispatcher = Depends(deps.get_dispatcher),
):
    """Send reminders for the caller's organization's overdue bills now."""
    summary = OverdueService(db, settings, dispatcher).run([current_user.organization_id])
    return OverdueRunResponse(**summary.model_dump())
