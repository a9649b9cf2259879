from staysync.services.communication.notification_dispatcher import NotificationDispatcher, NotificationResult
from staysync.services.communication.broadcast_service import BroadcastService

__all__ = ["NotificationDispatcher", "NotificationResult", "BroadcastService"]
