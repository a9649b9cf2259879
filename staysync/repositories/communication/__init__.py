from staysync.repositories.communication.line_bot_state_repository import LineBotStateRepository

__all__ = ["LineBotStateRepository"]
