from staysync.models.communication.line_bot_state import LineBotState

__all__ = ["LineBotState"]
