from staysync.services.integrations.line_client import LineMessagingClient, text_message

__all__ = ["LineMessagingClient", "text_message"]
