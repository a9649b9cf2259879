from staysync.services.communication import NotificationDispatcher
from staysync.services.integrations import LineMessagingClient, text_message
from tests.conftest import RecordingLineClient


def test_push_without_recipient_is_skipped(dispatcher, line_client):
    result = dispatcher.push_text(None, "hello")
    assert result.skipped is True
    assert result.delivered is False
    assert line_client.pushes == []


def test_push_without_token_is_skipped():
    dispatcher = NotificationDispatcher(LineMessagingClient(access_token=None))
    result = dispatcher.push_text("U-1", "hello")
    assert result.skipped is True
    assert result.error == "line disabled"


def test_push_failure_is_reported_not_raised():
    dispatcher = NotificationDispatcher(RecordingLineClient(fail_push=True))
    result = dispatcher.push_text("U-1", "hello")
    assert result.delivered is False
    assert result.skipped is False
    assert result.error == "Push rejected"


def test_admin_alerts_fall_back_to_owner(dispatcher, line_client):
    results = dispatcher.notify_admins([], "New slip")
    assert [r.recipient for r in results] == ["U-owner"]

    line_client.pushes.clear()
    dispatcher.notify_admins(["U-a", "", "U-b"], "New slip")
    assert [push["to"] for push in line_client.pushes] == ["U-a", "U-b"]


def test_reply_is_limited_to_five_messages(dispatcher, line_client):
    dispatcher.reply_text("token", [str(i) for i in range(7)])
    assert len(line_client.replies[0]["messages"]) == 5


def test_signature_check_without_secret():
    assert LineMessagingClient(access_token="t").verify_signature(b"{}", None) is True
    assert LineMessagingClient(access_token="t", channel_secret="s").verify_signature(b"{}", None) is False


def test_text_message_shape():
    assert text_message("hi") == {"type": "text", "text": "hi"}


def test_health_and_request_id(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.headers["X-Request-ID"] == "req-123"
    assert "X-Process-Time" in response.headers
