import base64
import hashlib
import hmac
import json

from staysync.services.communication import message_templates as templates
from tests.conftest import API, check_in, create_room

WEBHOOK = f"{API}/webhook/line"


def text_event(user_id: str, text: str, token: str = "reply-token"):
    return {
        "type": "message",
        "replyToken": token,
        "source": {"type": "user", "userId": user_id},
        "message": {"type": "text", "text": text},
    }


def send(client, *events):
    response = client.post(WEBHOOK, json={"events": list(events)})
    assert response.status_code == 200, response.text
    return response.json()


def test_follow_event_gets_welcome(client, owner, line_client):
    body = send(client, {"type": "follow", "replyToken": "t1", "source": {"userId": "U-new"}})
    assert body == {"success": True, "handled": 1}
    assert line_client.reply_texts() == [templates.WELCOME]


def test_guest_repair_report(client, owner, owner_headers, line_client):
    line_client.profiles["U-guest"] = {"displayName": "Nok"}

    send(client, text_event("U-guest", "แจ้งซ่อม"))
    send(client, text_event("U-guest", "Water leaking from the ceiling"))

    assert line_client.reply_texts() == [templates.REPAIR_PROMPT, templates.REPAIR_RECEIVED]
    issues = client.get(f"{API}/issues", headers=owner_headers).json()
    assert len(issues) == 1
    assert issues[0]["description"] == "Water leaking from the ceiling"
    assert issues[0]["reporter_name"] == "Nok"
    assert issues[0]["reporter_contact"] == "Line:U-guest"
    assert issues[0]["resident_id"] is None
    # Admins (falling back to the deployment owner) hear about the repair
    assert line_client.pushed_texts(to="U-owner")


def test_plain_text_is_ignored_when_idle(client, owner, owner_headers, line_client):
    send(client, text_event("U-guest", "hello there"))
    assert line_client.replies == []
    assert client.get(f"{API}/issues", headers=owner_headers).json() == []


def test_link_code_and_bill_query(client, owner_headers, line_client):
    room = create_room(client, owner_headers, number="101")
    resident = check_in(client, owner_headers, room["id"], full_name="Somchai")
    code = client.post(f"{API}/residents/{resident['id']}/generate-code", headers=owner_headers).json()["code"]

    send(client, text_event("U-somchai", code))
    assert line_client.reply_texts()[-1] == templates.link_success("Somchai", "101")

    linked = client.get(f"{API}/residents/{resident['id']}", headers=owner_headers).json()
    assert linked["line_user_id"] == "U-somchai"
    assert linked["line_verify_code"] is None

    send(client, text_event("U-somchai", "Menu: Bill"))
    assert line_client.reply_texts()[-1] == templates.NO_BILLS

    client.post(
        f"{API}/billing",
        json={"room_id": room["id"], "water_meter_current": "10", "electric_meter_current": "10", "bill_month": "2024-05"},
        headers=owner_headers,
    )
    send(client, text_event("U-somchai", "บิลของฉัน"))
    assert line_client.reply_texts()[-1].startswith("Latest bill")

    # A used code cannot be replayed
    send(client, text_event("U-other", code))
    assert line_client.reply_texts()[-1] == templates.LINK_FAILED


def test_linked_resident_repair_is_attributed(client, owner_headers, line_client):
    room = create_room(client, owner_headers)
    resident = check_in(client, owner_headers, room["id"], line_user_id="U-res")

    send(client, text_event("U-res", "Menu: Repair"), text_event("U-res", "Broken fan", token="t2"))

    issues = client.get(f"{API}/issues", headers=owner_headers).json()
    assert [(i["resident_id"], i["description"]) for i in issues] == [(resident["id"], "Broken fan")]


def test_guest_bill_query_gets_guest_menu(client, owner, line_client):
    send(client, text_event("U-guest", "Menu: Bill"))
    assert line_client.reply_texts() == [templates.GUEST_MENU]


def test_wifi_reply_uses_settings(client, owner_headers, line_client):
    client.put(f"{API}/settings", json={"wifi_ssid": "Dorm-5G", "wifi_password": "secret"}, headers=owner_headers)
    send(client, text_event("U-guest", "Wifi"))
    assert line_client.reply_texts() == ["Wifi: Dorm-5G\nPassword: secret"]


def test_signature_is_enforced_when_secret_set(client, owner, line_client):
    line_client.channel_secret = "channel-secret"
    body = json.dumps({"events": []}).encode("utf-8")

    rejected = client.post(WEBHOOK, content=body, headers={"X-Line-Signature": "bogus"})
    assert rejected.status_code == 401

    signature = base64.b64encode(hmac.new(b"channel-secret", body, hashlib.sha256).digest()).decode("utf-8")
    accepted = client.post(
        WEBHOOK,
        content=body,
        headers={"X-Line-Signature": signature, "Content-Type": "application/json"},
    )
    assert accepted.status_code == 200
    assert accepted.json() == {"success": True, "handled": 0}


def test_non_json_body_is_rejected(client):
    response = client.post(WEBHOOK, content=b"not json")
    assert response.status_code == 400
