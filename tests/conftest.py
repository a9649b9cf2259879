"""
Shared fixtures: an in-memory application per test, a recording LINE client
and helpers to register organizations and build auth headers.
"""

from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from staysync.config.settings import Settings
from staysync.main import create_app
from staysync.services.communication import NotificationDispatcher
from staysync.services.integrations import LineMessagingClient

API = "/api/v1"
OWNER_PASSWORD = "owner-pass-123"


class RecordingLineClient(LineMessagingClient):
    """LINE client that records outgoing messages instead of calling the API."""

    def __init__(self, channel_secret: Optional[str] = None, fail_push: bool = False):
        super().__init__(access_token="test-token", channel_secret=channel_secret)
        self.pushes: List[Dict[str, Any]] = []
        self.replies: List[Dict[str, Any]] = []
        self.profiles: Dict[str, Dict[str, Any]] = {}
        self.fail_push = fail_push

    def push(self, to, messages):
        if self.fail_push:
            from staysync.core.exceptions import ExternalServiceError

            raise ExternalServiceError("line", "Push rejected", status=400)
        self.pushes.append({"to": to, "messages": messages})

    def reply(self, reply_token, messages):
        self.replies.append({"replyToken": reply_token, "messages": messages})

    def get_profile(self, user_id):
        return self.profiles.get(user_id, {"displayName": "Guest Person"})

    def pushed_texts(self, to: Optional[str] = None) -> List[str]:
        return [
            message["text"]
            for push in self.pushes
            if to is None or push["to"] == to
            for message in push["messages"]
        ]

    def reply_texts(self) -> List[str]:
        return [message["text"] for reply in self.replies for message in reply["messages"]]


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        DB_CREATE_TABLES=True,
        ENVIRONMENT="test",
        JWT_SECRET_KEY="test-secret-key-for-jwt-signing-000",
        PASSWORD_BCRYPT_ROUNDS=4,
        CRON_SECRET="cron-secret",
        BACKUP_API_KEY="backup-key",
        LINE_CHANNEL_ACCESS_TOKEN="test-token",
        OWNER_LINE_USER_ID="U-owner",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        APP_PUBLIC_URL="https://dorm.example.com",
        LOG_LEVEL="WARNING",
        LOG_FORMAT="console",
        CACHE_BACKEND="memory",
    )


@pytest.fixture
def line_client() -> RecordingLineClient:
    return RecordingLineClient()


@pytest.fixture
def app(settings, line_client):
    application = create_app(settings)
    application.state.line_client = line_client
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def dispatcher(line_client, settings) -> NotificationDispatcher:
    return NotificationDispatcher(line_client, settings.OWNER_LINE_USER_ID)


def register(client: TestClient, email: str = "owner@example.com", organization: str = "Sunrise Dorm") -> Dict[str, Any]:
    response = client.post(
        f"{API}/auth/register",
        json={
            "organization_name": organization,
            "email": email,
            "password": OWNER_PASSWORD,
            "full_name": "Owner Person",
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def owner(client) -> Dict[str, Any]:
    """Registered owner: ``{"token", "headers", "user"}``."""
    body = register(client)
    return {"token": body["access_token"], "headers": auth_headers(body["access_token"]), "user": body["user"]}


@pytest.fixture
def owner_headers(owner) -> Dict[str, str]:
    return owner["headers"]


def create_room(client: TestClient, headers: Dict[str, str], number: str = "101", price: str = "3500", **extra) -> Dict[str, Any]:
    response = client.post(f"{API}/rooms", json={"number": number, "price": price, **extra}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def check_in(
    client: TestClient,
    headers: Dict[str, str],
    room_id: str,
    full_name: str = "Resident A",
    start: str = "2024-01-01",
    **extra,
) -> Dict[str, Any]:
    payload = {"full_name": full_name, "contract_start_date": start, **extra}
    response = client.post(f"{API}/rooms/{room_id}/checkin", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def invite(client: TestClient, headers: Dict[str, str], email: str, role: str) -> Dict[str, str]:
    """Invite a user and log them in; returns their auth headers."""
    response = client.post(
        f"{API}/users/invite",
        json={"email": email, "full_name": f"{role.title()} User", "role": role},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    password = response.json()["temporary_password"]
    login = client.post(f"{API}/auth/login", json={"email": email, "password": password})
    assert login.status_code == 200, login.text
    return auth_headers(login.json()["access_token"])
