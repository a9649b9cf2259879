from staysync.core.permissions import has_permission
from staysync.models.base.enums import UserRole
from tests.conftest import API, OWNER_PASSWORD, auth_headers, create_room, invite, register


class TestPermissions:
    def test_owner_has_everything(self):
        assert has_permission(UserRole.OWNER, "backup", "export")

    def test_admin_cannot_manage_users(self):
        assert has_permission(UserRole.ADMIN, "users", "read")
        assert not has_permission(UserRole.ADMIN, "users", "create")

    def test_staff_and_tenant(self):
        assert has_permission(UserRole.STAFF, "issues", "update")
        assert not has_permission(UserRole.STAFF, "billing", "update")
        assert has_permission(UserRole.TENANT, "bookings", "create")
        assert not has_permission(UserRole.TENANT, "residents", "read")


def test_register_and_me(client):
    body = register(client, email="Boss@Example.com")
    assert body["token_type"] == "bearer"
    assert body["user"]["role"] == "OWNER"
    assert body["user"]["email"] == "boss@example.com"

    me = client.get(f"{API}/auth/me", headers=auth_headers(body["access_token"]))
    assert me.status_code == 200
    assert me.json()["id"] == body["user"]["id"]


def test_duplicate_registration(client, owner):
    response = client.post(
        f"{API}/auth/register",
        json={
            "organization_name": "Another",
            "email": "owner@example.com",
            "password": OWNER_PASSWORD,
            "full_name": "Someone",
        },
    )
    assert response.status_code == 409


def test_login(client, owner):
    ok = client.post(f"{API}/auth/login", json={"email": "owner@example.com", "password": OWNER_PASSWORD})
    assert ok.status_code == 200
    assert ok.json()["user"]["last_login_at"] is not None

    bad = client.post(f"{API}/auth/login", json={"email": "owner@example.com", "password": "wrong-password"})
    assert bad.status_code == 401
    assert bad.json()["code"] == "AUTHENTICATION_FAILED"


def test_requests_without_token_are_rejected(client):
    assert client.get(f"{API}/rooms").status_code == 401
    assert client.get(f"{API}/rooms", headers=auth_headers("not-a-token")).status_code == 401


def test_staff_is_limited(client, owner_headers):
    staff_headers = invite(client, owner_headers, "staff@example.com", "STAFF")

    assert client.get(f"{API}/rooms", headers=staff_headers).status_code == 200
    denied = client.post(f"{API}/rooms", json={"number": "1", "price": "100"}, headers=staff_headers)
    assert denied.status_code == 403
    assert denied.json()["code"] == "INSUFFICIENT_PERMISSIONS"
    assert client.get(f"{API}/reports/monthly", headers=staff_headers).status_code == 403
    assert client.get(f"{API}/users", headers=staff_headers).status_code == 403


def test_admin_cannot_invite(client, owner_headers):
    admin_headers = invite(client, owner_headers, "admin@example.com", "ADMIN")

    assert client.get(f"{API}/users", headers=admin_headers).status_code == 200
    response = client.post(
        f"{API}/users/invite",
        json={"email": "x@example.com", "full_name": "X", "role": "STAFF"},
        headers=admin_headers,
    )
    assert response.status_code == 403


def test_owner_manages_users(client, owner, owner_headers):
    invite(client, owner_headers, "staff@example.com", "STAFF")
    users = client.get(f"{API}/users", headers=owner_headers).json()
    staff = next(u for u in users if u["email"] == "staff@example.com")

    promoted = client.patch(f"{API}/users/{staff['id']}", json={"role": "ADMIN"}, headers=owner_headers)
    assert promoted.status_code == 200
    assert promoted.json()["role"] == "ADMIN"

    suspended = client.patch(f"{API}/users/{staff['id']}", json={"status": "Suspended"}, headers=owner_headers)
    assert suspended.json()["status"] == "Suspended"

    self_edit = client.patch(f"{API}/users/{owner['user']['id']}", json={"role": "STAFF"}, headers=owner_headers)
    assert self_edit.status_code == 400

    assert client.delete(f"{API}/users/missing", headers=owner_headers).status_code == 404
    assert client.delete(f"{API}/users/{staff['id']}", headers=owner_headers).status_code == 200


def test_suspended_user_cannot_log_in(client, owner_headers):
    response = client.post(
        f"{API}/users/invite",
        json={"email": "temp@example.com", "full_name": "Temp", "role": "STAFF"},
        headers=owner_headers,
    )
    user_id = response.json()["user"]["id"]
    password = response.json()["temporary_password"]
    client.patch(f"{API}/users/{user_id}", json={"status": "Suspended"}, headers=owner_headers)

    login = client.post(f"{API}/auth/login", json={"email": "temp@example.com", "password": password})
    assert login.status_code == 401
    assert login.json()["code"] == "AUTHORIZATION_FAILED"


def test_users_are_isolated_between_organizations(client, owner_headers):
    other = register(client, email="other@example.com", organization="Other Dorm")
    other_headers = auth_headers(other["access_token"])

    create_room(client, owner_headers, number="101")
    assert client.get(f"{API}/rooms", headers=other_headers).json() == []

    response = client.patch(
        f"{API}/users/{other['user']['id']}",
        json={"full_name": "Hijacked"},
        headers=owner_headers,
    )
    assert response.status_code == 403


class TestAuditLog:
    def test_entries_are_recorded_and_filtered(self, client, owner_headers):
        create_room(client, owner_headers, number="A")
        create_room(client, owner_headers, number="B")

        rooms = client.get(f"{API}/audit", params={"entity": "Room"}, headers=owner_headers).json()
        assert len(rooms) == 2
        assert {entry["action"] for entry in rooms} == {"CREATE"}
        assert all(entry["user_email"] == "owner@example.com" for entry in rooms)

        limited = client.get(f"{API}/audit", params={"limit": 1}, headers=owner_headers).json()
        assert len(limited) == 1

        creates = client.get(f"{API}/audit", params={"action": "CREATE"}, headers=owner_headers).json()
        assert {entry["entity"] for entry in creates} >= {"Room", "Organization"}

    def test_staff_cannot_read_audit(self, client, owner_headers):
        staff_headers = invite(client, owner_headers, "staff@example.com", "STAFF")
        assert client.get(f"{API}/audit", headers=staff_headers).status_code == 403
