import pytest

from staysync.core.exceptions import BackupFormatError
from staysync.services.backup import BACKUP_TABLES, BACKUP_VERSION, validate_backup
from tests.conftest import API, auth_headers, check_in, create_room, register


def _empty_backup():
    return {"metadata": {"version": BACKUP_VERSION}, "data": {name: [] for name, _ in BACKUP_TABLES}}


class TestValidateBackup:
    def test_accepts_complete_document(self):
        data = validate_backup(_empty_backup())
        assert list(data) == [name for name, _ in BACKUP_TABLES]

    @pytest.mark.parametrize(
        "mutate",
        [
            lambda b: b.pop("metadata"),
            lambda b: b.update(data=[]),
            lambda b: b["data"].pop("billing"),
            lambda b: b["data"].update(extra=[]),
            lambda b: b["data"].update(rooms={}),
            lambda b: b["data"].update(rooms=["not-an-object"]),
        ],
    )
    def test_rejects_malformed_documents(self, mutate):
        backup = _empty_backup()
        mutate(backup)
        with pytest.raises(BackupFormatError):
            validate_backup(backup)


def test_export_document_shape(client, owner_headers):
    room = create_room(client, owner_headers)
    check_in(client, owner_headers, room["id"])

    response = client.post(f"{API}/backup/export", headers=owner_headers)

    assert response.status_code == 200, response.text
    backup = response.json()
    assert backup["metadata"]["version"] == "1.0"
    assert "source" not in backup["metadata"]
    assert list(backup["data"]) == [name for name, _ in BACKUP_TABLES]
    assert len(backup["data"]["rooms"]) == 1
    assert len(backup["data"]["residents"]) == 1
    assert backup["metadata"]["totalRecords"] == sum(len(rows) for rows in backup["data"].values())


def test_auto_export_uses_backup_key(client, owner):
    assert client.post(f"{API}/backup/auto-export").status_code == 401

    response = client.post(f"{API}/backup/auto-export", headers={"Authorization": "Bearer backup-key"})
    assert response.status_code == 200
    assert response.json()["metadata"]["source"] == "auto"


def test_only_deployment_owner_can_export(client, owner_headers):
    second = register(client, email="second@example.com", organization="Second Dorm")

    response = client.post(f"{API}/backup/export", headers=auth_headers(second["access_token"]))
    assert response.status_code == 403


def test_restore_rejects_bad_format(client, owner_headers):
    response = client.post(f"{API}/backup/restore", json={"backup": {"metadata": {}, "data": {}}}, headers=owner_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "BACKUP_FORMAT_ERROR"
    # Nothing was touched
    assert client.get(f"{API}/auth/me", headers=owner_headers).status_code == 200


def test_restore_round_trip(client, owner_headers):
    kept = create_room(client, owner_headers, number="KEEP")
    check_in(client, owner_headers, kept["id"], full_name="Kept Resident")
    backup = client.post(f"{API}/backup/export", headers=owner_headers).json()

    create_room(client, owner_headers, number="LATER")

    restored = client.post(f"{API}/backup/restore", json={"backup": backup}, headers=owner_headers)

    assert restored.status_code == 200, restored.text
    assert restored.json()["success"] is True
    assert restored.json()["restored"]["rooms"] == 1
    rooms = client.get(f"{API}/rooms", headers=owner_headers).json()
    assert [room["number"] for room in rooms] == ["KEEP"]
    assert [r["full_name"] for r in rooms[0]["active_residents"]] == ["Kept Resident"]

    restores = client.get(f"{API}/audit", params={"action": "RESTORE"}, headers=owner_headers).json()
    assert len(restores) == 1


def test_restore_failure_reports_completed_steps(client, owner_headers):
    backup = client.post(f"{API}/backup/export", headers=owner_headers).json()
    backup["data"]["rooms"] = [{"id": "broken-room"}]

    response = client.post(f"{API}/backup/restore", json={"backup": backup}, headers=owner_headers)

    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "BACKUP_RESTORE_FAILED"
    assert body["details"]["failed_table"] == "rooms"
    assert body["details"]["completed_steps"][-2:] == ["organizations", "users"]
