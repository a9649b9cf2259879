from datetime import date
from decimal import Decimal

import pytest

from staysync.models import Room
from staysync.models.base.enums import RoomStatus
from staysync.schemas.resident import ResidentUpdate
from staysync.services.tenancy import TenancyService, classify_checkout
from tests.conftest import API, check_in, create_room


class TestClassifyCheckout:
    def test_within_grace_period_is_on_time(self):
        end = date(2024, 7, 1)
        assert not classify_checkout(end, date(2024, 6, 28), 3)
        assert not classify_checkout(end, date(2024, 7, 2), 3)

    def test_before_grace_period_is_early(self):
        assert classify_checkout(date(2024, 7, 1), date(2024, 6, 27), 3)

    def test_no_contract_end_is_on_time(self):
        assert not classify_checkout(None, date(2024, 1, 1), 3)


def _room_residents(client, headers, room_id):
    return client.get(f"{API}/rooms/{room_id}", headers=headers).json()


def test_first_resident_is_main_tenant(client, owner_headers):
    room = create_room(client, owner_headers, default_deposit="5000", default_contract_months=12)
    first = check_in(client, owner_headers, room["id"], full_name="First")
    second = check_in(client, owner_headers, room["id"], full_name="Second")

    assert first["is_main_tenant"] is True
    assert second["is_main_tenant"] is False
    # Room defaults apply when the request leaves them out
    assert Decimal(first["deposit"]) == Decimal("5000")
    assert first["contract_duration_months"] == 12
    assert first["contract_end_date"] == "2025-01-01"
    assert first["deposit_status"] == "Held"


def test_custom_duration(client, owner_headers):
    room = create_room(client, owner_headers)
    resident = check_in(client, owner_headers, room["id"], start="2024-01-31", custom_duration_months=1)
    assert resident["contract_end_date"] == "2024-02-29"


def test_check_in_unknown_room(client, owner_headers):
    response = client.post(
        f"{API}/rooms/missing/checkin",
        json={"full_name": "Nobody", "contract_start_date": "2024-01-01"},
        headers=owner_headers,
    )
    assert response.status_code == 404


def test_early_checkout_forfeits_deposit(client, owner_headers):
    room = create_room(client, owner_headers)
    resident = check_in(
        client,
        owner_headers,
        room["id"],
        deposit="3000",
        start=date.today().isoformat(),
        contract_duration=6,
    )

    response = client.post(
        f"{API}/residents/{resident['id']}/checkout",
        json={"deposit_returned_amount": "3000"},
        headers=owner_headers,
    )

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["early_termination"] is True
    assert Decimal(body["deposit_returned_amount"]) == 0
    assert body["deposit_status"] == "Forfeited"
    assert body["resident"]["deposit_forfeit_reason"] == "Early termination before contract end"
    assert body["resident"]["status"] == "CheckedOut"
    assert body["room_status"] == "Available"


def test_on_time_checkout_partial_refund(client, owner_headers):
    room = create_room(client, owner_headers)
    resident = check_in(client, owner_headers, room["id"], deposit="1000", start="2020-01-01", contract_duration=3)

    too_much = client.post(
        f"{API}/residents/{resident['id']}/checkout",
        json={"deposit_returned_amount": "2000"},
        headers=owner_headers,
    )
    assert too_much.status_code == 400

    response = client.post(
        f"{API}/residents/{resident['id']}/checkout",
        json={"deposit_returned_amount": "400", "deposit_forfeit_reason": "Wall damage"},
        headers=owner_headers,
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["early_termination"] is False
    assert Decimal(body["deposit_returned_amount"]) == Decimal("400")
    assert body["deposit_status"] == "Returned"

    again = client.post(f"{API}/residents/{resident['id']}/checkout", json={}, headers=owner_headers)
    assert again.status_code == 409


def test_checkout_promotes_remaining_resident(client, owner_headers):
    room = create_room(client, owner_headers)
    main = check_in(client, owner_headers, room["id"], full_name="Main", start="2020-01-01", contract_duration=3)
    other = check_in(client, owner_headers, room["id"], full_name="Other")

    response = client.post(f"{API}/residents/{main['id']}/checkout", json={}, headers=owner_headers)
    assert response.status_code == 200, response.text
    assert response.json()["room_status"] == "Occupied"

    residents = _room_residents(client, owner_headers, room["id"])["active_residents"]
    assert [(r["id"], r["is_main_tenant"]) for r in residents] == [(other["id"], True)]


def test_set_main_tenant_is_exclusive(client, owner_headers):
    room = create_room(client, owner_headers)
    first = check_in(client, owner_headers, room["id"], full_name="First")
    second = check_in(client, owner_headers, room["id"], full_name="Second")

    response = client.post(f"{API}/residents/{second['id']}/set-main", headers=owner_headers)
    assert response.status_code == 200, response.text
    assert response.json()["is_main_tenant"] is True

    flags = {r["id"]: r["is_main_tenant"] for r in _room_residents(client, owner_headers, room["id"])["active_residents"]}
    assert flags == {first["id"]: False, second["id"]: True}


def test_transfer_reconciles_both_rooms(client, owner_headers):
    source = create_room(client, owner_headers, number="S1")
    target = create_room(client, owner_headers, number="T1")
    resident = check_in(client, owner_headers, source["id"])

    response = client.patch(
        f"{API}/residents/{resident['id']}",
        json={"room_id": target["id"], "phone": "0812345678"},
        headers=owner_headers,
    )

    assert response.status_code == 200, response.text
    assert response.json()["room_id"] == target["id"]
    assert response.json()["is_main_tenant"] is True
    assert _room_residents(client, owner_headers, source["id"])["status"] == "Available"
    assert _room_residents(client, owner_headers, target["id"])["status"] == "Occupied"


def test_transfer_rolls_back_on_failure(app, client, owner, owner_headers, settings, monkeypatch):
    source = create_room(client, owner_headers, number="S1")
    target = create_room(client, owner_headers, number="T1")
    resident = check_in(client, owner_headers, source["id"])

    def fail(self, room_id, departing_id):
        raise RuntimeError("reconcile failed")

    monkeypatch.setattr(TenancyService, "_reconcile_room", fail)
    with app.state.database.session() as db:
        with pytest.raises(RuntimeError):
            TenancyService(db, settings).update_resident(
                owner["user"]["organization_id"],
                resident["id"],
                ResidentUpdate(room_id=target["id"], full_name="Renamed"),
            )

    fetched = client.get(f"{API}/residents/{resident['id']}", headers=owner_headers).json()
    assert fetched["room_id"] == source["id"]
    assert fetched["full_name"] == "Resident A"
    assert _room_residents(client, owner_headers, source["id"])["status"] == "Occupied"
    assert _room_residents(client, owner_headers, target["id"])["status"] == "Available"


def test_checked_out_resident_cannot_transfer(client, owner_headers):
    room = create_room(client, owner_headers, number="R1")
    other = create_room(client, owner_headers, number="R2")
    resident = check_in(client, owner_headers, room["id"], start="2020-01-01", contract_duration=3)
    client.post(f"{API}/residents/{resident['id']}/checkout", json={}, headers=owner_headers)

    response = client.patch(f"{API}/residents/{resident['id']}", json={"room_id": other["id"]}, headers=owner_headers)
    assert response.status_code == 409


def test_resident_detail_includes_bills(client, owner_headers):
    room = create_room(client, owner_headers, number="D1")
    resident = check_in(client, owner_headers, room["id"])
    client.post(
        f"{API}/billing",
        json={"room_id": room["id"], "water_meter_current": "5", "electric_meter_current": "5", "bill_month": "2024-03"},
        headers=owner_headers,
    )

    detail = client.get(f"{API}/residents/{resident['id']}", headers=owner_headers).json()
    assert detail["room_number"] == "D1"
    assert len(detail["recent_bills"]) == 1


def test_generate_verify_code(client, owner_headers):
    room = create_room(client, owner_headers)
    resident = check_in(client, owner_headers, room["id"])

    response = client.post(f"{API}/residents/{resident['id']}/generate-code", headers=owner_headers)
    assert response.status_code == 200
    code = response.json()["code"]
    assert code.startswith("#") and len(code) == 5 and code[1:].isdigit()


def test_room_with_residents_cannot_be_deleted(client, owner_headers):
    room = create_room(client, owner_headers)
    check_in(client, owner_headers, room["id"])

    response = client.delete(f"{API}/rooms/{room['id']}", headers=owner_headers)
    assert response.status_code == 409

    empty = create_room(client, owner_headers, number="202")
    assert client.delete(f"{API}/rooms/{empty['id']}", headers=owner_headers).status_code == 200


def test_duplicate_room_number(client, owner_headers):
    create_room(client, owner_headers, number="301")
    response = client.post(f"{API}/rooms", json={"number": "301", "price": "100"}, headers=owner_headers)
    assert response.status_code == 409
    assert response.json()["code"] == "DUPLICATE_ENTRY"


def test_checkout_restores_occupied_status(app, client, owner_headers):
    room = create_room(client, owner_headers, number="O1")
    leaving = check_in(client, owner_headers, room["id"], full_name="Leaving", start="2020-01-01", contract_duration=3)
    check_in(client, owner_headers, room["id"], full_name="Staying")

    with app.state.database.session() as db:
        db.get(Room, room["id"]).status = RoomStatus.RESERVED
        db.commit()

    response = client.post(f"{API}/residents/{leaving['id']}/checkout", json={}, headers=owner_headers)

    assert response.status_code == 200, response.text
    assert response.json()["room_status"] == "Occupied"
    assert _room_residents(client, owner_headers, room["id"])["status"] == "Occupied"


def test_null_profile_fields_are_ignored(client, owner_headers):
    room = create_room(client, owner_headers)
    resident = check_in(client, owner_headers, room["id"], full_name="Kept Name", phone="0811111111")

    response = client.patch(
        f"{API}/residents/{resident['id']}",
        json={"full_name": None, "phone": "0822222222"},
        headers=owner_headers,
    )

    assert response.status_code == 200, response.text
    assert response.json()["full_name"] == "Kept Name"
    assert response.json()["phone"] == "0822222222"


def test_room_with_billing_history_cannot_be_deleted(client, owner_headers):
    room = create_room(client, owner_headers, number="H1")
    resident = check_in(client, owner_headers, room["id"], start="2020-01-01", contract_duration=3)
    bill = client.post(
        f"{API}/billing",
        json={"room_id": room["id"], "water_meter_current": "1", "electric_meter_current": "1", "bill_month": "2020-02"},
        headers=owner_headers,
    ).json()
    client.post(f"{API}/billing/{bill['id']}/pay-cash", headers=owner_headers)
    client.post(f"{API}/residents/{resident['id']}/checkout", json={}, headers=owner_headers)

    response = client.delete(f"{API}/rooms/{room['id']}", headers=owner_headers)
    assert response.status_code == 409
    assert response.json()["error"] == "Room has billing history and cannot be deleted"
