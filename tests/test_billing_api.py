from datetime import date
from decimal import Decimal

from staysync.models.base.enums import PaymentStatus
from staysync.schemas.resident import CheckoutRequest
from staysync.services.tenancy import TenancyService
from tests.conftest import API, check_in, create_room

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"0" * 64


def _create_bill(client, headers, room_id, **extra):
    payload = {
        "room_id": room_id,
        "water_meter_last": "110",
        "water_meter_current": "120",
        "electric_meter_last": "500",
        "electric_meter_current": "550",
        "trash_fee": "0",
        "bill_month": "2024-05",
    }
    payload.update(extra)
    response = client.post(f"{API}/billing", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_full_billing_and_checkout_flow(app, client, owner, owner_headers, line_client, settings):
    room = create_room(client, owner_headers, number="101", price="3500")
    resident = check_in(
        client,
        owner_headers,
        room["id"],
        full_name="Somchai",
        deposit="3000",
        start="2024-01-01",
        contract_duration=6,
    )
    assert resident["is_main_tenant"] is True
    assert resident["contract_end_date"] == "2024-07-01"
    assert client.get(f"{API}/rooms/{room['id']}", headers=owner_headers).json()["status"] == "Occupied"

    bill = _create_bill(client, owner_headers, room["id"])
    assert Decimal(bill["water_cost"]) == Decimal("180")
    assert Decimal(bill["electric_cost"]) == Decimal("350")
    assert Decimal(bill["total_amount"]) == Decimal("4030")
    assert bill["payment_status"] == "Pending"
    assert bill["resident_id"] == resident["id"]
    assert bill["billing_month"] == "2024-05-01"

    public = client.get(f"{API}/billing/{bill['id']}/public")
    assert public.status_code == 200
    assert Decimal(public.json()["total_amount"]) == Decimal("4030")

    uploaded = client.post(
        f"{API}/billing/{bill['id']}/upload-slip",
        files={"slip": ("slip.png", PNG_BYTES, "image/png")},
    )
    assert uploaded.status_code == 200, uploaded.text
    assert uploaded.json()["payment_status"] == "Review"
    assert uploaded.json()["slip_image"].startswith("slips/")
    # No admin ids configured: the deployment owner is alerted
    assert line_client.pushed_texts(to="U-owner")

    approved = client.post(f"{API}/billing/{bill['id']}/review", json={"action": "approve"}, headers=owner_headers)
    assert approved.status_code == 200, approved.text
    assert approved.json()["payment_status"] == "Paid"
    assert approved.json()["reviewed_by"] == owner["user"]["id"]

    with app.state.database.session() as db:
        outcome = TenancyService(db, settings).checkout(
            owner["user"]["organization_id"],
            resident["id"],
            CheckoutRequest(),
            today=date(2024, 7, 2),
        )
        assert outcome.early_termination is False
        assert outcome.deposit_returned_amount == Decimal("3000")
        assert outcome.deposit_status.value == "Returned"
        assert outcome.room_status.value == "Available"


def test_review_rejects_unknown_action_and_wrong_state(client, owner_headers):
    room = create_room(client, owner_headers)
    bill = _create_bill(client, owner_headers, room["id"])

    bad_action = client.post(f"{API}/billing/{bill['id']}/review", json={"action": "maybe"}, headers=owner_headers)
    assert bad_action.status_code == 400
    assert bad_action.json()["code"] == "VALIDATION_ERROR"

    not_in_review = client.post(f"{API}/billing/{bill['id']}/review", json={"action": "approve"}, headers=owner_headers)
    assert not_in_review.status_code == 409
    assert not_in_review.json()["code"] == "INVALID_STATE_TRANSITION"
    assert client.get(f"{API}/billing/{bill['id']}", headers=owner_headers).json()["payment_status"] == "Pending"


def test_reject_returns_bill_to_pending(client, owner_headers):
    room = create_room(client, owner_headers)
    bill = _create_bill(client, owner_headers, room["id"])
    client.post(f"{API}/billing/{bill['id']}/upload-slip", files={"slip": ("s.png", PNG_BYTES, "image/png")})

    rejected = client.post(
        f"{API}/billing/{bill['id']}/review",
        json={"action": "Reject", "note": "Amount does not match"},
        headers=owner_headers,
    )
    assert rejected.status_code == 200
    assert rejected.json()["payment_status"] == "Pending"
    assert rejected.json()["review_note"] == "Amount does not match"


def test_cash_payment_once(client, owner_headers):
    room = create_room(client, owner_headers)
    bill = _create_bill(client, owner_headers, room["id"])

    paid = client.post(f"{API}/billing/{bill['id']}/pay-cash", headers=owner_headers)
    assert paid.status_code == 200, paid.text
    assert paid.json()["payment_status"] == "Paid"
    assert paid.json()["review_note"] == "Paid via cash (manual entry)"

    again = client.post(f"{API}/billing/{bill['id']}/pay-cash", headers=owner_headers)
    assert again.status_code == 409

    # The second attempt leaves the recorded payment untouched
    stored = client.get(f"{API}/billing/{bill['id']}", headers=owner_headers).json()
    assert stored["payment_status"] == "Paid"
    assert stored["payment_date"] == paid.json()["payment_date"]
    assert stored["reviewed_at"] == paid.json()["reviewed_at"]
    assert stored["review_note"] == "Paid via cash (manual entry)"


def test_paid_bill_cannot_be_reviewed(client, owner_headers):
    room = create_room(client, owner_headers)
    bill = _create_bill(client, owner_headers, room["id"])
    paid = client.post(f"{API}/billing/{bill['id']}/pay-cash", headers=owner_headers).json()

    for action in ("approve", "reject"):
        response = client.post(f"{API}/billing/{bill['id']}/review", json={"action": action}, headers=owner_headers)
        assert response.status_code == 409

    stored = client.get(f"{API}/billing/{bill['id']}", headers=owner_headers).json()
    assert stored["payment_status"] == "Paid"
    assert stored["reviewed_at"] == paid["reviewed_at"]


def test_slip_upload_rejects_non_images(client, owner_headers):
    room = create_room(client, owner_headers)
    bill = _create_bill(client, owner_headers, room["id"])

    response = client.post(
        f"{API}/billing/{bill['id']}/upload-slip",
        files={"slip": ("notes.txt", b"hello", "text/plain")},
    )
    assert response.status_code == 400
    assert client.get(f"{API}/billing/{bill['id']}", headers=owner_headers).json()["payment_status"] == "Pending"


def test_common_fee_applies_to_flagged_rooms(client, owner_headers):
    settings_response = client.put(f"{API}/settings", json={"common_area_fee": "150"}, headers=owner_headers)
    assert settings_response.status_code == 200, settings_response.text

    plain = create_room(client, owner_headers, number="A1", price="1000")
    shared = create_room(client, owner_headers, number="A2", price="1000", charge_common_area=True)

    plain_bill = _create_bill(client, owner_headers, plain["id"])
    shared_bill = _create_bill(client, owner_headers, shared["id"])

    assert Decimal(plain_bill["common_fee"]) == 0
    assert Decimal(shared_bill["common_fee"]) == Decimal("150")
    assert Decimal(shared_bill["total_amount"]) - Decimal(plain_bill["total_amount"]) == Decimal("150")


def test_bill_snapshot_survives_rate_change(client, owner_headers):
    room = create_room(client, owner_headers)
    bill = _create_bill(client, owner_headers, room["id"])

    client.put(f"{API}/settings", json={"water_rate": "40"}, headers=owner_headers)

    fetched = client.get(f"{API}/billing/{bill['id']}", headers=owner_headers).json()
    assert Decimal(fetched["water_rate"]) == Decimal("18")
    assert Decimal(fetched["total_amount"]) == Decimal("4030")


def test_bill_for_unknown_room_is_404(client, owner_headers):
    response = client.post(
        f"{API}/billing",
        json={"room_id": "missing", "water_meter_current": "1", "electric_meter_current": "1"},
        headers=owner_headers,
    )
    assert response.status_code == 404


def test_billing_list_filters(client, owner_headers):
    first = create_room(client, owner_headers, number="1")
    second = create_room(client, owner_headers, number="2")
    _create_bill(client, owner_headers, first["id"])
    paid = _create_bill(client, owner_headers, second["id"], bill_month="2024-06")
    client.post(f"{API}/billing/{paid['id']}/pay-cash", headers=owner_headers)

    by_status = client.get(f"{API}/billing", params={"status": "Paid"}, headers=owner_headers).json()
    assert [b["id"] for b in by_status] == [paid["id"]]

    by_month = client.get(f"{API}/billing", params={"month": "2024-05"}, headers=owner_headers).json()
    assert [b["room_id"] for b in by_month] == [first["id"]]

    assert client.get(f"{API}/billing", params={"month": "May"}, headers=owner_headers).status_code == 422


class TestBulkBilling:
    def test_skip_rules(self, client, owner_headers):
        billed = create_room(client, owner_headers, number="1", price="2000")
        fresh = create_room(client, owner_headers, number="2", price="2500")
        missing_reading = create_room(client, owner_headers, number="3", price="2500")
        _create_bill(client, owner_headers, billed["id"], bill_month="2024-05")

        response = client.post(
            f"{API}/billing/bulk",
            json={
                "bill_month": "2024-05",
                "entries": [
                    {"room_id": billed["id"], "water_current": "130", "electric_current": "600"},
                    {"room_id": fresh["id"], "water_current": "10", "electric_current": "100"},
                    {"room_id": missing_reading["id"], "water_current": "10"},
                    {"room_id": "no-such-room", "water_current": "1", "electric_current": "1"},
                ],
            },
            headers=owner_headers,
        )

        assert response.status_code == 200, response.text
        result = response.json()
        assert result["created"] == 1
        assert result["skipped"] == 3
        assert [error["room_id"] for error in result["errors"]] == [billed["id"]]

        bill = client.get(f"{API}/billing/{result['bill_ids'][0]}", headers=owner_headers).json()
        assert bill["room_id"] == fresh["id"]
        # Room price + 10 water units at 18 + 100 electric units at 7 + default trash fee 30
        assert Decimal(bill["total_amount"]) == Decimal("2500") + Decimal("180") + Decimal("700") + Decimal("30")

    def test_last_reading_defaults_to_previous_bill(self, client, owner_headers):
        room = create_room(client, owner_headers, number="9", price="1000")
        _create_bill(client, owner_headers, room["id"], bill_month="2024-04")

        result = client.post(
            f"{API}/billing/bulk",
            json={
                "bill_month": "2024-05",
                "water_rate": "20",
                "entries": [{"room_id": room["id"], "water_current": "125", "electric_current": "560"}],
            },
            headers=owner_headers,
        ).json()

        bill = client.get(f"{API}/billing/{result['bill_ids'][0]}", headers=owner_headers).json()
        assert Decimal(bill["water_meter_last"]) == Decimal("120")
        assert Decimal(bill["water_units"]) == Decimal("5")
        assert Decimal(bill["water_cost"]) == Decimal("100")
        assert Decimal(bill["electric_meter_last"]) == Decimal("550")


def test_invoice_pushed_to_linked_resident(client, owner_headers, line_client):
    room = create_room(client, owner_headers)
    check_in(client, owner_headers, room["id"], line_user_id="U-resident")

    _create_bill(client, owner_headers, room["id"])

    assert line_client.pushed_texts(to="U-resident")


def test_failed_push_does_not_break_billing(client, owner_headers, line_client):
    line_client.fail_push = True
    room = create_room(client, owner_headers)
    check_in(client, owner_headers, room["id"], line_user_id="U-resident")

    bill = _create_bill(client, owner_headers, room["id"])

    assert bill["payment_status"] == PaymentStatus.PENDING.value
