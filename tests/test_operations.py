from datetime import date
from decimal import Decimal

from staysync.schemas.room import RoomCreate
from staysync.services.expense import RECURRING_NOTE, RecurringExpenseService
from staysync.services.room import RoomService
from tests.conftest import API, check_in, create_room, invite

CRON_HEADERS = {"Authorization": "Bearer cron-secret"}


class TestBookings:
    def test_confirm_then_cancel_frees_room(self, client, owner_headers):
        room = create_room(client, owner_headers, number="B1")
        tenant_headers = invite(client, owner_headers, "tenant@example.com", "TENANT")

        created = client.post(
            f"{API}/bookings",
            json={"room_id": room["id"], "check_in_date": "2024-08-01", "special_request": "Ground floor"},
            headers=tenant_headers,
        )
        assert created.status_code == 201, created.text
        booking = created.json()
        assert booking["status"] == "Pending"
        assert len(client.get(f"{API}/bookings", headers=tenant_headers).json()) == 1

        confirmed = client.patch(f"{API}/admin/bookings/{booking['id']}", json={"status": "Confirmed"}, headers=owner_headers)
        assert confirmed.status_code == 200
        assert client.get(f"{API}/rooms/{room['id']}", headers=owner_headers).json()["status"] == "Reserved"

        # A reserved room cannot be booked again
        again = client.post(
            f"{API}/bookings",
            json={"room_id": room["id"], "check_in_date": "2024-09-01"},
            headers=tenant_headers,
        )
        assert again.status_code == 409

        cancelled = client.patch(f"{API}/admin/bookings/{booking['id']}", json={"status": "Cancelled"}, headers=owner_headers)
        assert cancelled.json()["status"] == "Cancelled"
        assert client.get(f"{API}/rooms/{room['id']}", headers=owner_headers).json()["status"] == "Available"

        reopened = client.patch(f"{API}/admin/bookings/{booking['id']}", json={"status": "Confirmed"}, headers=owner_headers)
        assert reopened.status_code == 409

    def test_tenant_cannot_review_bookings(self, client, owner_headers):
        room = create_room(client, owner_headers, number="B2")
        tenant_headers = invite(client, owner_headers, "tenant@example.com", "TENANT")
        booking = client.post(
            f"{API}/bookings",
            json={"room_id": room["id"], "check_in_date": "2024-08-01"},
            headers=tenant_headers,
        ).json()

        response = client.patch(f"{API}/admin/bookings/{booking['id']}", json={"status": "Confirmed"}, headers=tenant_headers)
        assert response.status_code == 403

    def test_confirm_refused_once_residents_moved_in(self, client, owner_headers):
        room = create_room(client, owner_headers, number="B4")
        tenant_headers = invite(client, owner_headers, "tenant@example.com", "TENANT")
        booking = client.post(
            f"{API}/bookings",
            json={"room_id": room["id"], "check_in_date": "2024-08-01"},
            headers=tenant_headers,
        ).json()
        check_in(client, owner_headers, room["id"], full_name="First")
        check_in(client, owner_headers, room["id"], full_name="Second")

        response = client.patch(f"{API}/admin/bookings/{booking['id']}", json={"status": "Confirmed"}, headers=owner_headers)

        assert response.status_code == 409
        assert client.get(f"{API}/rooms/{room['id']}", headers=owner_headers).json()["status"] == "Occupied"
        assert client.get(f"{API}/bookings", headers=owner_headers).json()[0]["status"] == "Pending"

    def test_occupied_room_cannot_be_booked(self, client, owner_headers):
        room = create_room(client, owner_headers, number="B3")
        check_in(client, owner_headers, room["id"])

        response = client.post(
            f"{API}/bookings",
            json={"room_id": room["id"], "check_in_date": "2024-08-01"},
            headers=owner_headers,
        )
        assert response.status_code == 409


class TestIssues:
    def test_report_and_resolve(self, client, owner_headers):
        created = client.post(f"{API}/issues", json={"description": "Door lock broken", "category": "Door"}, headers=owner_headers)
        assert created.status_code == 201
        assert created.json()["status"] == "Pending"

        done = client.patch(f"{API}/issues/{created.json()['id']}", json={}, headers=owner_headers)
        assert done.json()["status"] == "Done"

        assert client.get(f"{API}/issues", params={"status": "Pending"}, headers=owner_headers).json() == []

    def test_unknown_issue(self, client, owner_headers):
        assert client.patch(f"{API}/issues/missing", json={"status": "InProgress"}, headers=owner_headers).status_code == 404


class TestExpenses:
    def test_create_list_delete(self, client, owner_headers):
        created = client.post(
            f"{API}/expenses",
            json={"title": "Plumber", "amount": "800", "category": "Maintenance", "expense_date": "2024-05-10"},
            headers=owner_headers,
        )
        assert created.status_code == 201
        assert [e["title"] for e in client.get(f"{API}/expenses", headers=owner_headers).json()] == ["Plumber"]

        assert client.delete(f"{API}/expenses/{created.json()['id']}", headers=owner_headers).status_code == 200
        assert client.get(f"{API}/expenses", headers=owner_headers).json() == []

    def test_recurring_templates_run_on_their_day(self, app, client, owner, owner_headers):
        organization_id = owner["user"]["organization_id"]
        client.post(
            f"{API}/recurring-expenses",
            json={"title": "Internet", "amount": "590", "day_of_month": 15, "note": "Fiber"},
            headers=owner_headers,
        )
        client.post(f"{API}/recurring-expenses", json={"title": "Cleaner", "amount": "3000", "day_of_month": 1}, headers=owner_headers)
        paused = client.post(
            f"{API}/recurring-expenses",
            json={"title": "Guard", "amount": "9000", "day_of_month": 15, "is_active": False},
            headers=owner_headers,
        )
        assert paused.status_code == 201

        with app.state.database.session() as db:
            created = RecurringExpenseService(db).run_due(today=date(2024, 5, 15), organization_id=organization_id)
            assert [(e.title, e.amount, e.expense_date) for e in created] == [("Internet", Decimal("590.00"), date(2024, 5, 15))]
            assert created[0].note == f"Fiber ({RECURRING_NOTE})"

    def test_recurring_template_update_and_delete(self, client, owner_headers):
        template = client.post(
            f"{API}/recurring-expenses",
            json={"title": "Water", "amount": "100", "day_of_month": 3},
            headers=owner_headers,
        ).json()

        updated = client.patch(
            f"{API}/recurring-expenses/{template['id']}",
            json={"amount": "150", "is_active": False},
            headers=owner_headers,
        )
        assert Decimal(updated.json()["amount"]) == Decimal("150")
        assert updated.json()["is_active"] is False

        assert client.delete(f"{API}/recurring-expenses/{template['id']}", headers=owner_headers).status_code == 200
        assert client.get(f"{API}/recurring-expenses/{template['id']}", headers=owner_headers).status_code == 404


class TestCron:
    def test_requires_secret(self, client):
        assert client.get(f"{API}/cron/reminders").status_code == 401
        assert client.get(f"{API}/cron/reminders", headers={"Authorization": "Bearer wrong"}).status_code == 401

    def test_recurring_endpoint(self, client, owner):
        response = client.get(f"{API}/cron/recurring-expenses", headers=CRON_HEADERS)
        assert response.status_code == 200
        assert response.json()["created"] == 0

    def test_scheduled_reminders_respect_org_setting(self, client, owner_headers, line_client):
        room = create_room(client, owner_headers)
        check_in(client, owner_headers, room["id"], line_user_id="U-late")
        client.post(
            f"{API}/billing",
            json={"room_id": room["id"], "water_meter_current": "1", "electric_meter_current": "1", "bill_month": "2020-01"},
            headers=owner_headers,
        )
        line_client.pushes.clear()

        sent = client.get(f"{API}/cron/reminders", headers=CRON_HEADERS).json()
        assert sent["overdue_count"] == 1
        assert sent["sent_count"] == 1
        assert line_client.pushed_texts(to="U-late")

        client.put(f"{API}/settings", json={"enable_auto_reminders": False}, headers=owner_headers)
        skipped = client.get(f"{API}/cron/reminders", headers=CRON_HEADERS).json()
        assert skipped["total_pending"] == 0


class TestOverdueNotify:
    def test_reports_missing_recipients(self, client, owner_headers):
        room = create_room(client, owner_headers)
        check_in(client, owner_headers, room["id"])
        bill = client.post(
            f"{API}/billing",
            json={"room_id": room["id"], "water_meter_current": "1", "electric_meter_current": "1", "bill_month": "2020-01"},
            headers=owner_headers,
        ).json()
        paid = client.post(
            f"{API}/billing",
            json={"room_id": room["id"], "water_meter_current": "1", "electric_meter_current": "1", "bill_month": "2020-02"},
            headers=owner_headers,
        ).json()
        client.post(f"{API}/billing/{paid['id']}/pay-cash", headers=owner_headers)

        summary = client.post(f"{API}/notify/overdue", headers=owner_headers).json()
        assert summary["total_pending"] == 1
        assert summary["overdue_count"] == 1
        assert summary["sent_count"] == 0
        assert summary["failed"] == [bill["id"]]


class TestReports:
    def test_monthly_report(self, client, owner_headers):
        room = create_room(client, owner_headers, price="3500")
        check_in(client, owner_headers, room["id"])
        bill = client.post(
            f"{API}/billing",
            json={
                "room_id": room["id"],
                "water_meter_last": "110",
                "water_meter_current": "120",
                "electric_meter_last": "500",
                "electric_meter_current": "550",
                "trash_fee": "0",
                "bill_month": "2024-05",
            },
            headers=owner_headers,
        ).json()
        client.post(f"{API}/billing/{bill['id']}/pay-cash", headers=owner_headers)

        meter = client.post(
            f"{API}/central-meter",
            json={
                "month": "2024-05",
                "water_meter_last": "1000",
                "water_meter_current": "1100",
                "water_rate_from_utility": "10",
                "electric_meter_last": "0",
                "electric_meter_current": "500",
                "electric_rate_from_utility": "5",
                "trash_cost": "100",
            },
            headers=owner_headers,
        )
        assert meter.status_code == 201, meter.text
        client.post(
            f"{API}/expenses",
            json={"title": "Paint", "amount": "400", "expense_date": "2024-05-10"},
            headers=owner_headers,
        )

        report = client.get(f"{API}/reports/monthly", params={"month": "2024-05"}, headers=owner_headers).json()

        assert report["month"] == "2024-05"
        assert Decimal(report["income"]["total"]) == Decimal("4030")
        assert Decimal(report["expenses"]["water"]) == Decimal("1000")
        assert Decimal(report["expenses"]["electric"]) == Decimal("2500")
        assert Decimal(report["expenses"]["operating"]) == Decimal("400")
        assert Decimal(report["expenses"]["total"]) == Decimal("4000")
        assert Decimal(report["net_profit"]) == Decimal("30")
        assert report["stats"]["total_bills_issued"] == 1
        assert report["stats"]["paid_bills"] == 1
        assert report["stats"]["occupied_rooms"] == 1

    def test_excel_export(self, client, owner_headers):
        room = create_room(client, owner_headers)
        client.post(
            f"{API}/billing",
            json={"room_id": room["id"], "water_meter_current": "1", "electric_meter_current": "1", "bill_month": "2024-05"},
            headers=owner_headers,
        )

        response = client.get(f"{API}/reports/export", params={"month": 5, "year": 2024}, headers=owner_headers)

        assert response.status_code == 200
        assert response.headers["content-disposition"] == 'attachment; filename="billing-2024-05.xlsx"'
        # xlsx files are zip archives
        assert response.content[:2] == b"PK"


class TestDashboard:
    def test_summary_is_cached_until_invalidated(self, app, client, owner, owner_headers):
        first = client.get(f"{API}/dashboard", headers=owner_headers).json()
        assert first["total_rooms"] == 0

        with app.state.database.session() as db:
            RoomService(db).create_room(owner["user"]["organization_id"], RoomCreate(number="X1", price=Decimal("100")))

        assert client.get(f"{API}/dashboard", headers=owner_headers).json()["total_rooms"] == 0

        room = create_room(client, owner_headers, number="X2")
        check_in(client, owner_headers, room["id"])

        summary = client.get(f"{API}/dashboard", headers=owner_headers).json()
        assert summary["total_rooms"] == 2
        assert summary["occupied_rooms"] == 1
        assert summary["occupancy_rate"] == 50.0


def test_settings_round_trip(client, owner_headers):
    current = client.get(f"{API}/settings", headers=owner_headers).json()
    assert Decimal(current["water_rate"]) == Decimal("18")
    assert Decimal(current["trash_fee"]) == Decimal("30")

    updated = client.put(f"{API}/settings", json={"dorm_name": "Sunrise", "electric_rate": "8"}, headers=owner_headers)
    assert updated.status_code == 200
    assert updated.json()["dorm_name"] == "Sunrise"
    assert Decimal(updated.json()["electric_rate"]) == Decimal("8")
