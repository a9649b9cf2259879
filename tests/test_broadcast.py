import pytest

from tests.conftest import API, check_in, create_room, invite


@pytest.fixture
def residents(client, owner_headers, line_client):
    rooms = {number: create_room(client, owner_headers, number=number) for number in ("101", "102", "201", "103")}
    check_in(client, owner_headers, rooms["101"]["id"], full_name="Unpaid", line_user_id="U-101")
    check_in(client, owner_headers, rooms["102"]["id"], full_name="Paid Up", line_user_id="U-102")
    check_in(client, owner_headers, rooms["201"]["id"], full_name="Upstairs", line_user_id="U-201")
    check_in(client, owner_headers, rooms["103"]["id"], full_name="Not Linked")

    for number in ("101", "102"):
        bill = client.post(
            f"{API}/billing",
            json={"room_id": rooms[number]["id"], "water_meter_current": "1", "electric_meter_current": "1"},
            headers=owner_headers,
        ).json()
        if number == "102":
            client.post(f"{API}/billing/{bill['id']}/pay-cash", headers=owner_headers)
    line_client.pushes.clear()
    return rooms


def _broadcast(client, headers, **filters):
    response = client.post(f"{API}/broadcast", json={"message": "Water off on Sunday", "filters": filters}, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


def test_announcement_reaches_linked_residents(client, owner_headers, line_client, residents):
    result = _broadcast(client, owner_headers)

    assert result == {"success": True, "recipients": 3, "count": 3}
    assert sorted(push["to"] for push in line_client.pushes) == ["U-101", "U-102", "U-201"]
    assert line_client.pushed_texts(to="U-201") == ["Announcement\n\nWater off on Sunday"]


@pytest.mark.parametrize(
    "filters, expected",
    [
        ({"floor": "1"}, ["U-101", "U-102"]),
        ({"floor": "all"}, ["U-101", "U-102", "U-201"]),
        ({"floor": "1", "room_number": "201"}, ["U-201"]),
        ({"room_number": " "}, ["U-101", "U-102", "U-201"]),
        ({"unpaid_only": True}, ["U-101"]),
        ({"floor": "2", "unpaid_only": True}, []),
    ],
)
def test_filters(client, owner_headers, line_client, residents, filters, expected):
    result = _broadcast(client, owner_headers, **filters)

    assert result["count"] == len(expected)
    assert sorted(push["to"] for push in line_client.pushes) == expected


def test_failed_pushes_are_not_counted(client, owner_headers, line_client, residents):
    line_client.fail_push = True

    result = _broadcast(client, owner_headers)

    assert result["recipients"] == 3
    assert result["count"] == 0


def test_staff_cannot_broadcast(client, owner_headers):
    staff_headers = invite(client, owner_headers, "staff@example.com", "STAFF")
    response = client.post(f"{API}/broadcast", json={"message": "Hello"}, headers=staff_headers)
    assert response.status_code == 403
