from datetime import timezone

from messmeal.services.auth import AuthUser
from messmeal.storage.models import Mess
from messmeal.storage.repositories import save_mess

MESS = {
    "name": "Green House Mess",
    "type": "BOYS_MESS",
    "phone": "01700000000",
    "address": {"street": "12 Lake Rd", "area": "Dhanmondi", "city": "Dhaka", "postalCode": 1205},
    "owner": {"name": "Karim", "phone": "01800000000"},
}


def test_add_and_list_messes(client):
    response = client.post("/api/mess/add", json=MESS)
    assert response.status_code == 201
    created = response.json()
    assert created["address"]["postalCode"] == 1205
    assert created["owner"]["name"] == "Karim"

    page = client.get("/api/mess/all?limit=5").json()
    assert page["total"] == 1
    assert page["limit"] == 5
    assert page["messes"][0]["name"] == "Green House Mess"


def test_update_mess_in_place(client):
    created = client.post("/api/mess/add", json=MESS).json()
    updated = client.post("/api/mess/add", json=dict(MESS, id=created["id"], name="Blue House Mess")).json()
    assert updated["id"] == created["id"]
    assert updated["name"] == "Blue House Mess"
    assert client.get("/api/mess/all").json()["total"] == 1
    assert client.post("/api/mess/add", json=dict(MESS, id=999)).status_code == 404


def test_required_fields_are_reported(client):
    response = client.post("/api/mess/add", json={"name": "", "owner": {}, "address": {}})
    assert response.status_code == 422
    message = str(response.json()["detail"])
    for expected in ("Mess name is required", "Owner name is required", "Owner contact is required", "City is required"):
        assert expected in message
    assert client.post("/api/mess/add", json=dict(MESS, type="HOSTEL")).status_code == 422


def test_search_by_name_or_city(client):
    client.post("/api/mess/add", json=MESS)
    client.post(
        "/api/mess/add",
        json=dict(MESS, name="River View", address={"city": "Sylhet"}),
    )
    assert [m["name"] for m in client.get("/api/mess/search?q=syl").json()] == ["River View"]
    assert len(client.get("/api/mess/search?q=mess").json()) == 1
    assert client.get("/api/mess/search?q=").json() == []


def test_pagination_and_sorting(client):
    for name in ("Charlie", "Alpha", "Bravo"):
        client.post("/api/mess/add", json=dict(MESS, name=name))
    page = client.get("/api/mess/all?sort_by=name&sort_order=asc&skip=1&limit=1").json()
    assert page["total"] == 3
    assert [m["name"] for m in page["messes"]] == ["Bravo"]
    assert client.get("/api/mess/all?limit=0").status_code == 422


def test_only_admins_add_messes(client, login):
    login(AuthUser(id="user-2"))
    assert client.post("/api/mess/add", json=MESS).status_code == 403
    assert client.get("/api/mess/all").status_code == 200


def test_timestamps_are_timezone_aware(session):
    mess = Mess(name="Green House", city="Dhaka")
    assert mess.created_at.tzinfo is timezone.utc
    session.add(mess)
    session.commit()
    session.refresh(mess)
    assert mess.id is not None

    saved = save_mess(session, mess)
    assert saved.updated_at is not None
