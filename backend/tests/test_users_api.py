from messmeal.services.auth import AuthUser
from messmeal.storage.models import User


def _seed_users(session):
    users = [
        User(name="Anika", username="anika", email="anika@example.com"),
        User(name="Babul", username="babul", email="babul@example.com", role="admin"),
    ]
    for user in users:
        session.add(user)
    session.commit()
    return [u.id for u in users]


def test_list_users_with_search(client, session):
    _seed_users(session)
    page = client.get("/api/user/all").json()
    assert page["total"] == 2
    page = client.get("/api/user/all?search=bab").json()
    assert [u["username"] for u in page["users"]] == ["babul"]


def test_blank_fields_leave_values_unchanged(client, session):
    anika_id, _ = _seed_users(session)
    body = client.post("/api/user/update", json={"id": anika_id, "status": "banned", "name": "  "}).json()
    assert body["status"] == "banned"
    assert body["name"] == "Anika"


def test_update_rejects_unknown_user_and_values(client, session):
    anika_id, _ = _seed_users(session)
    assert client.post("/api/user/update", json={"id": 999, "name": "X"}).status_code == 404
    assert client.post("/api/user/update", json={"id": anika_id, "role": "owner"}).status_code == 422


def test_user_admin_needs_admin(client, login, session):
    _seed_users(session)
    login(AuthUser(id="user-2"))
    assert client.get("/api/user/all").status_code == 403


def test_me_and_logout(client, context, monkeypatch):
    me = client.get("/api/auth/me").json()
    assert me["id"] == "user-1"
    assert me["role"] == "admin"

    context.sessions.create(context.catalog, "user-1")
    monkeypatch.setattr(context.auth, "current_user", lambda cookie: AuthUser(id="user-1"))
    monkeypatch.setattr(context.auth, "logout", lambda cookie: True)
    assert client.get("/api/auth/logout").json() == {"ok": True}
    assert len(context.sessions) == 0
