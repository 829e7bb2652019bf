import pytest


@pytest.fixture
def manager(signup):
    return signup("maria@acme.io", manager=True, first_name="Maria")


@pytest.fixture
def member(signup):
    return signup("ursula@acme.io", first_name="Ursula")


def test_get_own_profile_only(client, manager, member):
    res = client.get(f"/api/users/{member['id']}", headers=member["headers"])
    assert res.status_code == 200
    assert res.json()["data"]["email"] == member["email"]
    assert "password_hash" not in res.json()["data"]

    assert client.get(f"/api/users/{manager['id']}", headers=member["headers"]).status_code == 403
    assert client.get("/api/users/missing-id", headers=member["headers"]).status_code == 404


def test_update_profile_keeps_role_and_email(client, member):
    res = client.patch("/api/users", json={"last_name": "Updated"}, headers=member["headers"])
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["first_name"] == "Ursula"
    assert data["last_name"] == "Updated"
    assert data["role"] == "User"
    assert data["email"] == member["email"]


def test_update_profile_ignores_role_field(client, member):
    res = client.patch("/api/users", json={"first_name": "Ursel", "role": "Manager"}, headers=member["headers"])
    assert res.status_code == 200
    assert res.json()["data"]["role"] == "User"


def test_block_user(client, manager, member):
    assert client.put(f"/api/users/blocked/{manager['id']}", headers=member["headers"]).status_code == 403

    res = client.put(f"/api/users/blocked/{member['id']}", headers=manager["headers"])
    assert res.status_code == 200
    assert res.json()["data"]["is_blocked"] is True

    res = client.get("/api/auth/me", headers=member["headers"])
    assert res.status_code == 403
    assert res.json()["detail"]["message"] == "account_blocked"

    assert client.put("/api/users/blocked/missing-id", headers=manager["headers"]).status_code == 404


def test_project_count_and_members(client, manager, member):
    assert client.get("/api/users/count", headers=manager["headers"]).status_code == 404
    assert client.get("/api/users/count", headers=member["headers"]).status_code == 403

    res = client.post("/api/projects", json={"name": "Launch", "description": "Q1 launch"}, headers=manager["headers"])
    pid = res.json()["data"]["id"]
    client.post("/api/projects", json={"name": "Ops", "description": "Ops backlog"}, headers=manager["headers"])
    client.post(f"/api/projects/{pid}/invite", json={"email": member["email"]}, headers=manager["headers"])
    client.post(f"/api/projects/{pid}/accept-invite", headers=member["headers"])

    res = client.get("/api/users/count", headers=manager["headers"])
    assert res.status_code == 200
    assert res.json()["data"]["project_count"] == 2

    res = client.get(f"/api/users/manager/{manager['id']}", headers=manager["headers"])
    assert res.status_code == 200
    projects = {p["project_name"]: p for p in res.json()["data"]["projects"]}
    assert projects["Launch"]["invite"]["id"] == member["id"]
    assert projects["Ops"]["invite"] is None
