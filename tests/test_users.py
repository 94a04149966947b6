# tests/test_users.py
from passlib.hash import bcrypt

from helpdesk.user.models import User


def _register(client, **overrides):
    body = {"username": "alice", "email": "alice@example.com", "password": "s3cret", "fullName": "Alice A"}
    body.update(overrides)
    return client.post("/api/users/register", json=body)


def test_register_and_fetch(client):
    r = _register(client)
    assert r.status_code == 201
    user = r.json()["user"]
    assert user["id"] == 1
    assert user["fullName"] == "Alice A"
    assert "password" not in user

    r2 = client.get(f"/api/users/{user['id']}")
    assert r2.status_code == 200
    assert r2.json()["email"] == "alice@example.com"
    assert "password" not in r2.json()


def test_register_requires_all_fields(client):
    r = client.post("/api/users/register", json={"username": "bob", "email": "bob@example.com"})
    assert r.status_code == 400


def test_register_duplicate_is_conflict(client):
    assert _register(client).status_code == 201
    assert _register(client, email="other@example.com").status_code == 409
    assert _register(client, username="other").status_code == 409


def test_login(client):
    _register(client)
    ok = client.post("/api/users/login", json={"email": "alice@example.com", "password": "s3cret"})
    assert ok.status_code == 200
    assert ok.json()["user"]["username"] == "alice"

    bad = client.post("/api/users/login", json={"email": "alice@example.com", "password": "nope"})
    assert bad.status_code == 401

    unknown = client.post("/api/users/login", json={"email": "x@example.com", "password": "s3cret"})
    assert unknown.status_code == 401

    missing = client.post("/api/users/login", json={"email": "alice@example.com"})
    assert missing.status_code == 400


def test_login_upgrades_legacy_bcrypt_hash(client, db):
    legacy_hash = bcrypt.hash("old-pass")
    db.add(User(id=1, username="carol", email="carol@example.com", password=legacy_hash, full_name="Carol"))
    db.commit()

    r = client.post("/api/users/login", json={"email": "carol@example.com", "password": "old-pass"})
    assert r.status_code == 200

    db.expire_all()
    assert db.get(User, 1).password.startswith("$pbkdf2-sha256$")


def test_change_password(client):
    uid = _register(client).json()["user"]["id"]

    wrong = client.put(f"/api/users/{uid}/password", json={"currentPassword": "bad", "newPassword": "n3w"})
    assert wrong.status_code == 401

    ok = client.put(f"/api/users/{uid}/password", json={"currentPassword": "s3cret", "newPassword": "n3w"})
    assert ok.status_code == 200
    assert ok.json()["message"] == "Password updated successfully"

    login = client.post("/api/users/login", json={"email": "alice@example.com", "password": "n3w"})
    assert login.status_code == 200
    assert login.json()["user"]["updatedAt"] is not None

    missing = client.put("/api/users/99/password", json={"currentPassword": "a", "newPassword": "b"})
    assert missing.status_code == 404


def test_list_users_is_brief(client):
    _register(client)
    _register(client, username="bob", email="bob@example.com")
    r = client.get("/api/users")
    assert r.status_code == 200
    assert r.json() == [{"id": 1, "username": "alice"}, {"id": 2, "username": "bob"}]


def test_get_unknown_user(client):
    r = client.get("/api/users/5")
    assert r.status_code == 404
    assert r.json()["detail"] == "User not found"
