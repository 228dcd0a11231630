from __future__ import annotations

from flask import Flask
from flask.testing import FlaskClient

from useraccounts.domain.users.entities import UserRole

REGISTRATION = {
    "first_name": "ada",
    "last_name": "lovelace",
    "email": "a@x.com",
    "dob": "1990-12-10",
    "password": "s3cret-pass",
}


def _register(client: FlaskClient, **overrides: str) -> tuple[dict, str]:
    response = client.post("/api/user", json={**REGISTRATION, **overrides})
    assert response.status_code == 201, response.get_json()
    return response.get_json(), response.headers["authorization"]


def _auth(token: str) -> dict[str, str]:
    return {"authorization": token}


def test_status(client: FlaskClient) -> None:
    response = client.get("/api/status")

    assert response.status_code == 200
    assert response.get_json() == {"message": "System is working fine", "database": "ok"}
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Request-ID"]


def test_session_lifecycle(client: FlaskClient) -> None:
    user, token = _register(client)
    assert user["first_name"] == "Ada"
    assert user["last_name"] == "Lovelace"
    assert user["dob"] == "1990-12-10"
    assert user["user_role"] == "User"
    assert "salt" not in user and "hash" not in user

    duplicate = client.post("/api/user", json=REGISTRATION)
    assert duplicate.status_code == 400
    assert duplicate.get_json()["code"] == "EMAIL_ADDRESS_DUPLICATION"

    login = client.post("/api/login", json={"email": "a@x.com", "password": "s3cret-pass"})
    assert login.status_code == 200
    login_token = login.headers["authorization"]
    assert login_token

    wrong = client.post("/api/login", json={"email": "a@x.com", "password": "nope"})
    assert wrong.status_code == 401
    assert wrong.get_json()["message"] == "Invalid user credentials found"

    unknown = client.post("/api/login", json={"email": "b@x.com", "password": "nope"})
    assert unknown.status_code == 404

    me = client.get(f"/api/user/{user['id']}", headers=_auth(login_token))
    assert me.status_code == 200
    assert me.get_json()["email"] == "a@x.com"

    logout = client.get("/api/logout", headers=_auth(login_token))
    assert logout.status_code == 200
    assert logout.get_json() == {"message": "User successfully logout from system"}

    reused = client.get(f"/api/user/{user['id']}", headers=_auth(login_token))
    assert reused.status_code == 401
    assert reused.get_json()["message"] == "Given token has been expired"

    # the registration session is independent of the one that logged out
    still_valid = client.get(f"/api/user/{user['id']}", headers=_auth(f"Bearer {token}"))
    assert still_valid.status_code == 200


def test_missing_and_bad_tokens(client: FlaskClient) -> None:
    missing = client.get("/api/user")
    assert missing.status_code == 401
    assert missing.get_json()["message"] == "Access token not found"

    garbage = client.get("/api/user", headers=_auth("garbage"))
    assert garbage.status_code == 401
    assert garbage.get_json()["message"] == "Invalid access token found"


def test_change_password(client: FlaskClient) -> None:
    user, token = _register(client)
    url = f"/api/user/{user['id']}/changePassword"

    wrong = client.put(
        url,
        json={"current_password": "nope", "new_password": "n3w-pass"},
        headers=_auth(token),
    )
    assert wrong.status_code == 401
    assert wrong.get_json()["message"] == "Credentials does not match. Please try again"

    ok = client.put(
        url,
        json={"current_password": "s3cret-pass", "new_password": "n3w-pass"},
        headers=_auth(token),
    )
    assert ok.status_code == 200
    assert ok.get_json()["version"] == user["version"] + 1

    old = client.post("/api/login", json={"email": "a@x.com", "password": "s3cret-pass"})
    assert old.status_code == 401
    new = client.post("/api/login", json={"email": "a@x.com", "password": "n3w-pass"})
    assert new.status_code == 200


def test_update_and_owner_gate(client: FlaskClient) -> None:
    alice, alice_token = _register(client, email="alice@x.com")
    bob, bob_token = _register(client, email="bob@x.com")

    forbidden = client.put(
        f"/api/user/{alice['id']}", json={"first_name": "eve"}, headers=_auth(bob_token)
    )
    assert forbidden.status_code == 403
    assert forbidden.get_json()["message"] == "Access denied for a specific route"

    empty = client.put(f"/api/user/{alice['id']}", json={}, headers=_auth(alice_token))
    assert empty.status_code == 412
    assert empty.get_json()["code"] == "PRECONDITION_FAILED"

    taken = client.put(
        f"/api/user/{alice['id']}", json={"email": "bob@x.com"}, headers=_auth(alice_token)
    )
    assert taken.status_code == 400
    assert taken.get_json()["errors"][0]["path"] == ["update_body", "email"]

    updated = client.put(
        f"/api/user/{alice['id']}", json={"last_name": "smith"}, headers=_auth(alice_token)
    )
    assert updated.status_code == 200
    assert updated.get_json()["last_name"] == "Smith"

    # any authenticated user may read another profile
    assert client.get(f"/api/user/{alice['id']}", headers=_auth(bob_token)).status_code == 200


def test_admin_may_manage_other_users(app: Flask, client: FlaskClient) -> None:
    target, target_token = _register(client, email="target@x.com")
    admin, _ = _register(client, email="admin@x.com")

    users = app.extensions["container"].user_repository
    record = users.find_by_id(admin["id"])
    record.user_role = UserRole.ADMIN
    users.save(record, is_update=True)

    login = client.post("/api/login", json={"email": "admin@x.com", "password": "s3cret-pass"})
    admin_token = login.headers["authorization"]

    renamed = client.put(
        f"/api/user/{target['id']}", json={"first_name": "renamed"}, headers=_auth(admin_token)
    )
    assert renamed.status_code == 200
    assert renamed.get_json()["first_name"] == "Renamed"

    deleted = client.delete(f"/api/user/{target['id']}", headers=_auth(admin_token))
    assert deleted.status_code == 200
    assert deleted.get_json()["id"] == target["id"]

    gone = client.get(f"/api/user/{target['id']}", headers=_auth(admin_token))
    assert gone.status_code == 404

    assert client.get("/api/user", headers=_auth(admin_token)).status_code == 200
    revoked = client.get("/api/user", headers=_auth(target_token))
    assert revoked.status_code == 401
    assert revoked.get_json()["message"] == "Given token has been expired"


def test_delete_self_revokes_token(client: FlaskClient) -> None:
    user, token = _register(client)

    deleted = client.delete(f"/api/user/{user['id']}", headers=_auth(token))
    assert deleted.status_code == 200

    after = client.get("/api/user", headers=_auth(token))
    assert after.status_code == 401
    assert after.get_json()["message"] == "Given token has been expired"


def test_list_users_paginates_and_filters(client: FlaskClient) -> None:
    _, token = _register(client, email="carol@x.com", first_name="carol")
    _register(client, email="alice@x.com", first_name="alice")
    _register(client, email="bob@x.com", first_name="bob")

    first = client.get("/api/user?sortBy=first_name&itemsPerPage=2", headers=_auth(token))
    assert first.status_code == 200
    assert [u["first_name"] for u in first.get_json()] == ["Alice", "Bob"]
    assert first.headers["x-items-count"] == "3"
    assert 'rel="next"' in first.headers["x-page-links"]

    second = client.get(
        "/api/user?sortBy=first_name&itemsPerPage=2&page=2", headers=_auth(token)
    )
    assert [u["first_name"] for u in second.get_json()] == ["Carol"]

    filtered = client.get("/api/user?first_name=bob", headers=_auth(token))
    assert [u["email"] for u in filtered.get_json()] == ["bob@x.com"]

    empty = client.get("/api/user?email=nobody@x.com", headers=_auth(token))
    assert empty.status_code == 204
    assert empty.headers["x-items-count"] == "0"
