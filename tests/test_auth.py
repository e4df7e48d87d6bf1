from datetime import datetime, timedelta, timezone

import jwt

from config import TestingConfig


def test_login_returns_token(client):
    resp = client.post("/api/auth/login", json={"username": "admin", "password": "admin123"})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["username"] == "admin"
    assert body["role"] == "admin"

    claims = jwt.decode(body["token"], TestingConfig.JWT_SECRET, algorithms=["HS256"])
    assert claims["username"] == "admin"
    assert claims["exp"] - claims["iat"] == 24 * 3600


def test_wrong_password_and_unknown_user_look_the_same(client):
    wrong = client.post("/api/auth/login", json={"username": "admin", "password": "nope"})
    again = client.post("/api/auth/login", json={"username": "admin", "password": "nope"})
    unknown = client.post("/api/auth/login", json={"username": "ghost", "password": "nope"})

    assert wrong.status_code == again.status_code == unknown.status_code == 403
    assert wrong.get_json() == again.get_json() == unknown.get_json() == {
        "kind": "AuthRejected",
        "message": "Invalid credentials",
    }


def test_unknown_user_still_checks_a_password_hash(client, monkeypatch):
    import models.admin

    calls = []
    real_check = models.admin.check_password_hash

    def counting_check(hashed, password):
        calls.append(hashed)
        return real_check(hashed, password)

    monkeypatch.setattr(models.admin, "check_password_hash", counting_check)

    resp = client.post("/api/auth/login", json={"username": "ghost", "password": "nope"})

    assert resp.status_code == 403
    assert len(calls) == 1


def test_non_text_credentials_are_rejected(client):
    resp = client.post("/api/auth/login", json={"username": {"$ne": None}, "password": 5})

    assert resp.status_code == 403
    assert resp.get_json()["kind"] == "AuthRejected"


def test_login_body_must_be_an_object(client):
    resp = client.post("/api/auth/login", json=["admin", "admin123"])

    assert resp.status_code == 400


def test_missing_token_is_auth_required(client):
    resp = client.get("/api/sections/first-year")

    assert resp.status_code == 401
    assert resp.get_json()["kind"] == "AuthRequired"


def test_garbage_token_is_rejected(client):
    resp = client.get("/api/sections/first-year", headers={"Authorization": "Bearer not-a-jwt"})

    assert resp.status_code == 403
    assert resp.get_json()["kind"] == "AuthRejected"


def test_expired_token_is_rejected(client):
    past = datetime.now(timezone.utc) - timedelta(hours=25)
    token = jwt.encode(
        {"id": "x", "username": "admin", "role": "admin", "iat": past, "exp": past + timedelta(hours=1)},
        TestingConfig.JWT_SECRET,
        algorithm="HS256",
    )

    resp = client.get("/api/sections/first-year", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 403


def test_me_returns_claims(client, auth_headers):
    resp = client.get("/api/auth/me", headers=auth_headers)

    assert resp.status_code == 200
    assert resp.get_json()["username"] == "admin"


def test_seed_admin_is_created_once(app, db):
    from utils.db import initialize_database

    initialize_database(db, app.config)
    initialize_database(db, app.config)

    assert db.admins.count_documents({}) == 1
