import datetime

from conftest import make_user
from models.users import AccessToken


def test_login_returns_bearer_token(client, db):
    make_user(db, "admin")

    resp = client.post("/login", json={"email": "admin@water.com", "password": "password"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["token_type"] == "Bearer"
    assert body["user"]["role"] == "admin"
    assert "password_hash" not in body["user"]
    assert len(body["token"]) == 64


def test_login_is_case_insensitive_on_email(client, db):
    make_user(db, "operator")
    resp = client.post("/login", json={"email": "Operator@Water.com", "password": "password"})
    assert resp.status_code == 200


def test_login_with_wrong_password(client, db):
    make_user(db, "admin")
    resp = client.post("/login", json={"email": "admin@water.com", "password": "nope"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid email or password"


def test_login_requires_fields(client):
    resp = client.post("/login", json={"email": "admin@water.com"})
    assert resp.status_code == 422
    assert "password" in resp.json()["errors"]


def test_current_user(client, admin_headers):
    resp = client.get("/user", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["email"] == "admin@water.com"


def test_missing_token_is_unauthenticated(client):
    resp = client.get("/user")
    assert resp.status_code == 401
    assert resp.json() == {"message": "Unauthenticated."}


def test_logout_revokes_only_that_token(client, db):
    make_user(db, "admin")
    first = client.post("/login", json={"email": "admin@water.com", "password": "password"}).json()["token"]
    second = client.post("/login", json={"email": "admin@water.com", "password": "password"}).json()["token"]

    resp = client.post("/logout", headers={"Authorization": f"Bearer {first}"})
    assert resp.status_code == 200

    assert client.get("/user", headers={"Authorization": f"Bearer {first}"}).status_code == 401
    assert client.get("/user", headers={"Authorization": f"Bearer {second}"}).status_code == 200


def test_expired_token_is_rejected(client, db, admin_headers):
    token = admin_headers["Authorization"].split()[1]
    db.query(AccessToken).filter(AccessToken.token == token).update(
        {"expires_at": datetime.datetime.now() - datetime.timedelta(minutes=1)}
    )
    db.commit()

    assert client.get("/user", headers=admin_headers).status_code == 401
    db.expire_all()
    assert db.query(AccessToken).filter(AccessToken.token == token).count() == 0
