"""Registration, login and role gating."""

from datetime import timedelta

from models.users import UserType
from utils.tokenJWT import create_access_token

REGISTRATION = {
    "firstName": "Ewa",
    "lastName": "Nowak",
    "email": "Ewa.Nowak@clinic.com",
    "phoneNumber": "500600700",
    "password": "s3cret-pass",
    "type": "ADMIN",
}


def test_first_user_can_self_register(client):
    resp = client.post("/api/auth/register", json=REGISTRATION)

    assert resp.status_code == 201
    body = resp.json()
    assert body["token"]
    assert body["user"]["email"] == "ewa.nowak@clinic.com"
    assert body["user"]["type"] == "ADMIN"
    assert "passwordHash" not in body["user"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200
    assert me.json()["firstName"] == "Ewa"


def test_later_registrations_need_an_admin(client, admin, manager_headers, admin_headers):
    payload = dict(REGISTRATION, type="MANAGER")

    assert client.post("/api/auth/register", json=payload).status_code == 403
    assert client.post("/api/auth/register", json=payload, headers=manager_headers).status_code == 403

    resp = client.post("/api/auth/register", json=payload, headers=admin_headers)
    assert resp.status_code == 201
    assert resp.json()["user"]["type"] == "MANAGER"


def test_duplicate_email(client, admin, admin_headers):
    payload = dict(REGISTRATION, email="ADMIN@clinic.com")
    resp = client.post("/api/auth/register", json=payload, headers=admin_headers)

    assert resp.status_code == 400
    assert resp.json()["message"] == "User already exists"


def test_login(client, make_user):
    make_user("manager@clinic.com", UserType.MANAGER, password="right-password")

    ok = client.post("/api/auth/login", json={"email": "manager@clinic.com", "password": "right-password"})
    assert ok.status_code == 200
    assert ok.json()["user"]["type"] == "MANAGER"

    bad = client.post("/api/auth/login", json={"email": "manager@clinic.com", "password": "wrong"})
    assert bad.status_code == 400
    assert bad.json()["message"] == "Invalid credentials"

    unknown = client.post("/api/auth/login", json={"email": "nobody@clinic.com", "password": "x"})
    assert unknown.status_code == 400


def test_invalid_and_expired_tokens(client, admin):
    garbage = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert garbage.status_code == 401

    expired = create_access_token(admin, expires_delta=timedelta(minutes=-5))
    assert client.get("/api/auth/me", headers={"Authorization": f"Bearer {expired}"}).status_code == 401

    assert client.get("/api/auth/me").status_code == 401


def test_audit_log_is_admin_only(client, admin_headers, manager_headers, make_user):
    make_user("clerk@clinic.com", UserType.MANAGER, password="pw-123456")
    client.post("/api/auth/login", json={"email": "clerk@clinic.com", "password": "pw-123456"})

    assert client.get("/api/logs", headers=manager_headers).status_code == 403

    page = client.get("/api/logs", params={"action": "LOGIN"}, headers=admin_headers).json()
    assert page["total"] == 1
    assert page["items"][0]["status"] == "SUCCESS"
    assert page["pageSize"] == 20
