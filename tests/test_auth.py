"""Auth endpoint tests."""

import uuid


def _email(prefix):
    return f"{prefix}_{uuid.uuid4().hex[:8]}@test.com"


def test_register_and_login_happy_path(client):
    """Register -> login -> /me works."""
    email = _email("caller")
    reg = client.post(
        "/auth/register",
        json={"email": email, "password": "secret123", "name": "Test Caller", "phone": "+254700000001"},
    )
    assert reg.status_code == 200
    data = reg.json()
    assert data["email"] == email
    assert data["role"] == "user"
    assert data["vehicle_number"] is None
    assert "id" in data

    login = client.post("/auth/login", json={"email": email, "password": "secret123"})
    assert login.status_code == 200
    token = login.json()["access_token"]
    assert login.json()["token_type"] == "bearer"

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == email
    assert me.json()["role"] == "user"


def test_register_cannot_pick_a_role(client):
    """Drivers and admins are provisioned; registration always yields a user."""
    r = client.post(
        "/auth/register",
        json={"email": _email("sneaky"), "password": "pass", "name": "S", "role": "admin"},
    )
    assert r.status_code == 200
    assert r.json()["role"] == "user"


def test_duplicate_email_rejected(client):
    email = _email("dupe")
    body = {"email": email, "password": "pass", "name": "D"}
    assert client.post("/auth/register", json=body).status_code == 200
    r = client.post("/auth/register", json={**body, "email": email.upper()})
    assert r.status_code == 400


def test_wrong_password_fails(client):
    """Wrong password returns 401."""
    email = _email("fail")
    client.post("/auth/register", json={"email": email, "password": "right", "name": "Fail User"})
    login = client.post("/auth/login", json={"email": email, "password": "wrong"})
    assert login.status_code == 401


def test_me_requires_auth(client):
    """GET /auth/me returns 401 without token."""
    assert client.get("/auth/me").status_code == 401
    r = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


def test_driver_me_includes_vehicle(client, api_make, headers):
    driver = api_make.driver(vehicle_number="KCX 223H", location="Kilimani")
    r = client.get("/auth/me", headers=headers(driver))
    assert r.status_code == 200
    data = r.json()
    assert data["role"] == "driver"
    assert data["vehicle_number"] == "KCX 223H"
    assert data["available"] is True
    assert data["on_schedule"] is False
