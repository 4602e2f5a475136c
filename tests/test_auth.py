from datetime import datetime, timedelta, timezone

from jose import jwt

from urban_harvest.utils.security import decode_access_token
from urban_harvest.utils.settings import JWT_SECRET


def _signup(client, **overrides):
    body = {
        "name": "Sahan Perera",
        "email": "sahan@example.com",
        "password": "Harvest123",
        "phone": "0771234567",
    }
    body.update(overrides)
    return client.post("/api/auth/signup", json=body)


def test_signup_returns_customer_token(client):
    r = _signup(client)
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "Account created successfully"
    assert "password_hash" not in body["user"]

    claims = decode_access_token(body["token"])
    assert claims["email"] == "sahan@example.com"
    assert claims["role"] == "customer"
    assert claims["id"] == body["user"]["user_id"]


def test_signup_requires_name_email_and_password(client):
    r = _signup(client, name=None)
    assert r.status_code == 400
    assert r.json()["error"] == "Name, email, and password are required"


def test_signup_rejects_bad_formats(client):
    assert _signup(client, email="not-an-email").json()["error"] == "Invalid email format"

    r = _signup(client, password="weakpass")
    assert r.status_code == 400
    assert r.json()["error"].startswith("Password must be at least 8 characters")

    r = _signup(client, phone="12345")
    assert r.status_code == 400
    assert r.json()["error"].startswith("Invalid phone number format")


def test_signup_accepts_international_phone(client):
    assert _signup(client, phone="+94771234567").status_code == 201


def test_signup_duplicate_email(client):
    assert _signup(client).status_code == 201
    r = _signup(client)
    assert r.status_code == 400
    assert r.json()["error"] == "Email already registered"


def test_login_success_and_failure(client):
    _signup(client)

    r = client.post("/api/auth/login", json={"email": "sahan@example.com", "password": "Harvest123"})
    assert r.status_code == 200
    assert r.json()["message"] == "Login successful"

    r = client.post("/api/auth/login", json={"email": "sahan@example.com", "password": "Wrong1234"})
    assert r.status_code == 401
    assert r.json()["error"] == "Invalid email or password"

    r = client.post("/api/auth/login", json={"email": "sahan@example.com"})
    assert r.status_code == 400
    assert r.json()["error"] == "Email and password are required"


def test_login_blocked_after_repeated_failures(client, limiter):
    _signup(client)
    bad = {"email": "sahan@example.com", "password": "Wrong1234"}

    for _ in range(limiter.max_attempts):
        assert client.post("/api/auth/login", json=bad).status_code == 401

    r = client.post("/api/auth/login", json={"email": "sahan@example.com", "password": "Harvest123"})
    assert r.status_code == 429
    assert r.json()["error"].startswith("Too many login attempts")


def test_successful_login_resets_failures(client, limiter):
    _signup(client)
    client.post("/api/auth/login", json={"email": "sahan@example.com", "password": "Wrong1234"})
    assert limiter.failures

    client.post("/api/auth/login", json={"email": "sahan@example.com", "password": "Harvest123"})
    assert not limiter.failures


def test_me(client, customer):
    user, headers = customer
    r = client.get("/api/auth/me", headers=headers)
    assert r.status_code == 200
    assert r.json()["user"]["email"] == user.email


def test_me_requires_token(client):
    r = client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.json()["error"] == "Access denied. Please login to continue."

    r = client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
    assert r.status_code == 401
    assert r.json()["error"] == "Invalid token"


def test_me_with_expired_token(client, customer):
    user, _ = customer
    token = jwt.encode(
        {
            "id": user.user_id,
            "email": user.email,
            "role": user.role,
            "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
        },
        JWT_SECRET,
        algorithm="HS256",
    )
    r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.json()["error"] == "Token expired. Please login again."
