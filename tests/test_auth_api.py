from datetime import datetime, timedelta

from jose import jwt

from auth import create_access_token, create_refresh_token, decode_token, is_token_expired
from config import SECRET_KEY, ALGORITHM
from conftest import STRONG_PASSWORD, registration_payload, register_and_login
from database import get_db_session
from models_orm import UserORM
from service_modules.password_reset_service import create_reset_token


def get_user(email):
    db = get_db_session()
    try:
        return db.query(UserORM).filter(UserORM.email == email).first()
    finally:
        db.close()


def set_active(email, active):
    db = get_db_session()
    try:
        user = db.query(UserORM).filter(UserORM.email == email).first()
        user.is_active = active
        db.commit()
    finally:
        db.close()


# --- TOKEN EXPIRY ---

def test_fresh_token_not_expired():
    token = create_access_token({"sub": "anna@example.com"})
    assert not is_token_expired(token)


def test_expired_token():
    token = create_access_token({"sub": "anna@example.com"}, expires_delta=timedelta(minutes=-1))
    assert is_token_expired(token)


def test_expiry_compared_with_given_clock():
    token = create_access_token({"sub": "anna@example.com"}, expires_delta=timedelta(minutes=30))
    exp = jwt.get_unverified_claims(token)["exp"]
    assert not is_token_expired(token, now=datetime.fromtimestamp(exp - 60))
    assert is_token_expired(token, now=datetime.fromtimestamp(exp + 1))


def test_expiry_ignores_signature():
    # Signed with another key: still readable for the expiry check
    token = jwt.encode({"sub": "x", "exp": datetime.utcnow() + timedelta(hours=1)}, "other-key", algorithm=ALGORITHM)
    assert not is_token_expired(token)


def test_undecodable_tokens_count_as_expired():
    assert is_token_expired(None)
    assert is_token_expired("")
    assert is_token_expired("not.a.token")
    assert is_token_expired(jwt.encode({"sub": "no-exp"}, SECRET_KEY, algorithm=ALGORITHM))


def test_refresh_token_claims():
    payload = decode_token(create_refresh_token("anna@example.com"))
    assert payload["sub"] == "anna@example.com"
    assert payload["type"] == "refresh"


# --- REGISTRATION ---

def test_register(client):
    payload = registration_payload(email="Anna.Kowalska@Example.com")
    res = client.post("/api/auth/register", json=payload)
    assert res.status_code == 200, res.text
    data = res.json()
    assert data["requires_verification"] is True
    assert data["user"]["email"] == "anna.kowalska@example.com"
    assert data["user"]["role"] == "trainer"
    assert data["user"]["certifications"] == ["Personal Trainer Level 1"]
    assert data["user"]["is_email_verified"] is False
    assert "hashed_password" not in data["user"]

    user = get_user("anna.kowalska@example.com")
    assert user.email_verification_token
    assert user.hashed_password != STRONG_PASSWORD


def test_register_validation_list(client):
    res = client.post("/api/auth/register", json={"email": "bad", "accept_terms": False})
    assert res.status_code == 400
    detail = res.json()["detail"]
    assert detail["message"] == "Registration validation failed"
    assert detail["errors"][:3] == ["First name is required", "Last name is required", "Invalid email format"]
    assert detail["errors"][-1] == "You must accept the terms and conditions"


def test_register_duplicate_email(client):
    payload = registration_payload()
    assert client.post("/api/auth/register", json=payload).status_code == 200
    res = client.post("/api/auth/register", json=dict(payload, email=payload["email"].upper()))
    assert res.status_code == 409


def test_check_email(client, trainer):
    assert client.get("/api/auth/check-email", params={"email": trainer["email"]}).json() == {"exists": True}
    assert client.get("/api/auth/check-email", params={"email": "nobody@example.com"}).json() == {"exists": False}


# --- LOGIN ---

def test_login_returns_tokens(client):
    payload = registration_payload()
    client.post("/api/auth/register", json=payload)

    res = client.post("/api/auth/login", json={"email": payload["email"], "password": STRONG_PASSWORD, "remember_me": True})
    assert res.status_code == 200
    data = res.json()
    assert data["expires_in"] == 3600
    assert data["user"]["last_login"] is not None

    claims = decode_token(data["token"])
    assert claims["sub"] == payload["email"]
    assert claims["user_id"] == data["user"]["id"]
    assert claims["role"] == "trainer"
    assert decode_token(data["refresh_token"])["type"] == "refresh"


def test_login_bad_credentials(client, trainer):
    assert client.post("/api/auth/login", json={"email": trainer["email"], "password": "Wrong123!"}).status_code == 401
    assert client.post("/api/auth/login", json={"email": "ghost@example.com", "password": STRONG_PASSWORD}).status_code == 401
    assert client.post("/api/auth/login", json={"email": trainer["email"]}).status_code == 400


def test_login_inactive_account(client, trainer):
    set_active(trainer["email"], False)
    res = client.post("/api/auth/login", json={"email": trainer["email"], "password": STRONG_PASSWORD})
    assert res.status_code == 403
    # Existing tokens stop working too
    assert client.get("/api/auth/me", headers=trainer["headers"]).status_code == 403


def test_me(client, trainer):
    res = client.get("/api/auth/me", headers=trainer["headers"])
    assert res.status_code == 200
    assert res.json()["email"] == trainer["email"]
    assert client.get("/api/auth/me").status_code == 401


def test_refresh(client, trainer):
    res = client.post("/api/auth/refresh", json={"refresh_token": trainer["refresh_token"]})
    assert res.status_code == 200
    data = res.json()
    assert client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['token']}"}).status_code == 200


def test_refresh_rejects_access_token(client, trainer):
    assert client.post("/api/auth/refresh", json={"refresh_token": trainer["token"]}).status_code == 401
    assert client.post("/api/auth/refresh", json={"refresh_token": "garbage"}).status_code == 401


def test_logout_and_health(client):
    assert client.post("/api/auth/logout").json()["success"] is True
    assert client.get("/api/auth/health").status_code == 200


# --- PASSWORD RESET ---

def test_forgot_password_does_not_leak_accounts(client, trainer):
    known = client.post("/api/auth/forgot-password", json={"email": trainer["email"]})
    unknown = client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})
    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json()


def test_reset_password_flow(client, trainer):
    db = get_db_session()
    try:
        user = db.query(UserORM).filter(UserORM.email == trainer["email"]).first()
        raw_token = create_reset_token(db, user)
    finally:
        db.close()

    res = client.get("/api/auth/reset-password/validate", params={"token": raw_token})
    assert res.status_code == 200
    assert res.json() == {"valid": True, "email": trainer["email"]}

    new_password = "NewPass456?"
    res = client.post("/api/auth/reset-password", json={
        "token": raw_token, "password": new_password, "confirm_password": new_password
    })
    assert res.status_code == 200, res.text

    assert client.post("/api/auth/login", json={"email": trainer["email"], "password": STRONG_PASSWORD}).status_code == 401
    assert client.post("/api/auth/login", json={"email": trainer["email"], "password": new_password}).status_code == 200

    # One shot
    again = client.post("/api/auth/reset-password", json={
        "token": raw_token, "password": new_password, "confirm_password": new_password
    })
    assert again.status_code == 400
    assert client.get("/api/auth/reset-password/validate", params={"token": raw_token}).status_code == 400


def test_reset_password_validation(client):
    res = client.post("/api/auth/reset-password", json={"token": "x", "password": "weak", "confirm_password": "weak"})
    assert res.status_code == 400
    assert "Password must be at least 8 characters long" in res.json()["detail"]["errors"]


# --- EMAIL VERIFICATION ---

def test_verify_email(client, trainer):
    token = get_user(trainer["email"]).email_verification_token

    assert client.post("/api/auth/verify-email", json={"token": token}).status_code == 200
    user = get_user(trainer["email"])
    assert user.is_email_verified
    assert user.email_verification_token is None

    assert client.post("/api/auth/verify-email", json={"token": token}).status_code == 400
    res = client.post("/api/auth/resend-verification", json={"email": trainer["email"]})
    assert res.status_code == 400


def test_resend_verification_rotates_token(client, trainer):
    old_token = get_user(trainer["email"]).email_verification_token
    res = client.post("/api/auth/resend-verification", json={"email": trainer["email"]})
    assert res.status_code == 200
    assert get_user(trainer["email"]).email_verification_token != old_token
    assert client.post("/api/auth/resend-verification", json={"email": "ghost@example.com"}).status_code == 404


def test_second_trainer_is_independent(client, trainer):
    other = register_and_login(client)
    assert other["user"]["id"] != trainer["user"]["id"]
