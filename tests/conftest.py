import os
import sys
import tempfile
import uuid

# Point the app at a throwaway SQLite file before anything imports config
_TEST_DB_DIR = tempfile.mkdtemp(prefix="gymbucket_test_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DB_DIR, 'test_gymbucket.db')}"
os.environ["SMTP_HOST"] = ""
os.environ["SEED_DEMO_DATA"] = "0"

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from fastapi.testclient import TestClient

from database import Base, engine, init_db
from main import app

STRONG_PASSWORD = "Trainer123!"


@pytest.fixture(autouse=True)
def fresh_db():
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    return TestClient(app)


def registration_payload(**overrides):
    payload = {
        "email": f"trainer_{uuid.uuid4().hex[:8]}@example.com",
        "password": STRONG_PASSWORD,
        "confirm_password": STRONG_PASSWORD,
        "first_name": "Kasia",
        "last_name": "Nowak",
        "phone": "600 100 200",
        "specializations": ["Strength training"],
        "experience": 5,
        "certification": "Personal Trainer Level 1",
        "accept_terms": True,
        "accept_newsletter": False
    }
    payload.update(overrides)
    return payload


def register_and_login(client, **overrides):
    payload = registration_payload(**overrides)
    res = client.post("/api/auth/register", json=payload)
    assert res.status_code == 200, res.text
    login = client.post("/api/auth/login", json={"email": payload["email"], "password": payload["password"]})
    assert login.status_code == 200, login.text
    data = login.json()
    return {
        "email": payload["email"],
        "user": data["user"],
        "token": data["token"],
        "refresh_token": data["refresh_token"],
        "headers": {"Authorization": f"Bearer {data['token']}"}
    }


@pytest.fixture
def trainer(client):
    return register_and_login(client)


@pytest.fixture
def auth_headers(trainer):
    return trainer["headers"]
