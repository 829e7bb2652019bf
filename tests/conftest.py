import os
import re

# app 모듈 import 전에 환경변수 세팅 (Settings 는 import 시점에 읽힘)
os.environ.update(
    {
        "DATABASE_URL": "sqlite://",
        "AUTO_CREATE_TABLES": "false",
        "MAIL_BACKEND": "console",
        "JWT_SECRET": "test-secret",
        "BCRYPT_ROUNDS": "4",
        "PUBLIC_BASE_URL": "http://testserver",
    }
)

import pytest
from fastapi.testclient import TestClient

from app.db.base import Base, SessionLocal, engine, init_db
from app.main import app
from app.services import mail_service

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def tables():
    """Create a fresh schema for each test."""
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def outbox(monkeypatch):
    """Capture outgoing mail instead of sending it."""
    sent = []

    def fake_send_mail(to, subject, text):
        sent.append({"to": to, "subject": subject, "text": text})

    monkeypatch.setattr(mail_service, "send_mail", fake_send_mail)
    return sent


@pytest.fixture
def client(outbox):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def last_code(outbox, email):
    """Return the most recent 6-digit code mailed to ``email``."""
    for msg in reversed(outbox):
        if msg["to"] == email:
            match = re.search(r"\b(\d{6})\b", msg["text"])
            if match:
                return int(match.group(1))
    raise AssertionError(f"no code mailed to {email}")


def auth(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def signup(client, outbox):
    """Register, verify and log in a user. Returns id, email, token and headers."""

    def _signup(email, manager=False, first_name="Alice", last_name="Tester"):
        path = "/api/auth/register-manager" if manager else "/api/auth/register"
        res = client.post(
            path,
            json={"first_name": first_name, "last_name": last_name, "email": email, "password": PASSWORD},
        )
        assert res.status_code == 201, res.text

        res = client.post(
            "/api/auth/verify",
            json={"email": email, "verification_code": last_code(outbox, email)},
        )
        assert res.status_code == 200, res.text

        res = client.post("/api/auth/login", json={"email": email, "password": PASSWORD})
        assert res.status_code == 200, res.text
        data = res.json()["data"]
        return {
            "id": data["user"]["id"],
            "email": email,
            "token": data["access_token"],
            "headers": auth(data["access_token"]),
        }

    return _signup
